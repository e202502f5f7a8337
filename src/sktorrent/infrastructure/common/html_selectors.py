"""CSS-selector-based HTML extraction with fallback chains.

Thin helpers over BeautifulSoup used by the tracker listing parser and
the IMDb scraper.  Extraction functions accept a primary selector and
optional *fallback_selectors*; the first selector that yields a match
wins, so a renamed CSS class on one page layout does not break parsing.
"""

from __future__ import annotations

import re

from bs4 import BeautifulSoup, Tag

_WHITESPACE_RE = re.compile(r"\s+")


def parse_html(html: str) -> BeautifulSoup:
    """Parse an HTML string into a BeautifulSoup tree (``lxml`` parser)."""
    return BeautifulSoup(html, "lxml")


def select_items(
    root: BeautifulSoup | Tag,
    selector: str,
    *fallback_selectors: str,
) -> list[Tag]:
    """Select elements via CSS with a fallback chain.

    Returns results from the **first** selector that matches at least one
    element.
    """
    for sel in (selector, *fallback_selectors):
        items = root.select(sel)
        if items:
            return items
    return []


def extract_text(
    element: BeautifulSoup | Tag,
    selector: str,
    *fallback_selectors: str,
    default: str = "",
) -> str:
    """Stripped text of the first matching, non-empty child element.

    With ``selector=""`` the element's own text is returned.
    """
    if selector == "":
        return element.get_text(strip=True) or default

    for sel in (selector, *fallback_selectors):
        match = element.select_one(sel)
        if match:
            text = match.get_text(strip=True)
            if text:
                return text
    return default


def extract_attr(
    element: BeautifulSoup | Tag,
    selector: str,
    attr: str,
    *fallback_selectors: str,
    default: str = "",
) -> str:
    """Attribute of the first matching child element.

    With ``selector=""`` the attribute is read from *element* itself.
    """
    if selector == "":
        val = element.get(attr)
        return str(val) if val else default

    for sel in (selector, *fallback_selectors):
        match = element.select_one(sel)
        if match:
            val = match.get(attr)
            if val:
                return str(val)
    return default


def enclosing(element: Tag, name: str) -> Tag | None:
    """Closest ancestor-or-self named *name* (like jQuery ``closest``)."""
    if element.name == name:
        return element
    return element.find_parent(name)


def flat_text(element: Tag) -> str:
    """All text under *element* with whitespace runs collapsed to one space."""
    return _WHITESPACE_RE.sub(" ", element.get_text(" ")).strip()
