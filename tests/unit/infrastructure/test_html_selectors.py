"""Tests for the CSS-selector extraction helpers."""

from __future__ import annotations

from sktorrent.infrastructure.common.html_selectors import (
    enclosing,
    extract_attr,
    extract_text,
    flat_text,
    parse_html,
    select_items,
)

_HTML = """
<div class="row">
  <p class="cell"><a href="details.php?id=5" title="Name"><img src="x.jpg"></a>
    <b>Filmy</b>   Velkost
      1 GB
  </p>
  <span class="empty"></span>
  <span class="alt">Fallback</span>
</div>
"""


class TestSelectItems:
    def test_first_matching_selector_wins(self) -> None:
        soup = parse_html(_HTML)
        items = select_items(soup, ".missing", "span.alt", "span")
        assert [i.get_text() for i in items] == ["Fallback"]

    def test_no_match(self) -> None:
        assert select_items(parse_html(_HTML), ".nope") == []


class TestExtractText:
    def test_skips_empty_matches(self) -> None:
        soup = parse_html(_HTML)
        assert extract_text(soup, "span.empty", "span.alt") == "Fallback"

    def test_default(self) -> None:
        assert extract_text(parse_html(_HTML), ".nope", default="-") == "-"

    def test_own_text(self) -> None:
        b = parse_html(_HTML).select_one("b")
        assert b is not None
        assert extract_text(b, "") == "Filmy"


class TestExtractAttr:
    def test_child_attr(self) -> None:
        soup = parse_html(_HTML)
        assert extract_attr(soup, "a", "href") == "details.php?id=5"

    def test_own_attr(self) -> None:
        a = parse_html(_HTML).select_one("a")
        assert a is not None
        assert extract_attr(a, "", "title") == "Name"
        assert extract_attr(a, "", "rel", default="none") == "none"


class TestEnclosing:
    def test_finds_ancestor(self) -> None:
        img = parse_html("<table><tr><td><a><img></a></td></tr></table>").select_one(
            "img"
        )
        assert img is not None
        anchor = enclosing(img, "a")
        assert anchor is not None and anchor.name == "a"
        cell = enclosing(anchor, "td")
        assert cell is not None and cell.name == "td"

    def test_self_matches(self) -> None:
        a = parse_html("<a>x</a>").select_one("a")
        assert a is not None
        assert enclosing(a, "a") is a

    def test_missing(self) -> None:
        img = parse_html("<div><img></div>").select_one("img")
        assert img is not None
        assert enclosing(img, "td") is None


class TestFlatText:
    def test_collapses_whitespace(self) -> None:
        div = parse_html("<div> a\n\n  <b>b</b>\t c </div>").select_one("div")
        assert div is not None
        assert flat_text(div) == "a b c"
