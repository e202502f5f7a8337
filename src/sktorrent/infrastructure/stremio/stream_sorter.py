"""Deduplication and ranking of stream candidates.

The tracker offers no quality metadata worth trusting, so ranking is by
seed count only.  Sorting is stable: equally seeded candidates keep the
order in which the pipeline produced them.
"""

from __future__ import annotations

from collections.abc import Iterable

from sktorrent.domain.entities.stremio import StreamCandidate


def deduplicate(candidates: Iterable[StreamCandidate]) -> list[StreamCandidate]:
    """Drop repeated (content_id, file_index) pairs; first occurrence wins."""
    seen: set[tuple[str, int | None]] = set()
    result: list[StreamCandidate] = []
    for c in candidates:
        if c.dedup_key in seen:
            continue
        seen.add(c.dedup_key)
        result.append(c)
    return result


class StreamSorter:
    """Ranking: seed count, best first."""

    def rank(self, candidate: StreamCandidate) -> int:
        return candidate.seed_count

    def sort(self, candidates: Iterable[StreamCandidate]) -> list[StreamCandidate]:
        """Deduplicate, then sort descending by seeds. Returns a new list."""
        unique = deduplicate(candidates)
        unique.sort(key=self.rank, reverse=True)
        return unique


def rank_candidates(candidates: Iterable[StreamCandidate]) -> list[StreamCandidate]:
    """Deduplicate and rank with the default :class:`StreamSorter`."""
    return StreamSorter().sort(candidates)
