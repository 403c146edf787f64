"""
Overlap / Ownership Resolver

Partitions depth into spans owned by exactly one casing segment.

Every counting segment contributes a candidate range [start_for_calc, depth].
The sweep walks the elementary intervals between all range boundaries; on
each interval the covering segment with the smallest inner diameter wins
(the narrowest conduit holds the fluid there). Equal IDs go to the
later-declared segment. Adjacent intervals with the same owner are merged.
"""

from __future__ import annotations

import logging
from bisect import bisect_right
from typing import Iterable, List, Optional, Tuple

from apps.schematic.models.segment import NormalizedSegment, OwnedSpan

logger = logging.getLogger(__name__)


class OwnershipPartition:
    """Ordered, disjoint owned spans with depth lookups."""

    def __init__(self, spans: List[OwnedSpan]):
        self.spans = sorted(spans, key=lambda s: s.start)
        self._starts = [s.start for s in self.spans]

    def __iter__(self):
        return iter(self.spans)

    def __len__(self) -> int:
        return len(self.spans)

    @property
    def bottom(self) -> float:
        return max((s.end for s in self.spans), default=0.0)

    def owner_at(self, depth: float) -> Optional[NormalizedSegment]:
        """Owning segment at depth (span end exclusive), None where nothing counts."""
        i = bisect_right(self._starts, depth) - 1
        if i < 0:
            return None
        span = self.spans[i]
        if span.start <= depth < span.end:
            return span.segment
        return None

    def spans_for(self, segment: NormalizedSegment) -> List[OwnedSpan]:
        return [s for s in self.spans if s.segment is segment]

    def spans_between(self, start: float, end: float) -> List[Tuple[OwnedSpan, float, float]]:
        """Owned spans intersected with [start, end], as (span, lo, hi) with hi > lo."""
        pieces = []
        for span in self.spans:
            lo = max(start, span.start)
            hi = min(end, span.end)
            if hi > lo:
                pieces.append((span, lo, hi))
        return pieces

    def boundaries(self) -> List[float]:
        points = set()
        for span in self.spans:
            points.add(span.start)
            points.add(span.end)
        return sorted(points)


def _wins_over(candidate: NormalizedSegment, current: NormalizedSegment) -> bool:
    if candidate.id < current.id:
        return True
    if candidate.id == current.id:
        return candidate.order > current.order
    return False


def resolve_ownership(segments: Iterable[NormalizedSegment]) -> OwnershipPartition:
    """
    Resolve overlapping candidate ranges into an ownership partition.

    Args:
        segments: Normalized segments; only those with should_count_volume take part

    Returns:
        OwnershipPartition whose spans are disjoint and cover exactly the
        union of the candidate ranges
    """
    candidates = [
        s for s in segments
        if s.should_count_volume and s.depth > s.start_for_calc
    ]
    if not candidates:
        return OwnershipPartition([])

    points = sorted({p for s in candidates for p in (s.start_for_calc, s.depth)})

    spans: List[OwnedSpan] = []
    for lo, hi in zip(points, points[1:]):
        if hi <= lo:
            continue
        owner: Optional[NormalizedSegment] = None
        for seg in candidates:
            if seg.start_for_calc <= lo and seg.depth >= hi:
                if owner is None or _wins_over(seg, owner):
                    owner = seg
        if owner is None:
            continue
        if spans and spans[-1].segment is owner and spans[-1].end == lo:
            spans[-1].end = hi
        else:
            spans.append(OwnedSpan(segment=owner, start=lo, end=hi))

    for span in spans:
        logger.debug(f"   {span.segment.label}: owns {span.start:.1f}-{span.end:.1f} m")
    return OwnershipPartition(spans)
