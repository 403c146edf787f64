"""
Well Schematic Segment Models

Dataclasses describing the casing/tubing strings of a wellbore and the
depth intervals they own. These are NOT Django ORM models - they're plain
Python dataclasses, built fresh for every computation call.

Depths are meters, diameters are inches, linear capacities are L/m.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


RISER = "riser"
CONDUCTOR = "conductor"
SURFACE = "surface"
INTERMEDIATE = "intermediate"
PRODUCTION = "production"
TIEBACK = "tieback"
RESERVOIR = "reservoir"
SMALL_LINER = "small_liner"
UPPER_COMPLETION = "upper_completion"
OPEN_HOLE = "open_hole"

# Declared order, shallow/outer -> deep/inner. Auto-chaining of missing tops and
# equal-ID ownership ties are derived from this sequence.
ROLES = (
    RISER,
    CONDUCTOR,
    SURFACE,
    INTERMEDIATE,
    PRODUCTION,
    TIEBACK,
    RESERVOIR,
    SMALL_LINER,
    UPPER_COMPLETION,
    OPEN_HOLE,
)
ROLE_ORDER = {role: i for i, role in enumerate(ROLES)}

INNER_STRING_ROLES = frozenset({UPPER_COMPLETION})

TUBING = "tubing"
DRILLPIPE = "drillpipe"


@dataclass
class Segment:
    """
    One casing/tubing string as supplied by the input-gathering layer.

    Every numeric field is already parsed; ``None`` means "absent".

    Attributes:
        role: One of ROLES
        depth: Bottom (shoe) depth in meters
        id: Inner diameter in inches
        od: Outer diameter in inches (open hole: defaults to id)
        top: Top depth in meters; None = auto-connect to the previous owned depth
        use: Whether the segment takes part in volume/drawing at all
        drift: Minimum internal diameter (fit check only)
        l_per_m: Linear bore capacity in L/m (inner strings)
        eod: Open-ended displacement in L/m (inner strings)
        tj: Tool-joint OD in inches (inner strings, fit check only)
        index: Position among segments sharing a role (tapered tubing)
    """
    role: str
    depth: Optional[float] = None
    id: Optional[float] = None
    od: Optional[float] = None
    top: Optional[float] = None
    use: bool = True
    drift: Optional[float] = None
    l_per_m: Optional[float] = None
    eod: Optional[float] = None
    tj: Optional[float] = None
    index: int = 0

    @property
    def label(self) -> str:
        if self.index:
            return f"{self.role}[{self.index}]"
        return self.role


@dataclass
class NormalizedSegment:
    """
    A segment after top resolution and exclusion rules.

    ``draw_start`` drives rendering, ``start_for_calc`` drives the ownership
    sweep. Both are None for invalid segments (missing depth or id).
    """
    segment: Segment
    order: int
    draw_start: Optional[float] = None
    start_for_calc: Optional[float] = None
    valid: bool = True
    excluded: bool = False
    should_draw: bool = False
    should_count_volume: bool = False

    @property
    def role(self) -> str:
        return self.segment.role

    @property
    def label(self) -> str:
        return self.segment.label

    @property
    def id(self) -> Optional[float]:
        return self.segment.id

    @property
    def od(self) -> Optional[float]:
        return self.segment.od

    @property
    def depth(self) -> Optional[float]:
        return self.segment.depth

    @property
    def top(self) -> Optional[float]:
        return self.segment.top

    @property
    def use(self) -> bool:
        return self.segment.use

    @property
    def is_inner_string(self) -> bool:
        return self.segment.role in INNER_STRING_ROLES

    @property
    def physical_length(self) -> Optional[float]:
        """Shoe minus draw start, reported even for excluded segments."""
        if not self.valid or self.draw_start is None:
            return None
        return max(0.0, self.segment.depth - self.draw_start)


@dataclass
class OwnedSpan:
    """A depth interval assigned to exactly one segment for volume accounting."""
    segment: NormalizedSegment
    start: float
    end: float

    @property
    def length(self) -> float:
        return self.end - self.start


@dataclass
class InnerStringSection:
    """
    One section of a tubing or drill-pipe string.

    Bore area comes from ``id`` or ``l_per_m``; which one wins depends on
    the string kind (catalog drill pipe is quoted in L/m).
    """
    kind: str
    label: str
    top: float
    bottom: float
    od: Optional[float] = None
    id: Optional[float] = None
    l_per_m: Optional[float] = None
    eod: Optional[float] = None
    tj: Optional[float] = None

    @property
    def length(self) -> float:
        return max(0.0, self.bottom - self.top)

    def contains(self, depth: float) -> bool:
        return self.top <= depth < self.bottom


@dataclass
class InnerString:
    """A tubing (upper completion) or drill-pipe string, sections ordered top-down."""
    kind: str
    sections: List[InnerStringSection] = field(default_factory=list)

    @property
    def active(self) -> bool:
        return any(s.length > 0 for s in self.sections)

    @property
    def top(self) -> float:
        return min((s.top for s in self.sections), default=0.0)

    @property
    def shoe(self) -> float:
        return max((s.bottom for s in self.sections), default=0.0)

    def section_at(self, depth: float) -> Optional[InnerStringSection]:
        """Innermost (smallest OD) section present at depth, if any."""
        present = [s for s in self.sections if s.contains(depth)]
        if not present:
            return None
        return min(present, key=lambda s: s.od if s.od is not None else float("inf"))
