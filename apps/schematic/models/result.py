"""
Volume computation options and results.

Plain dataclasses; ``VolumeResult.to_dict()`` is what the API and the CLI emit.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class DrillPipeOptions:
    mode: str = "tubing"
    pipes: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def is_drillpipe(self) -> bool:
        return self.mode == "drillpipe"


@dataclass
class VolumeOptions:
    """
    Options for a single engine call.

    ``surface_in_use`` / ``intermediate_in_use`` left as None are derived
    from the segments themselves.
    """
    plug_enabled: bool = False
    plug_depth_val: Optional[float] = None
    surface_in_use: Optional[bool] = None
    intermediate_in_use: Optional[bool] = None
    drill_pipe: Optional[DrillPipeOptions] = None
    subtract_eod: bool = True

    @property
    def plug_active(self) -> bool:
        return self.plug_enabled and self.plug_depth_val is not None

    @property
    def dp_requested(self) -> bool:
        return self.drill_pipe is not None and self.drill_pipe.is_drillpipe


@dataclass
class CasingVolume:
    role: str
    index: int
    use: bool
    volume: float = 0.0
    included_length: float = 0.0
    per_meter_m3: float = 0.0
    physical_length: Optional[float] = None
    excluded: bool = False


@dataclass
class DrawEntry:
    role: str
    id: Optional[float]
    od: Optional[float]
    depth: float
    prev_depth: float
    z: int
    index: int = 0


@dataclass
class StringInterval:
    """Elementary interval of an inner string against the ownership partition."""
    start: float
    end: float
    section_label: str
    container: Optional[str]
    bore_volume: float
    annulus_volume: float
    displacement: float
    below_poi: bool = False

    @property
    def length(self) -> float:
        return self.end - self.start


@dataclass
class StringDecomposition:
    """Above/below POI split of an inner string and the casing around it."""
    kind: str
    shoe: float = 0.0
    bore_above: float = 0.0
    bore_below: float = 0.0
    annulus_above: float = 0.0
    annulus_below: float = 0.0
    displacement_above: float = 0.0
    displacement_below: float = 0.0
    open_casing_above: float = 0.0
    open_casing_below: float = 0.0
    casing_below_shoe: float = 0.0
    intervals: List[StringInterval] = field(default_factory=list)


@dataclass
class VolumeResult:
    total_volume: float = 0.0
    per_casing_volumes: List[CasingVolume] = field(default_factory=list)
    casings_to_draw: List[DrawEntry] = field(default_factory=list)
    plug_above_volume: float = 0.0
    plug_below_volume: float = 0.0
    plug_below_volume_tubing: float = 0.0
    plug_above_tubing: float = 0.0
    plug_below_tubing: float = 0.0
    plug_above_annulus: float = 0.0
    plug_below_annulus: float = 0.0
    plug_above_tubing_open_casing: float = 0.0
    plug_below_tubing_open_casing: float = 0.0
    casing_volume_below_tubing_shoe: float = 0.0
    plug_above_drillpipe: float = 0.0
    plug_below_drillpipe: float = 0.0
    plug_above_drillpipe_annulus: float = 0.0
    plug_below_drillpipe_annulus: float = 0.0
    plug_above_drillpipe_open_casing: float = 0.0
    plug_below_drillpipe_open_casing: float = 0.0
    uc_active: bool = False
    dp_mode: bool = False
    dp_total_depth: float = 0.0
    plug_depth_val: Optional[float] = None
    string_crosses_poi: bool = False
    warnings: List[Dict[str, Any]] = field(default_factory=list)

    def volume_for(self, role: str, index: int = 0) -> float:
        for entry in self.per_casing_volumes:
            if entry.role == role and entry.index == index:
                return entry.volume
        return 0.0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
