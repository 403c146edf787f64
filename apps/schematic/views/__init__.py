from .volume import ComputeVolumesView, GatherVolumesView, VolumeBreakdownView  # noqa: F401
from .calculators import FlowVelocityView, PressureTestView, StringLiftView, CatalogsView  # noqa: F401
