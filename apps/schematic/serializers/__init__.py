from .volume import (  # noqa: F401
    SegmentSerializer,
    VolumeOptionsSerializer,
    ComputeVolumesRequestSerializer,
    BreakdownRequestSerializer,
)
from .calculators import (  # noqa: F401
    FlowVelocityRequestSerializer,
    PressureTestRequestSerializer,
    StringLiftRequestSerializer,
)
