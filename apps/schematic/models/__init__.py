from .segment import (  # noqa: F401
    ROLES,
    ROLE_ORDER,
    INNER_STRING_ROLES,
    TUBING,
    DRILLPIPE,
    Segment,
    NormalizedSegment,
    OwnedSpan,
    InnerStringSection,
    InnerString,
)
from .result import (  # noqa: F401
    DrillPipeOptions,
    VolumeOptions,
    CasingVolume,
    DrawEntry,
    StringInterval,
    StringDecomposition,
    VolumeResult,
)
