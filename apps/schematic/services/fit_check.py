"""
Upper completion fit check.

Advisory only: flags enclosing casings whose drift is smaller than the
tubing tool-joint OD. Never changes any volume.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from apps.schematic.models.segment import OPEN_HOLE, UPPER_COMPLETION
from apps.schematic.services.advisories import MAJOR, WCodes, make_warning
from apps.schematic.services.catalogs import default_drift, default_tool_joint
from apps.schematic.services.segment_normalizer import Normalization

logger = logging.getLogger(__name__)


def check_upper_completion_fit(normalization: Normalization) -> List[Dict[str, Any]]:
    findings: List[Dict[str, Any]] = []

    for uc in normalization.inner_segments:
        if not uc.should_draw:
            continue
        tj = uc.segment.tj or default_tool_joint(UPPER_COMPLETION, uc.id) or uc.od
        if not tj:
            continue

        for casing in normalization.casings:
            if not casing.should_draw or casing.role == OPEN_HOLE:
                continue
            # Only casings that enclose the whole section
            if casing.draw_start > uc.draw_start or casing.depth < uc.depth:
                continue
            drift = casing.segment.drift or default_drift(casing.role, casing.id)
            if drift is None or tj <= drift:
                continue

            logger.warning(f"⚠️  {uc.label} tool joint {tj}\" exceeds {casing.label} drift {drift}\"")
            findings.append(make_warning(
                WCodes.UC_DRIFT_FIT, MAJOR,
                f"{uc.label} tool joint OD {tj}\" does not pass {casing.label} drift {drift}\"",
                {"role": casing.role, "drift": drift, "tj": tj, "string": uc.label},
            ))

    return findings
