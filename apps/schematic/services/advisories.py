from typing import Any, Dict, Optional


MAJOR = "major"
MINOR = "minor"


class WCodes:
    UNKNOWN_ROLE = "UNKNOWN_ROLE"
    INVALID_NUMBER = "INVALID_NUMBER"
    OD_BELOW_ID = "OD_BELOW_ID"
    OPEN_HOLE_WITHOUT_SHOE = "OPEN_HOLE_WITHOUT_SHOE"
    UC_DRIFT_FIT = "UC_DRIFT_FIT"
    MISSING_FIELD = "MISSING_FIELD"
    STRING_OD_MISSING = "STRING_OD_MISSING"
    DRILL_PIPE_SIZE_UNKNOWN = "DRILL_PIPE_SIZE_UNKNOWN"


def make_warning(
    code: str,
    severity: str,
    message: str,
    context: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    return {
        "code": code,
        "severity": severity,
        "message": message,
        "context": context or {},
    }
