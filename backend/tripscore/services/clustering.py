import math
from typing import Any, Optional

# Decimal places kept when grouping coordinates. 2 places is a ~1.1km cell,
# wide enough to absorb GPS jitter but narrow enough to keep nearby sights apart.
DEFAULT_PRECISION = 2


def is_valid_coordinate(lat: Any, lng: Any) -> bool:
    """
    Check whether a coordinate pair can take part in clustering.

    Missing, zero, NaN, infinite and non-numeric values on either axis are
    rejected. Zero is treated as "no location" because legacy and manual-only
    records store 0 when nothing was captured.
    """
    for value in (lat, lng):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return False
        if not math.isfinite(value) or value == 0:
            return False
    return True


def round_coordinate(value: float, precision: int = DEFAULT_PRECISION) -> float:
    """Round half-up to ``precision`` decimal places."""
    factor = 10 ** precision
    return math.floor(value * factor + 0.5) / factor


def cluster_key(lat: float, lng: float, precision: int = DEFAULT_PRECISION) -> str:
    """
    Build the deduplication key for a coordinate pair.

    Two visits are the same place iff their keys are equal.
    """
    return f"{round_coordinate(lat, precision):.{precision}f},{round_coordinate(lng, precision):.{precision}f}"


def cluster_key_or_none(lat: Any, lng: Any, precision: int = DEFAULT_PRECISION) -> Optional[str]:
    """Cluster key for valid coordinates, ``None`` for anything else."""
    if not is_valid_coordinate(lat, lng):
        return None
    return cluster_key(lat, lng, precision)
