import math
from enum import Enum
from typing import Any

class CompassPoint(str, Enum):
    """16-point compass rose, clockwise from north."""
    N = "N"
    NNE = "NNE"
    NE = "NE"
    ENE = "ENE"
    E = "E"
    ESE = "ESE"
    SE = "SE"
    SSE = "SSE"
    S = "S"
    SSW = "SSW"
    SW = "SW"
    WSW = "WSW"
    W = "W"
    WNW = "WNW"
    NW = "NW"
    NNW = "NNW"

COMPASS_POINTS = tuple(CompassPoint)
SECTOR_DEGREES = 360 / len(COMPASS_POINTS)  # 22.5

def direction_for(angle: Any) -> str:
    """Map a bearing in degrees to one of the 16 compass labels.

    Out of range and negative bearings wrap around. Missing or unparseable
    bearings resolve to north.
    """
    try:
        degrees = float(angle)
    except (TypeError, ValueError):
        return CompassPoint.N.value

    if not math.isfinite(degrees):
        return CompassPoint.N.value

    # Python's % is a true modulo, so negative sectors wrap to a valid index
    index = round(degrees / SECTOR_DEGREES) % len(COMPASS_POINTS)
    return COMPASS_POINTS[index].value

def sector_of(label: str) -> int:
    """Index of a compass label on the 16-point rose."""
    return COMPASS_POINTS.index(CompassPoint(label))
