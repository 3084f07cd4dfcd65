from typing import Callable, Dict, Optional, Protocol

from features.forecast.models.compass import COMPASS_POINTS, sector_of

class WindStatusPolicy(Protocol):
    """Classifies a forecast slot from its wind and wave directions."""
    def __call__(self, wind_direction: str, wave_direction: Optional[str]) -> str: ...

PLACEHOLDER_STATUS = "status"

def placeholder_wind_status(wind_direction: str, wave_direction: Optional[str]) -> str:
    return PLACEHOLDER_STATUS

def relative_wind_status(wind_direction: str, wave_direction: Optional[str]) -> str:
    """Label the wind by its angle to the incoming waves.

    Waves roll in from the sea, so wind from the same sector blows onshore and
    wind from the opposite sector blows offshore. One sector of tolerance on
    each side.
    """
    if wave_direction is None:
        return "unknown"

    points = len(COMPASS_POINTS)
    offset = (sector_of(wind_direction) - sector_of(wave_direction)) % points
    distance = min(offset, points - offset)

    if distance <= 1:
        return "onshore"
    if distance >= points // 2 - 1:
        return "offshore"
    return "cross-shore"

WIND_STATUS_POLICIES: Dict[str, Callable[[str, Optional[str]], str]] = {
    "placeholder": placeholder_wind_status,
    "relative": relative_wind_status
}

def get_wind_status_policy(name: str) -> WindStatusPolicy:
    try:
        return WIND_STATUS_POLICIES[name]
    except KeyError:
        raise ValueError(
            f"Unknown wind status policy '{name}', expected one of {sorted(WIND_STATUS_POLICIES)}"
        )
