from datetime import tzinfo
from typing import Iterable, List, Optional

from features.forecast.models.forecast_types import Observation

COLUMNS = [
    ("Time", 17),
    ("Wind", 6),
    ("Dir", 4),
    ("Status", 12),
    ("Wave", 6),
    ("WDir", 4),
    ("Period", 6),
    ("Temp", 5)
]

def _cell(value: Optional[object], suffix: str = "") -> str:
    if value is None:
        return "-"
    return f"{value}{suffix}"

def format_header() -> str:
    return " ".join(name.ljust(width) for name, width in COLUMNS).rstrip()

def format_row(observation: Observation, tz: Optional[tzinfo] = None) -> str:
    """Render an observation as one fixed-width table line."""
    timestamp = observation.timestamp.astimezone(tz) if tz else observation.timestamp
    wave_height = f"{observation.wave_height:.1f}m" if observation.wave_height is not None else None
    cells = [
        timestamp.strftime("%Y-%m-%d %H:%M"),
        f"{observation.wind_speed:.0f}kn",
        observation.wind_direction,
        observation.wind_status,
        _cell(wave_height),
        _cell(observation.wave_direction),
        _cell(observation.wave_period, "s"),
        _cell(observation.air_temperature, "°C")
    ]
    return " ".join(
        cell.ljust(width) for cell, (_, width) in zip(cells, COLUMNS)
    ).rstrip()

def format_table(observations: Iterable[Observation], tz: Optional[tzinfo] = None) -> List[str]:
    return [format_header()] + [format_row(observation, tz) for observation in observations]
