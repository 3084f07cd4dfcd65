from datetime import datetime, timedelta, timezone
from typing import List, Optional, Sequence

import pytest

from features.forecast.models.forecast_types import ForecastSnapshot, Observation

SPOT_NAME = "Els Poblets"

RECORDS = """[
    {"dtl": "2026-10-18T12:00:00+02:00", "wd": 180, "ws": 12.5, "wad": 200, "wh": 1.2,
     "hist": [[1, 2], [3, [4]]], "note": "gusty ] later"},
    {"dtl": "2026-10-18T13:00:00+02:00", "wd": 349, "ws": 10, "wad": null, "wh": null},
    {"dtl": "2026-10-18T15:00:00+02:00", "wd": null, "ws": null}
]"""

def build_page(
    records: Optional[str] = RECORDS,
    spot_name: Optional[str] = f"  {SPOT_NAME}\n ",
    temperatures: Sequence[str] = ("18", "19"),
    periods: Sequence[str] = ("6 s", "7 s", "n/a"),
    data_key: str = "fcData"
) -> str:
    """Render a minimal Windfinder-like spot page."""
    scripts = ["<script>window.ctx = window.ctx || [];</script>"]
    if records is not None:
        scripts.append(
            "<script>window.ctx.push({ spot: {\"id\": 42, \"tags\": [\"a\", [\"b\"]]}, "
            f"{data_key}: {records}, meta: {{\"units\": [\"kts\", \"m\"]}} }});</script>"
        )

    spot = f'<span id="spotheader-spotname">{spot_name}</span>' if spot_name is not None else ""
    temperature_cells = "".join(
        f'<div class="data-temp data--major weathertable__cell"><span class="units-at">{t}</span> °C</div>'
        for t in temperatures
    )
    period_cells = "".join(
        f'<div class="data-wavefreq data--minor weathertable__cell">{p}</div>'
        for p in periods
    )
    return (
        "<html><head>" + "".join(scripts) + "</head><body>"
        f"<h1>{spot}</h1>"
        f'<div class="weathertable">{temperature_cells}{period_cells}</div>'
        "</body></html>"
    )

@pytest.fixture
def forecast_page() -> str:
    return build_page()

T0 = datetime(2026, 10, 18, 12, 0, tzinfo=timezone(timedelta(hours=2)))

def make_observation(
    timestamp: datetime,
    spot_name: str = SPOT_NAME,
    wind_speed: float = 10.0
) -> Observation:
    return Observation(
        timestamp=timestamp,
        wind_direction="S",
        wind_status="status",
        wind_speed=wind_speed,
        wave_direction="SSW",
        wave_period=6,
        wave_height=1.2,
        air_temperature=18,
        spot_name=spot_name
    )

def make_snapshot(
    offsets_hours: List[float] = [0, 1, 3],
    spot_name: str = SPOT_NAME
) -> ForecastSnapshot:
    return ForecastSnapshot(
        spot_name=spot_name,
        source_url="https://www.windfinder.com/forecast/els_poblets_valencia_spain",
        fetched_at=datetime(2026, 10, 18, 10, 0, tzinfo=timezone.utc),
        observations=[
            make_observation(T0 + timedelta(hours=h), spot_name=spot_name)
            for h in offsets_hours
        ]
    )

@pytest.fixture
def snapshot() -> ForecastSnapshot:
    return make_snapshot()
