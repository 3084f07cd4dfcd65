import logging
from datetime import datetime
from typing import List, Optional, Sequence, TypeVar

from pydantic import ValidationError

from features.forecast.models.compass import direction_for
from features.forecast.models.forecast_types import Observation, ObservationSeries, RawSeriesBundle
from features.forecast.services.wind_status import WindStatusPolicy, placeholder_wind_status
from features.common.exceptions.scrape_exceptions import BadTimestampError, MalformedDataError

logger = logging.getLogger(__name__)

T = TypeVar("T")

def _optional_at(values: Sequence[Optional[T]], index: int) -> Optional[T]:
    """Positional lookup into a series that may be shorter than the timestamps."""
    if index < len(values):
        return values[index]
    return None

def parse_timestamp(value: str) -> datetime:
    """Parse an RFC 3339 timestamp, keeping its fixed UTC offset."""
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as e:
        raise BadTimestampError(f"Invalid forecast timestamp '{value}'") from e

    if parsed.tzinfo is None:
        raise BadTimestampError(f"Forecast timestamp '{value}' has no UTC offset")
    return parsed

class ForecastNormalizer:
    """Zips the parallel raw series into ordered observations."""

    def __init__(self, status_policy: Optional[WindStatusPolicy] = None):
        self.status_policy = status_policy or placeholder_wind_status

    def normalize(self, bundle: RawSeriesBundle) -> ObservationSeries:
        observations: List[Observation] = []
        for i in range(bundle.count):
            wind_direction = direction_for(bundle.wind_bearings[i])

            wave_bearing = _optional_at(bundle.wave_bearings, i)
            wave_direction = direction_for(wave_bearing) if wave_bearing is not None else None

            try:
                observation = Observation(
                    timestamp=parse_timestamp(bundle.timestamps[i]),
                    wind_direction=wind_direction,
                    wind_status=self.status_policy(wind_direction, wave_direction),
                    wind_speed=bundle.wind_speeds[i],
                    wave_direction=wave_direction,
                    wave_period=_optional_at(bundle.wave_periods, i),
                    wave_height=_optional_at(bundle.wave_heights, i),
                    air_temperature=_optional_at(bundle.air_temperatures, i),
                    spot_name=bundle.spot_name
                )
            except ValidationError as e:
                raise MalformedDataError(f"Invalid forecast record at position {i}: {str(e)}") from e

            observations.append(observation)

        logger.debug(f"Normalized {len(observations)} observations for {bundle.spot_name}")
        return tuple(observations)
