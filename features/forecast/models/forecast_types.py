from datetime import datetime
from enum import Enum
from typing import List, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field, model_validator

class Observation(BaseModel):
    """Single forecast slot for the spot."""
    timestamp: datetime = Field(..., description="Slot time with the source's fixed UTC offset")
    wind_direction: str = Field(..., description="16-point compass label the wind blows from")
    wind_status: str
    wind_speed: float = Field(..., ge=0, description="Wind speed in knots")
    wave_direction: Optional[str] = None
    wave_period: Optional[int] = Field(None, ge=0, description="Wave period in seconds")
    wave_height: Optional[float] = Field(None, ge=0, description="Wave height in meters")
    air_temperature: Optional[int] = Field(None, description="Air temperature in Celsius")
    spot_name: str

    model_config = ConfigDict(frozen=True)

# Ordered as published by the source, never re-sorted
ObservationSeries = Tuple[Observation, ...]

class RawSeriesBundle(BaseModel):
    """Parallel series pulled from one forecast page, aligned by position."""
    # Required series, one entry per forecast record
    timestamps: List[str]
    wind_bearings: List[float]
    wind_speeds: List[float]

    # Optional series, may be shorter or hold gaps
    wave_bearings: List[Optional[float]] = []
    wave_heights: List[Optional[float]] = []
    wave_periods: List[Optional[int]] = []
    air_temperatures: List[Optional[int]] = []

    spot_name: str

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def check_required_lengths(self) -> "RawSeriesBundle":
        count = len(self.timestamps)
        if len(self.wind_bearings) != count or len(self.wind_speeds) != count:
            raise ValueError(
                f"Required series differ in length: timestamps={count}, "
                f"wind_bearings={len(self.wind_bearings)}, wind_speeds={len(self.wind_speeds)}"
            )
        return self

    @property
    def count(self) -> int:
        return len(self.timestamps)

class ForecastSnapshot(BaseModel):
    """One complete scrape of the spot page."""
    spot_name: str
    source_url: str
    fetched_at: datetime
    observations: ObservationSeries = ()

    model_config = ConfigDict(frozen=True)

class LookupStatus(str, Enum):
    MATCH = "match"          # slot found inside the forward window
    FALLBACK = "fallback"    # no slot in window, earliest slot returned
    EMPTY = "empty"          # snapshot holds no observations
    NOT_READY = "not_ready"  # store never populated

class ForecastLookup(BaseModel):
    """Outcome of a point-in-time query against the store."""
    status: LookupStatus
    query_time: datetime
    observation: Optional[Observation] = None

    model_config = ConfigDict(frozen=True)

class ObservationResponse(BaseModel):
    """Response for a point-in-time forecast query."""
    spot_name: str
    query_time: datetime
    lookup: LookupStatus
    fetched_at: datetime
    observation: Observation

class ForecastResponse(BaseModel):
    """Complete forecast series for the spot."""
    spot_name: str
    source_url: str
    fetched_at: datetime
    observations: List[Observation]

class RefreshResponse(BaseModel):
    refreshed: bool
    fetched_at: Optional[datetime] = None
    observations: int = 0
    error: Optional[str] = None
