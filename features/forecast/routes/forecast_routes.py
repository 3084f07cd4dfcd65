import logging
from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response

from features.forecast.models.forecast_types import (
    ForecastResponse,
    ObservationResponse,
    RefreshResponse
)
from features.forecast.services.forecast_store import ForecastStore
from features.forecast.services.refresh_service import ForecastRefresher
from core.config import settings

logger = logging.getLogger(__name__)
router = APIRouter(
    prefix="/forecast",
    tags=["Forecast"],
    responses={
        404: {"description": "Forecast not loaded yet"}
    }
)

def get_store(request: Request) -> ForecastStore:
    """Get ForecastStore instance from app state."""
    return request.app.state.forecast_store

def get_refresher(request: Request) -> ForecastRefresher:
    """Get ForecastRefresher instance from app state."""
    return request.app.state.forecast_refresher

@router.get(
    "/now",
    response_model=ObservationResponse,
    summary="Get the forecast slot for a point in time",
    description="Returns the next forecast slot within the lookup window after the given time (default now), "
                "or the earliest slot when none falls in the window",
    responses={204: {"description": "Forecast loaded but holds no slots"}}
)
async def get_forecast_now(
    at: Optional[datetime] = Query(None, description="ISO 8601 time, naive values use the spot's time zone"),
    store: ForecastStore = Depends(get_store)
):
    """Get the best matching forecast slot."""
    tz = ZoneInfo(settings.local_timezone)
    query_time = at or datetime.now(tz)
    if query_time.tzinfo is None:
        query_time = query_time.replace(tzinfo=tz)

    snapshot = store.snapshot
    if snapshot is None:
        raise HTTPException(status_code=404, detail="Forecast not loaded yet")

    lookup = store.lookup(query_time)
    if lookup.observation is None:
        return Response(status_code=204)

    return ObservationResponse(
        spot_name=snapshot.spot_name,
        query_time=query_time,
        lookup=lookup.status,
        fetched_at=snapshot.fetched_at,
        observation=lookup.observation
    )

@router.get(
    "",
    response_model=ForecastResponse,
    summary="Get the full forecast series",
    description="Returns every forecast slot of the current snapshot in source order"
)
async def get_forecast(store: ForecastStore = Depends(get_store)):
    """Get the complete current forecast."""
    snapshot = store.snapshot
    if snapshot is None:
        raise HTTPException(status_code=404, detail="Forecast not loaded yet")

    return ForecastResponse(
        spot_name=snapshot.spot_name,
        source_url=snapshot.source_url,
        fetched_at=snapshot.fetched_at,
        observations=list(snapshot.observations)
    )

@router.post(
    "/refresh",
    response_model=RefreshResponse,
    summary="Refresh the forecast now",
    responses={503: {"description": "Forecast page could not be scraped"}}
)
async def refresh_forecast(refresher: ForecastRefresher = Depends(get_refresher)):
    """Scrape the spot page immediately instead of waiting for the next tick."""
    refreshed = await refresher.trigger_now()
    if not refreshed:
        raise HTTPException(
            status_code=503,
            detail=f"Forecast refresh failed: {refresher.last_error}"
        )

    snapshot = refresher.store.snapshot
    return RefreshResponse(
        refreshed=True,
        fetched_at=snapshot.fetched_at,
        observations=len(snapshot.observations)
    )
