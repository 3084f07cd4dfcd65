import asyncio
import logging
from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo

import typer

from core.config import settings
from core.logging_config import setup_logging
from features.forecast.models.forecast_types import ForecastSnapshot
from features.forecast.services.windfinder_client import WindfinderClient
from features.forecast.services.forecast_service import ForecastService
from features.forecast.services.forecast_store import ForecastStore
from features.forecast.utils.formatting import format_header, format_row, format_table
from features.common.exceptions.scrape_exceptions import ScrapeError

logger = logging.getLogger(__name__)
app = typer.Typer(help="Wind and wave forecast for a Windfinder spot.")

async def _scrape(url: str) -> ForecastSnapshot:
    client = WindfinderClient()
    try:
        return await ForecastService(client, url=url).scrape()
    finally:
        await client.close()

def scrape_snapshot(url: str) -> ForecastSnapshot:
    """Scrape the spot page once, outside of the API."""
    try:
        return asyncio.run(_scrape(url))
    except ScrapeError as e:
        typer.echo(f"Error: {type(e).__name__}: {e}", err=True)
        raise typer.Exit(1)

def _parse_time(value: Optional[str], tz: ZoneInfo) -> datetime:
    if value is None:
        return datetime.now(tz)
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        raise typer.BadParameter(f"Invalid ISO 8601 time: {value}")
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=tz)

@app.callback()
def main(
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Log at DEBUG level.")
) -> None:
    setup_logging(logging.DEBUG if verbose else logging.WARNING)

@app.command()
def now(
    url: str = typer.Option(settings.forecast_url, "-u", "--url", help="Windfinder spot page."),
    at: Optional[str] = typer.Option(
        None,
        "--at",
        help="ISO 8601 time to look up instead of now. Naive values use the spot's time zone."
    )
) -> None:
    """Print the forecast slot for now in the spot's time zone."""
    tz = ZoneInfo(settings.local_timezone)
    query_time = _parse_time(at, tz)

    store = ForecastStore()
    store.replace(scrape_snapshot(url))

    lookup = store.lookup(query_time)
    if lookup.observation is None:
        typer.echo("Error: forecast holds no slots", err=True)
        raise typer.Exit(1)

    typer.echo(f"{lookup.observation.spot_name} ({lookup.status.value})")
    typer.echo(format_header())
    typer.echo(format_row(lookup.observation, tz))

@app.command()
def show(
    url: str = typer.Option(settings.forecast_url, "-u", "--url", help="Windfinder spot page.")
) -> None:
    """Print every forecast slot of the spot."""
    tz = ZoneInfo(settings.local_timezone)
    snapshot = scrape_snapshot(url)

    typer.echo(snapshot.spot_name)
    for line in format_table(snapshot.observations, tz):
        typer.echo(line)

@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", "--host"),
    port: int = typer.Option(5010, "--port")
) -> None:
    """Run the forecast API."""
    import uvicorn

    uvicorn.run("main:app", host=host, port=port, log_level="info", workers=1)

if __name__ == "__main__":
    app()
