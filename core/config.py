from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Dict, Any

class Settings(BaseSettings):
    """Application settings."""

    # Windfinder spot page
    forecast_url: str = "https://www.windfinder.com/forecast/els_poblets_valencia_spain"

    # Civil time zone used for "now" queries and log timestamps
    local_timezone: str = "Europe/Madrid"

    # Refresh every hour, forecast slots are published hourly
    refresh_interval_seconds: int = 3600

    # Forward-looking window for point-in-time lookups
    query_window_hours: int = 2

    # Wind status classification policy: "placeholder" or "relative"
    wind_status_policy: str = "placeholder"

    request: Dict[str, Any] = {
        "timeout": 30,
        "user_agent": "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0 Safari/537.36"
    }

    # Inline script block carrying the forecast records
    data_block: Dict[str, str] = {
        "push_marker": "window.ctx.push",
        "data_key": "fcData"
    }

    selectors: Dict[str, str] = {
        "air_temperature": "div.data-temp.data--major.weathertable__cell span.units-at",
        "wave_period": "div.data-wavefreq.data--minor.weathertable__cell",
        "spot_name": "span#spotheader-spotname"
    }

    model_config = SettingsConfigDict(
        env_prefix="spot_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

settings = Settings()
