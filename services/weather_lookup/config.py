"""
Application configuration via pydantic-settings.
All config read from environment variables with sensible defaults for local dev.

Business logic never imports `settings` directly: main.py and cli.py read it
once and pass the values into each client's constructor.
"""

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # App
    app_name: str = "weather-lookup"
    app_version: str = "0.1.0"
    environment: str = Field(default="development", pattern=r"^(development|staging|production)$")
    debug: bool = False
    log_level: str = Field(default="INFO", pattern=r"^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")

    # Redis. Empty string falls back to the in-process cache
    redis_url: str = Field(default="redis://localhost:6379/0")

    # CORS
    cors_origins: list[str] = Field(default=["http://localhost:3000"])

    # Sentry
    sentry_dsn: str = ""
    sentry_traces_sample_rate: float = Field(default=0.1, ge=0.0, le=1.0)

    # Weather (OpenWeatherMap)
    openweather_api_key: str = ""
    openweather_base_url: str = "https://api.openweathermap.org/data/2.5"
    weather_units: str = Field(default="imperial", pattern=r"^(standard|metric|imperial)$")
    weather_api_timeout_s: float = 8.0

    # Geocoding (Nominatim). Usage policy requires an identifying User-Agent.
    geocoder_base_url: str = "https://nominatim.openstreetmap.org"
    geocoder_user_agent: str = "weather-lookup/0.1.0"
    geocoder_timeout_s: float = 8.0

    # Cache
    cache_expiration_mins: int = Field(default=30, ge=0)

    model_config = {"env_prefix": "", "env_file": ".env", "extra": "ignore"}


settings = Settings()
