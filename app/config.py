from __future__ import annotations
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

DEFAULT_WEATHER_API_BASE_URL = "https://api.weatherapi.com/v1"


@dataclass(frozen=True)
class WeatherApiConfig:
    api_key: str = ""
    base_url: str = DEFAULT_WEATHER_API_BASE_URL
    timeout: float = 8.0
    forecast_days: int = 3


@dataclass(frozen=True)
class Settings:
    database_url: str = "sqlite:///weather.db"
    frontend_url: str = "http://localhost:5173"
    log_level: str = "INFO"
    weather: WeatherApiConfig = field(default_factory=WeatherApiConfig)


def load_settings() -> Settings:
    """
    Read settings from the process environment (and a .env file if present).
    Called once at startup; the result is passed to whoever needs it.
    """
    load_dotenv()
    weather = WeatherApiConfig(
        api_key=os.getenv("WEATHER_API_KEY", ""),
        base_url=os.getenv("WEATHER_API_BASE_URL", DEFAULT_WEATHER_API_BASE_URL),
        timeout=float(os.getenv("WEATHER_API_TIMEOUT", "8.0")),
    )
    return Settings(
        database_url=os.getenv("DATABASE_URL", "sqlite:///weather.db"),
        frontend_url=os.getenv("FRONTEND_URL", "http://localhost:5173"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        weather=weather,
    )
