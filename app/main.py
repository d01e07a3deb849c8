from __future__ import annotations
import logging
from typing import Optional
from fastapi import FastAPI, Request, Query, Depends
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.config import load_settings
from app.db import create_db_and_tables, get_session
from app.errors import ForecastError
from app.services.forecast import ForecastResolver
from app.services.weather import WeatherApiClient

settings = load_settings()

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title="ZIP Forecast")

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_url],
    allow_methods=["GET", "OPTIONS", "HEAD"],
    allow_headers=["*"],
    allow_credentials=True,
)


@app.on_event("startup")
def on_startup():
    create_db_and_tables()


def get_session_factory():
    return get_session


def get_weather_client() -> WeatherApiClient:
    return WeatherApiClient(settings.weather)


def get_resolver(
    session_factory=Depends(get_session_factory),
    weather: WeatherApiClient = Depends(get_weather_client),
) -> ForecastResolver:
    return ForecastResolver(session_factory, weather)


@app.exception_handler(ForecastError)
async def forecast_error_handler(request: Request, exc: ForecastError):
    if exc.status_code >= 500:
        logger.error("Forecast request failed (%s): %s", exc.kind.value, exc.detail)
    else:
        logger.info("Forecast request rejected (%s): %s", exc.kind.value, exc.detail)
    return JSONResponse({"error": exc.public_message}, status_code=exc.status_code)


@app.get("/api/v1/weather/forecast")
async def forecast(
    address: Optional[str] = Query(None),
    resolver: ForecastResolver = Depends(get_resolver),
):
    """
    Current conditions plus today's high/low for the ZIP code in `address`.
    Results are reused per ZIP for 30 minutes (meta.cached).
    """
    result = await resolver.resolve(address)
    return JSONResponse(result.to_payload())


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/ready")
def ready(session_factory=Depends(get_session_factory)):
    try:
        with session_factory() as session:
            session.connection().execute(text("SELECT 1"))
        db_ok = True
    except SQLAlchemyError as e:
        logger.warning("Readiness check failed: %s", e)
        db_ok = False

    status = "ready" if db_ok else "not_ready"
    return JSONResponse({"status": status, "db": db_ok}, status_code=200 if db_ok else 503)
