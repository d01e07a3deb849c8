from __future__ import annotations
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Awaitable, Callable, Optional

from app.errors import ErrorKind, ForecastError
from app.models import Location, WeatherForecast, utcnow
from app.repositories.locations import (
    create_forecast,
    find_or_create_by_zip,
    get_location_by_zip,
    recent_forecasts,
)
from app.services.cache_policy import expires_at, freshness_cutoff, most_recent, needs_fetch
from app.services.geo import Coordinates, geocode
from app.services.validators import require_address, zip_from_address
from app.services.weather import WeatherApiClient, extract_forecast

logger = logging.getLogger(__name__)

Geocoder = Callable[..., Awaitable[Optional[Coordinates]]]


@dataclass
class ForecastResult:
    current_temp: float
    high_temp: float
    low_temp: float
    conditions: str
    location_address: str
    zip_code: str
    from_cache: bool
    cached_at: datetime
    expires_at: datetime

    def to_payload(self) -> dict:
        return {
            "data": {
                "current_temp": self.current_temp,
                "high_temp": self.high_temp,
                "low_temp": self.low_temp,
                "conditions": self.conditions,
                "location_address": self.location_address,
            },
            "meta": {
                "cached": self.from_cache,
                "cached_at": self.cached_at.isoformat(),
                "expires_at": self.expires_at.isoformat(),
            },
        }


class ForecastResolver:
    """
    Address in, forecast out.

    validate address -> extract ZIP -> find/create location -> reuse a fresh
    stored forecast, or fetch one from the provider and store it.

    Only ForecastError leaves `resolve`; anything else is wrapped as UNEXPECTED.
    """

    def __init__(
        self,
        session_factory: Callable,
        weather: WeatherApiClient,
        geocoder: Geocoder = geocode,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.session_factory = session_factory
        self.weather = weather
        self.geocoder = geocoder
        self.clock = clock

    async def resolve(self, address: Optional[str]) -> ForecastResult:
        try:
            return await self._resolve(address)
        except ForecastError:
            raise
        except Exception as e:
            logger.exception("Unexpected error resolving forecast for %r", address)
            raise ForecastError(ErrorKind.UNEXPECTED, str(e)) from e

    async def _resolve(self, address: Optional[str]) -> ForecastResult:
        # 1) Validate + extract
        address = require_address(address)
        zip_code = zip_from_address(address)

        # 2) Location by ZIP (may geocode)
        location = await self._resolve_location(zip_code, address)
        now = self.clock()

        # 3) Cache check
        with self.session_factory() as session:
            history = recent_forecasts(session, location.id, freshness_cutoff(now))
        if not needs_fetch(history, now):
            current = most_recent(history)
            logger.info("Forecast cache hit for zip=%s (cached_at=%s)", zip_code, current.cached_at)
            return self._result(location, current, from_cache=True)

        # 4) Fetch + persist
        logger.info("Forecast cache miss for zip=%s; querying provider", zip_code)
        payload = await self.weather.fetch_forecast(location.address)
        values = extract_forecast(payload)
        with self.session_factory() as session:
            forecast = create_forecast(session, location_id=location.id, values=values, cached_at=now)
        return self._result(location, forecast, from_cache=False)

    async def _resolve_location(self, zip_code: str, address: str) -> Location:
        with self.session_factory() as session:
            location = get_location_by_zip(session, zip_code)
        if location is not None:
            return location

        coords = await self._geocode(address, zip_code)
        with self.session_factory() as session:
            location, created = find_or_create_by_zip(
                session,
                zip_code,
                address,
                latitude=coords.latitude if coords else None,
                longitude=coords.longitude if coords else None,
            )
        if created:
            logger.info("Created location zip=%s address=%r", zip_code, address)
        return location

    async def _geocode(self, address: str, zip_code: str) -> Optional[Coordinates]:
        # Coordinates are nice to have; a geocoder failure never fails the request.
        try:
            return await self.geocoder(address, fallback_query=zip_code)
        except Exception as e:
            logger.warning("Geocoder failed for %r: %s", address, e)
            return None

    @staticmethod
    def _result(location: Location, forecast: WeatherForecast, from_cache: bool) -> ForecastResult:
        return ForecastResult(
            current_temp=forecast.current_temp,
            high_temp=forecast.high_temp,
            low_temp=forecast.low_temp,
            conditions=forecast.conditions,
            location_address=location.address,
            zip_code=location.zip_code,
            from_cache=from_cache,
            cached_at=forecast.cached_at,
            expires_at=expires_at(forecast),
        )
