import logging
from datetime import datetime
from typing import List, Optional, Tuple
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import select, col

from app.errors import ErrorKind, ForecastError
from app.models import Location, WeatherForecast
from app.services.weather import ForecastValues

logger = logging.getLogger(__name__)


def get_location_by_zip(session, zip_code: str) -> Optional[Location]:
    stmt = select(Location).where(Location.zip_code == zip_code)
    try:
        return session.exec(stmt).first()
    except SQLAlchemyError as e:
        raise ForecastError(ErrorKind.PERSISTENCE, str(e)) from e


def find_or_create_by_zip(
    session,
    zip_code: str,
    address: str,
    *,
    latitude: Optional[float] = None,
    longitude: Optional[float] = None,
) -> Tuple[Location, bool]:
    """
    Returns (location, created). The address and coordinates are only used
    when the ZIP is new. A concurrent insert of the same ZIP trips the unique
    index; that case is read back instead of failing.
    """
    row = get_location_by_zip(session, zip_code)
    if row:
        return row, False

    row = Location(zip_code=zip_code, address=address, latitude=latitude, longitude=longitude)
    try:
        session.add(row)
        session.commit()
    except IntegrityError:
        session.rollback()
        logger.info("Location for zip=%s created concurrently; reading it back", zip_code)
        existing = get_location_by_zip(session, zip_code)
        if existing is None:
            raise ForecastError(ErrorKind.PERSISTENCE, f"Could not create or find location {zip_code}")
        return existing, False
    except SQLAlchemyError as e:
        session.rollback()
        raise ForecastError(ErrorKind.PERSISTENCE, str(e)) from e

    session.refresh(row)
    return row, True


def recent_forecasts(session, location_id: int, since: datetime) -> List[WeatherForecast]:
    # Everything strictly newer than `since`; callers pick the newest themselves.
    stmt = (
        select(WeatherForecast)
        .where(WeatherForecast.location_id == location_id)
        .where(WeatherForecast.cached_at > since)
    )
    try:
        return list(session.exec(stmt).all())
    except SQLAlchemyError as e:
        raise ForecastError(ErrorKind.PERSISTENCE, str(e)) from e


def create_forecast(
    session,
    *,
    location_id: int,
    values: ForecastValues,
    cached_at: datetime,
) -> WeatherForecast:
    forecast = WeatherForecast(
        location_id=location_id,
        current_temp=values.current_temp,
        high_temp=values.high_temp,
        low_temp=values.low_temp,
        conditions=values.conditions,
        cached_at=cached_at,
    )
    try:
        session.add(forecast)
        session.commit()
        session.refresh(forecast)
    except SQLAlchemyError as e:
        session.rollback()
        raise ForecastError(ErrorKind.PERSISTENCE, str(e)) from e
    return forecast


def cleanup_old_locations(session, cutoff: datetime) -> int:
    """
    Delete every location with no forecast newer than `cutoff`.
    Forecasts go with their location (ORM cascade). Returns the count.
    """
    active = select(WeatherForecast.location_id).where(WeatherForecast.cached_at > cutoff)
    stmt = select(Location).where(col(Location.id).not_in(active))
    try:
        stale = session.exec(stmt).all()
        for row in stale:
            session.delete(row)
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        raise ForecastError(ErrorKind.PERSISTENCE, str(e)) from e
    return len(stale)
