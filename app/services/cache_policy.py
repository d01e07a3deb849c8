"""
Freshness rules for stored forecasts.

A location's forecast history is append-only; the "current" forecast is the
newest record younger than FRESHNESS_WINDOW. Both windows are fixed.
"""
from __future__ import annotations
from datetime import datetime, timedelta
from typing import Iterable, Optional

from app.models import WeatherForecast

FRESHNESS_WINDOW = timedelta(minutes=30)
RETENTION_WINDOW = timedelta(days=30)


def most_recent(records: Iterable[WeatherForecast]) -> Optional[WeatherForecast]:
    # Equal timestamps: whichever max() sees first wins.
    return max(records, key=lambda r: r.cached_at, default=None)


def is_fresh(record: Optional[WeatherForecast], now: datetime) -> bool:
    if record is None:
        return False
    return now - record.cached_at < FRESHNESS_WINDOW


def needs_fetch(records: Iterable[WeatherForecast], now: datetime) -> bool:
    return not is_fresh(most_recent(records), now)


def expires_at(record: WeatherForecast) -> datetime:
    return record.cached_at + FRESHNESS_WINDOW


def freshness_cutoff(now: datetime) -> datetime:
    return now - FRESHNESS_WINDOW


def retention_cutoff(now: datetime) -> datetime:
    return now - RETENTION_WINDOW
