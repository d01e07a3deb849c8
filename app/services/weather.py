from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Any, Optional, Sequence, Union
import httpx

from app.config import WeatherApiConfig
from app.errors import ErrorKind, ForecastError

logger = logging.getLogger(__name__)

# WeatherAPI answers 400 with this code when `q` matches nothing.
NO_MATCHING_LOCATION = 1006

STATUS_KINDS = {
    401: ErrorKind.UNAUTHORIZED,
    404: ErrorKind.NOT_FOUND,
    429: ErrorKind.RATE_LIMITED,
}

# Paths into a forecast.json payload.
CURRENT_TEMP_PATH = ("current", "temp_f")
HIGH_TEMP_PATH = ("forecast", "forecastday", 0, "day", "maxtemp_f")
LOW_TEMP_PATH = ("forecast", "forecastday", 0, "day", "mintemp_f")
CONDITIONS_PATH = ("current", "condition", "text")


@dataclass
class ForecastValues:
    current_temp: float
    high_temp: float
    low_temp: float
    conditions: str


class WeatherApiClient:
    """
    Thin client for WeatherAPI.com's forecast endpoint.
    Every failure comes out as a ForecastError with a provider kind.
    """

    def __init__(self, config: WeatherApiConfig, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.config = config
        self._transport = transport

    async def fetch_forecast(self, query: str) -> dict:
        """
        GET {base_url}/forecast.json?key=...&q=<query>&days=N
        Returns the decoded JSON payload.
        """
        url = self.config.base_url.rstrip("/") + "/forecast.json"
        params = {
            "key": self.config.api_key,
            "q": query,
            "days": self.config.forecast_days,
        }

        try:
            async with httpx.AsyncClient(timeout=self.config.timeout, transport=self._transport) as client:
                r = await client.get(url, params=params)
        except (httpx.TimeoutException, httpx.TransportError) as e:
            logger.warning("Weather provider unreachable: %s", e)
            raise ForecastError(ErrorKind.UNREACHABLE, str(e)) from e

        if r.status_code != 200:
            kind = _kind_for_status(r)
            logger.warning("Weather provider returned %s for q=%r", r.status_code, query)
            raise ForecastError(kind, f"Unexpected error: {r.status_code}")

        try:
            data = r.json()
        except ValueError as e:
            raise ForecastError(ErrorKind.MALFORMED_PAYLOAD, "Response body is not JSON") from e
        if not isinstance(data, dict):
            raise ForecastError(ErrorKind.MALFORMED_PAYLOAD, "Response body is not a JSON object")
        return data


def _kind_for_status(r: httpx.Response) -> ErrorKind:
    kind = STATUS_KINDS.get(r.status_code)
    if kind:
        return kind
    if r.status_code == 400 and _error_code(r) == NO_MATCHING_LOCATION:
        return ErrorKind.NOT_FOUND
    return ErrorKind.UNEXPECTED


def _error_code(r: httpx.Response) -> Optional[int]:
    try:
        body = r.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None
    err = body.get("error") or {}
    return err.get("code") if isinstance(err, dict) else None


def _dig(data: Any, path: Sequence[Union[str, int]]) -> Any:
    cur = data
    for key in path:
        try:
            cur = cur[key]
        except (KeyError, IndexError, TypeError):
            cur = None
        if cur is None:
            dotted = ".".join(str(k) for k in path)
            raise ForecastError(ErrorKind.MALFORMED_PAYLOAD, f"Missing {dotted} in provider response")
    return cur


def _number(data: Any, path: Sequence[Union[str, int]]) -> float:
    value = _dig(data, path)
    if isinstance(value, bool):
        value = None
    try:
        return float(value)
    except (TypeError, ValueError):
        dotted = ".".join(str(k) for k in path)
        raise ForecastError(ErrorKind.MALFORMED_PAYLOAD, f"Non-numeric {dotted} in provider response")


def _text(data: Any, path: Sequence[Union[str, int]]) -> str:
    value = _dig(data, path)
    if not isinstance(value, str) or not value.strip():
        dotted = ".".join(str(k) for k in path)
        raise ForecastError(ErrorKind.MALFORMED_PAYLOAD, f"Blank or non-text {dotted} in provider response")
    return value


def extract_forecast(payload: dict) -> ForecastValues:
    """
    Pull today's numbers out of a forecast.json payload.
    Any missing, null or blank field raises ForecastError(MALFORMED_PAYLOAD).
    """
    return ForecastValues(
        current_temp=_number(payload, CURRENT_TEMP_PATH),
        high_temp=_number(payload, HIGH_TEMP_PATH),
        low_temp=_number(payload, LOW_TEMP_PATH),
        conditions=_text(payload, CONDITIONS_PATH),
    )
