from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Optional
import httpx

logger = logging.getLogger(__name__)

NOMINATIM_URL = "https://nominatim.openstreetmap.org/search"
OPEN_METEO_URL = "https://geocoding-api.open-meteo.com/v1/search"
GEOCODER_TIMEOUT = 3.0
USER_AGENT = "zip-forecast/1.0"


@dataclass(frozen=True)
class Coordinates:
    latitude: float
    longitude: float


def _coords(lat, lon) -> Optional[Coordinates]:
    try:
        return Coordinates(latitude=float(lat), longitude=float(lon))
    except (TypeError, ValueError):
        return None


async def _geocode_nominatim(query: str, transport=None) -> Optional[Coordinates]:
    # Primary geocoder: Nominatim (OpenStreetMap). Requires a User-Agent.
    params = {"q": query, "format": "jsonv2", "limit": 1, "countrycodes": "us"}
    headers = {"User-Agent": USER_AGENT}
    try:
        async with httpx.AsyncClient(timeout=GEOCODER_TIMEOUT, headers=headers, transport=transport) as client:
            r = await client.get(NOMINATIM_URL, params=params)
            r.raise_for_status()
            data = r.json()
    except (httpx.HTTPError, ValueError) as e:
        logger.warning("Nominatim geocoding error: %s", e)
        return None

    if not data or not isinstance(data, list):
        return None
    top = data[0]
    return _coords(top.get("lat"), top.get("lon"))


async def _geocode_open_meteo(query: str, transport=None) -> Optional[Coordinates]:
    # Fallback geocoder: Open-Meteo. Searches place names and postal codes.
    params = {"name": query, "count": 1, "language": "en", "format": "json", "countryCode": "US"}
    try:
        async with httpx.AsyncClient(timeout=GEOCODER_TIMEOUT, transport=transport) as client:
            r = await client.get(OPEN_METEO_URL, params=params)
            r.raise_for_status()
            data = r.json()
    except (httpx.HTTPError, ValueError) as e:
        logger.warning("Open-Meteo geocoding error: %s", e)
        return None

    if not isinstance(data, dict):
        return None
    results = data.get("results") or []
    if not results:
        return None
    top = results[0]
    return _coords(top.get("latitude"), top.get("longitude"))


async def geocode(address: str, fallback_query: Optional[str] = None, transport=None) -> Optional[Coordinates]:
    """
    Resolve a street address to coordinates, or None.
    Strategy:
      - Nominatim with the full address.
      - Else Open-Meteo with `fallback_query` (usually the ZIP code).
    Never raises for network or payload problems.
    """
    result = await _geocode_nominatim(address, transport=transport)
    if result:
        return result

    if fallback_query:
        result = await _geocode_open_meteo(fallback_query, transport=transport)
        if result:
            return result

    logger.info("Geocoding failed for address=%r", address)
    return None
