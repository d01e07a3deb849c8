from datetime import datetime, timedelta, timezone

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from app.config import WeatherApiConfig
from app.main import app, get_resolver, get_session_factory
from app.services.forecast import ForecastResolver
from app.services.geo import Coordinates
from app.services.weather import WeatherApiClient

BEVERLY_HILLS = "123 Main St, Beverly Hills, CA 90210"


def forecast_payload(temp_f=72.5, maxtemp_f=75.0, mintemp_f=65.0, condition="Sunny"):
    """Trimmed-down WeatherAPI forecast.json body."""
    return {
        "location": {"name": "Beverly Hills", "region": "California"},
        "current": {
            "temp_f": temp_f,
            "temp_c": 22.5,
            "condition": {"text": condition},
        },
        "forecast": {
            "forecastday": [
                {"day": {"maxtemp_f": maxtemp_f, "mintemp_f": mintemp_f}},
            ]
        },
    }


class FakeProvider:
    """MockTransport handler: records requests, replays a canned response."""

    def __init__(self):
        self.status_code = 200
        self.payload = forecast_payload()
        self.exc = None
        self.requests = []

    def __call__(self, request):
        self.requests.append(request)
        if self.exc is not None:
            raise self.exc
        return httpx.Response(self.status_code, json=self.payload)


class FakeClock:
    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def session_factory(engine):
    return lambda: Session(engine)


@pytest.fixture
def db_session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def weather_client(provider):
    config = WeatherApiConfig(api_key="test-key", base_url="https://weather.test/v1")
    return WeatherApiClient(config, transport=httpx.MockTransport(provider))


@pytest.fixture
def geocoder():
    calls = []

    async def fake_geocode(address, fallback_query=None):
        calls.append(address)
        return Coordinates(latitude=34.0928, longitude=-118.4744)

    fake_geocode.calls = calls
    return fake_geocode


@pytest.fixture
def clock():
    return FakeClock(datetime(2025, 6, 12, 19, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def resolver(session_factory, weather_client, geocoder, clock):
    return ForecastResolver(session_factory, weather_client, geocoder=geocoder, clock=clock)


@pytest.fixture
def client(resolver, session_factory):
    app.dependency_overrides[get_resolver] = lambda: resolver
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    yield TestClient(app)
    app.dependency_overrides.clear()
