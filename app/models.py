from datetime import datetime, timezone
from typing import Optional
from sqlmodel import SQLModel, Field, Relationship


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Location(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    zip_code: str = Field(index=True, unique=True, max_length=10)
    address: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    created_at: datetime = Field(default_factory=utcnow)

    forecasts: list["WeatherForecast"] = Relationship(
        back_populates="location",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"},
    )


class WeatherForecast(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    location_id: int = Field(foreign_key="location.id", index=True)
    current_temp: float
    high_temp: float
    low_temp: float
    conditions: str
    cached_at: datetime = Field(default_factory=utcnow, index=True)

    location: Optional[Location] = Relationship(back_populates="forecasts")
