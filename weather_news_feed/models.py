from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class Article:
    id: str
    title: str
    description: str = ""
    url: str = ""
    url_to_image: str = ""
    published_at: datetime | None = None
    source_name: str = ""
    category: str = "general"
    sentiment: str | None = None

    def text(self) -> str:
        return f"{self.title or ''} {self.description or ''}"


@dataclass
class WeatherReport:
    location: str
    temperature: float
    condition: str
    description: str
    icon: str
    humidity: float
    wind_speed: float
    feels_like: int


@dataclass
class ForecastDay:
    date: str
    high: int
    low: int
    condition: str
    icon: str


@dataclass
class Settings:
    temperature_unit: str = "celsius"
    news_categories: list[str] = field(default_factory=lambda: ["general", "technology", "health"])
    latitude: float | None = None
    longitude: float | None = None
    lexicons_file: str | None = None

    @property
    def has_location(self) -> bool:
        return self.latitude is not None and self.longitude is not None
