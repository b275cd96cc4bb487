"""Weather provider abstractions and implementations."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List

import requests
from pydantic import BaseModel, ValidationError

from logic.weather_tags import conditions_from_description, weather_tags_for


LOGGER = logging.getLogger(__name__)


class _WeatherCondition(BaseModel):
    main: str = ""
    description: str = "unknown"


class _Wind(BaseModel):
    speed: float = 0.0


class _Main(BaseModel):
    temp: float
    temp_min: float
    temp_max: float
    humidity: float = 0.0


class _CurrentWeatherResponse(BaseModel):
    main: _Main
    wind: _Wind = _Wind()
    weather: List[_WeatherCondition] = []


@dataclass
class WeatherSnapshot:
    """Current conditions at a location."""

    temperature: float
    temp_min: float
    temp_max: float
    humidity: float
    wind_speed: float
    conditions: List[str] = field(default_factory=list)
    description: str = "unknown"

    @property
    def weather_tags(self) -> List[str]:
        return weather_tags_for(self.temperature, self.conditions)


class WeatherProvider(ABC):
    """Abstract weather provider interface."""

    @abstractmethod
    def current_weather(self, location: str) -> WeatherSnapshot:
        """Return the current weather for ``location``."""


class OpenWeatherProvider(WeatherProvider):
    """OpenWeather provider with schema validation and graceful fallbacks."""

    url = "https://api.openweathermap.org/data/2.5/weather"

    def __init__(self, api_key: str | None = None, timeout_seconds: float = 5.0, units: str = "metric") -> None:
        self.api_key = api_key
        self.timeout_seconds = timeout_seconds
        self.units = units

    def _fallback_snapshot(self, reason: str) -> WeatherSnapshot:
        LOGGER.warning("Using fallback weather snapshot", extra={"reason": reason})
        return WeatherSnapshot(
            temperature=15.0,
            temp_min=12.0,
            temp_max=18.0,
            humidity=50.0,
            wind_speed=5.0,
            conditions=[],
            description="unknown",
        )

    def current_weather(self, location: str) -> WeatherSnapshot:
        if not location:
            raise ValueError("location is required for weather lookups")

        if not self.api_key:
            return self._fallback_snapshot("missing_api_key")

        LOGGER.info("Fetching current weather")
        params = {
            "q": location,
            "appid": self.api_key,
            "units": self.units,
        }

        try:
            response = requests.get(self.url, params=params, timeout=self.timeout_seconds)
            response.raise_for_status()
            parsed = _CurrentWeatherResponse.model_validate(response.json())
        except (requests.Timeout, requests.RequestException) as exc:
            LOGGER.error("Weather API unreachable", exc_info=exc)
            return self._fallback_snapshot("request_error")
        except ValidationError as exc:
            LOGGER.error("Weather payload schema validation failed", exc_info=exc)
            return self._fallback_snapshot("schema_validation")

        description = " ".join(
            f"{entry.main} {entry.description}".strip() for entry in parsed.weather
        ) or "unknown"
        return WeatherSnapshot(
            temperature=parsed.main.temp,
            temp_min=parsed.main.temp_min,
            temp_max=parsed.main.temp_max,
            humidity=parsed.main.humidity,
            wind_speed=parsed.wind.speed,
            conditions=conditions_from_description(description),
            description=description,
        )


class MockWeatherProvider(WeatherProvider):
    """Offline deterministic weather provider for tests."""

    def __init__(self, snapshot: WeatherSnapshot | None = None) -> None:
        self.snapshot = snapshot or WeatherSnapshot(
            temperature=22.0,
            temp_min=18.0,
            temp_max=25.0,
            humidity=40.0,
            wind_speed=3.0,
            conditions=["sunny"],
            description="clear sky",
        )
        self.calls: List[str] = []

    def current_weather(self, location: str) -> WeatherSnapshot:
        LOGGER.info("Returning mock weather")
        self.calls.append(location)
        return self.snapshot


__all__ = ["WeatherSnapshot", "WeatherProvider", "OpenWeatherProvider", "MockWeatherProvider"]
