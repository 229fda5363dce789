import logging
from typing import Optional
import httpx
from pydantic import ValidationError
from soil_advisor.config import Settings
from soil_advisor.errors import WeatherUnavailable
from soil_advisor.schema import WeatherSnapshot

logger = logging.getLogger(__name__)


class WeatherClient:
    """Current conditions by location string from OpenWeatherMap.

    Every failure (no key, network, non-2xx, unexpected payload) raises
    WeatherUnavailable; callers decide whether that is fatal.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.openweathermap.org/data/2.5",
        units: str = "metric",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.units = units
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None) -> "WeatherClient":
        return cls(
            api_key=settings.openweather_api_key,
            base_url=settings.openweather_base_url,
            units=settings.openweather_units,
            timeout=settings.weather_timeout,
            transport=transport,
        )

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    async def current(self, location: str) -> WeatherSnapshot:
        if not self.configured:
            raise WeatherUnavailable("Weather API key not configured")

        logger.info("Fetching current weather for %s", location)
        params = {"q": location, "appid": self.api_key, "units": self.units}
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                r = await client.get(f"{self.base_url}/weather", params=params)
            r.raise_for_status()
            data = r.json()
        except httpx.HTTPStatusError as exc:
            raise WeatherUnavailable(
                "Weather provider returned an error",
                f"HTTP {exc.response.status_code} for {location!r}",
            ) from exc
        except (httpx.HTTPError, ValueError) as exc:
            raise WeatherUnavailable("Weather request failed", str(exc)) from exc

        try:
            main = data["main"]
            return WeatherSnapshot(
                temperature=main["temp"],
                humidity=main["humidity"],
                description=data["weather"][0]["description"],
                windSpeed=data["wind"]["speed"],
                pressure=main["pressure"],
            )
        except (KeyError, IndexError, TypeError, ValidationError) as exc:
            raise WeatherUnavailable("Unexpected weather payload", repr(exc)) from exc
