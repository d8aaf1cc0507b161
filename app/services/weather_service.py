"""날씨 서비스 — 위치의 현재 기온 조회.

Weather Service — current temperature lookup for a location, used to fill
a post's temperature when the client leaves it out. Single request,
no retries; every failure becomes ``WeatherApiError``.
"""

import logging

import httpx

from app.config import Settings, settings
from app.utils.exceptions import WeatherApiError

logger = logging.getLogger(__name__)


class WeatherService:
    """OpenWeatherMap 호환 API 클라이언트.

    Args:
        api_key: API 키 (Empty disables the service)
        base_url: 현재 날씨 엔드포인트 (Current-weather endpoint URL)
        timeout: 요청 타임아웃 초 (Request timeout in seconds)
        transport: httpx 전송 계층 (Injected in tests with httpx.MockTransport)
    """

    def __init__(
        self,
        api_key: str,
        base_url: str,
        timeout: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key: str = api_key
        self.base_url: str = base_url
        self.timeout: float = timeout
        self._transport: httpx.AsyncBaseTransport | None = transport

    @classmethod
    def from_settings(cls, config: Settings) -> "WeatherService":
        return cls(
            api_key=config.WEATHER_API_KEY,
            base_url=config.WEATHER_API_URL,
            timeout=config.WEATHER_API_TIMEOUT,
        )

    @property
    def is_enabled(self) -> bool:
        return bool(self.api_key)

    async def get_temperature(self, location: str) -> float:
        """위치의 현재 기온(°C)을 반환합니다.

        Raises:
            WeatherApiError: 미설정, 통신 실패, 비정상 응답
                             (Not configured, transport failure, bad response)
        """
        if not self.is_enabled:
            raise WeatherApiError("Weather API is not configured")

        params: dict[str, str] = {"q": location, "appid": self.api_key, "units": "metric"}
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response: httpx.Response = await client.get(self.base_url, params=params)
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPStatusError as exc:
            logger.warning("Weather API returned %s for %r", exc.response.status_code, location)
            raise WeatherApiError(f"Weather API returned {exc.response.status_code}") from exc
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Weather API request failed for %r: %s", location, exc)
            raise WeatherApiError("Weather API request failed") from exc

        try:
            return float(payload["main"]["temp"])
        except (KeyError, TypeError, ValueError) as exc:
            raise WeatherApiError("Weather API response has no temperature") from exc


weather_service: WeatherService = WeatherService.from_settings(settings)
