"""날씨 라우터 — 위치의 현재 기온 조회.

Weather Router — current temperature for a location, the same lookup
post creation uses to fill a missing temperature.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from app.api.deps import CurrentMember, get_weather_service
from app.schemas.post import WeatherResponse
from app.services.weather_service import WeatherService

router: APIRouter = APIRouter()


@router.get("", response_model=WeatherResponse)
async def get_weather(
    current_member: CurrentMember,
    weather: Annotated[WeatherService, Depends(get_weather_service)],
    location: str = Query(..., min_length=1),
) -> WeatherResponse:
    """현재 기온 조회 — 외부 API 실패 시 502."""
    temperature: float = await weather.get_temperature(location)
    return WeatherResponse(location=location, temperature=temperature)
