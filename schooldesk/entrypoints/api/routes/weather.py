"""天気 API ルート

GET /api/weather  → 200 { temperature, condition, weather_code, location_name }
                  → 503（取得失敗時）
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from schooldesk.domain.errors import WeatherUnavailableError
from schooldesk.domain.models import WeatherReport
from schooldesk.entrypoints.api.deps import get_portal
from schooldesk.entrypoints.factory import Portal

router = APIRouter(prefix="/weather", tags=["weather"])


class WeatherResponse(BaseModel):
    temperature: float
    condition: str
    weather_code: int
    location_name: str

    @classmethod
    def of(cls, report: WeatherReport) -> "WeatherResponse":
        return cls(
            temperature=report.temperature,
            condition=report.condition.value,
            weather_code=report.weather_code,
            location_name=report.location_name,
        )


@router.get("", response_model=WeatherResponse)
def current_weather(portal: Portal = Depends(get_portal)) -> WeatherResponse:
    report = portal.dashboard.current_weather()
    if report is None:
        raise WeatherUnavailableError("날씨 정보를 가져올 수 없습니다.")
    return WeatherResponse.of(report)
