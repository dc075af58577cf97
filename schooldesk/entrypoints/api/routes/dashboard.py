"""ダッシュボード API ルート

GET /api/dashboard?date=YYYY-MM-DD  → 200 { date, prev_date, next_date, schedules, must_read, weather, display_name }

date 省略時は今日。前日・翌日へは prev_date / next_date で移動する。
"""

from __future__ import annotations

import logging
from datetime import date, timedelta

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from schooldesk.domain.models import SessionContext
from schooldesk.entrypoints.api.deps import get_optional_session, get_portal
from schooldesk.entrypoints.api.routes.schedules import ScheduleResponse
from schooldesk.entrypoints.api.routes.trainings import TrainingResponse
from schooldesk.entrypoints.api.routes.weather import WeatherResponse
from schooldesk.entrypoints.factory import Portal

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/dashboard", tags=["dashboard"])


class DashboardResponse(BaseModel):
    date: date
    today: date
    is_today: bool
    prev_date: date
    next_date: date
    schedules: list[ScheduleResponse]
    must_read: list[TrainingResponse]
    weather: WeatherResponse | None = None
    display_name: str | None = None


@router.get("", response_model=DashboardResponse)
def get_dashboard(
    day: date | None = Query(default=None, alias="date"),
    session: SessionContext | None = Depends(get_optional_session),
    portal: Portal = Depends(get_portal),
) -> DashboardResponse:
    # 天気の取得は同期 HTTP なので def（イベントループを止めない）
    today = portal.today()
    view = portal.dashboard.build(session, day or today, today)
    return DashboardResponse(
        date=view.day,
        today=view.today,
        is_today=view.day == view.today,
        prev_date=view.day - timedelta(days=1),
        next_date=view.day + timedelta(days=1),
        schedules=[ScheduleResponse.of(s) for s in view.schedules],
        must_read=[TrainingResponse.of(p) for p in view.must_read],
        weather=WeatherResponse.of(view.weather) if view.weather else None,
        display_name=view.display_name,
    )
