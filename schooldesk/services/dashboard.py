"""ダッシュボード

選択日（前日・今日・翌日で移動）の共有日程、「두고두고 볼 것」（研修・お知らせ）、
天気をまとめて返す。天気の取得失敗はダッシュボード全体のエラーにしない。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date

from schooldesk.domain.errors import WeatherUnavailableError
from schooldesk.domain.models import (
    Schedule,
    SessionContext,
    TrainingPost,
    ViewMode,
    WeatherReport,
)
from schooldesk.domain.ports import WeatherSource
from schooldesk.services.schedule_service import ScheduleService
from schooldesk.services.training_board import TrainingBoardService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DashboardView:
    """ダッシュボードの表示内容"""

    day: date
    today: date
    schedules: list[Schedule] = field(default_factory=list)
    must_read: list[TrainingPost] = field(default_factory=list)
    weather: WeatherReport | None = None
    display_name: str | None = None  # None は未ログイン


class DashboardService:
    """ダッシュボードの組み立て"""

    def __init__(
        self,
        schedules: ScheduleService,
        trainings: TrainingBoardService,
        weather: WeatherSource | None = None,
    ) -> None:
        self._schedules = schedules
        self._trainings = trainings
        self._weather = weather

    def build(
        self, session: SessionContext | None, day: date, today: date
    ) -> DashboardView:
        return DashboardView(
            day=day,
            today=today,
            schedules=self._schedules.day_schedules(session, day, ViewMode.ALL),
            must_read=self._trainings.list_posts(session),
            weather=self.current_weather(),
            display_name=session.name if session else None,
        )

    def current_weather(self) -> WeatherReport | None:
        if self._weather is None:
            return None
        try:
            return self._weather.current()
        except WeatherUnavailableError as e:
            logger.warning("Weather unavailable: %s", e)
            return None
