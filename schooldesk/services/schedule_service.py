"""学校日程サービス

日程の登録・編集・削除、閲覧モード別の一覧、カレンダーグリッド、
週間/月間エクスポート行の生成をまとめる。

権限:
  - 登録: ログインユーザー（作成者 = セッションのユーザー）
  - 編集・削除: 作成者本人または管理者
  - 削除は confirm=True が必須
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import date

from schooldesk.domain.errors import (
    ConfirmationRequiredError,
    PermissionDeniedError,
    RecordNotFoundError,
    ValidationError,
)
from schooldesk.domain.models import (
    CalendarMode,
    DayCell,
    MonthlyExportRow,
    RegisteredUser,
    Schedule,
    ScheduleCategory,
    SessionContext,
    ViewMode,
    WeeklyExportRow,
)
from schooldesk.services import calendar_grid, export_projector
from schooldesk.services.record_store import RecordStore
from schooldesk.services.visibility import (
    ensure_can_modify,
    filter_visible,
    view_context_for,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScheduleInput:
    """登録・編集フォームの入力値"""

    title: str
    date: str
    category: ScheduleCategory = ScheduleCategory.OTHER
    time_range: str | None = None
    location: str | None = None
    target: str | None = None
    description: str | None = None
    is_private: bool = False


def parse_iso_date(value: str, field_label: str = "날짜") -> date:
    """
    YYYY-MM-DD を date に変換。

    Raises:
        ValidationError: 空または不正な日付の場合
    """
    if not value or not value.strip():
        raise ValidationError(f"{field_label}을(를) 입력해주세요.")
    try:
        return date.fromisoformat(value.strip())
    except ValueError as e:
        raise ValidationError(f"올바른 {field_label}이(가) 아닙니다: {value}") from e


def _blank_to_none(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip() or None


class ScheduleService:
    """学校日程の操作"""

    def __init__(
        self,
        schedules: RecordStore[Schedule],
        users: RecordStore[RegisteredUser],
    ) -> None:
        """
        Args:
            schedules: 日程のストア
            users: 作成者名の解決に使う登録アカウントのストア
        """
        self._schedules = schedules
        self._users = users

    # ── 閲覧 ────────────────────────────────────────────────────────────────

    def list_visible(
        self,
        session: SessionContext | None,
        view_mode: ViewMode = ViewMode.ALL,
        from_date: date | None = None,
        to_date: date | None = None,
    ) -> list[Schedule]:
        """
        閲覧モードで見える日程を日付順で返す。

        Raises:
            PermissionDeniedError: 未ログインで "mine" を要求した場合
        """
        context = view_context_for(session, view_mode)
        visible = filter_visible(self._schedules.fetch_all(), context)
        if from_date:
            visible = [s for s in visible if s.date >= from_date.isoformat()]
        if to_date:
            visible = [s for s in visible if s.date <= to_date.isoformat()]
        return visible

    def day_schedules(
        self,
        session: SessionContext | None,
        day: date,
        view_mode: ViewMode = ViewMode.ALL,
    ) -> list[Schedule]:
        """1日分の日程を時刻順で返す（1日詳細ビュー）"""
        return calendar_grid.entries_for_day(self.list_visible(session, view_mode), day)

    def calendar(
        self,
        session: SessionContext | None,
        anchor: date,
        today: date,
        selected: date | None = None,
        mode: CalendarMode = CalendarMode.MONTH,
        view_mode: ViewMode = ViewMode.ALL,
    ) -> list[list[DayCell]]:
        """カレンダーグリッド（週ごとの行）"""
        visible = self.list_visible(session, view_mode)
        return calendar_grid.build_grid(anchor, visible, today, selected, mode)

    # ── 登録・編集・削除 ────────────────────────────────────────────────────

    def create(self, session: SessionContext | None, data: ScheduleInput) -> Schedule:
        """
        Raises:
            PermissionDeniedError: 未ログインの場合
            ValidationError: 必須項目が欠けている場合
        """
        if session is None:
            raise PermissionDeniedError("로그인 후 일정을 등록할 수 있습니다.")
        schedule = self._build(str(uuid.uuid4()), data, author_email=session.email)
        self._schedules.upsert(schedule)
        logger.info(
            "Schedule created: id=%s, date=%s, author=%s, private=%s",
            schedule.id,
            schedule.date,
            session.email,
            schedule.is_private,
        )
        return schedule

    def update(
        self, session: SessionContext | None, schedule_id: str, data: ScheduleInput
    ) -> Schedule:
        """
        同じ id でレコード全体を置き換える（作成者は変えない）。

        Raises:
            RecordNotFoundError: id が存在しない場合
            PermissionDeniedError: 作成者・管理者以外の場合
            ValidationError: 必須項目が欠けている場合
        """
        current = self._require(schedule_id)
        ensure_can_modify(current, session)
        schedule = self._build(schedule_id, data, author_email=current.author_email)
        self._schedules.upsert(schedule)
        logger.info("Schedule updated: id=%s, by=%s", schedule_id, session.email)
        return schedule

    def delete(
        self, session: SessionContext | None, schedule_id: str, confirm: bool = False
    ) -> None:
        """
        Raises:
            RecordNotFoundError: id が存在しない場合
            PermissionDeniedError: 作成者・管理者以外の場合
            ConfirmationRequiredError: confirm が付いていない場合
        """
        current = self._require(schedule_id)
        ensure_can_modify(current, session)
        if not confirm:
            raise ConfirmationRequiredError("일정 삭제를 확인해주세요.")
        self._schedules.delete(schedule_id)
        logger.info("Schedule deleted: id=%s, by=%s", schedule_id, session.email)

    def drain_warnings(self) -> list[str]:
        return self._schedules.drain_warnings()

    # ── エクスポート ────────────────────────────────────────────────────────

    def weekly_export(self, reference: date) -> list[WeeklyExportRow]:
        """reference を含む週（月〜日）の公開日程"""
        return export_projector.weekly_rows(
            self._schedules.fetch_all(), reference, self._users.fetch_all()
        )

    def monthly_export(self, year: int, month: int) -> list[MonthlyExportRow]:
        """指定月の公開日程（祝日付き）"""
        return export_projector.monthly_rows(
            self._schedules.fetch_all(), year, month, self._users.fetch_all()
        )

    # ── 内部ヘルパー ─────────────────────────────────────────────────────────

    def _require(self, schedule_id: str) -> Schedule:
        schedule = self._schedules.get(schedule_id)
        if schedule is None:
            raise RecordNotFoundError(f"schedule not found: {schedule_id}")
        return schedule

    @staticmethod
    def _build(
        schedule_id: str, data: ScheduleInput, author_email: str | None
    ) -> Schedule:
        title = (data.title or "").strip()
        if not title:
            raise ValidationError("일정 제목을 입력해주세요.")
        day = parse_iso_date(data.date)
        return Schedule(
            id=schedule_id,
            title=title,
            date=day.isoformat(),
            category=data.category,
            time_range=_blank_to_none(data.time_range),
            location=_blank_to_none(data.location),
            target=_blank_to_none(data.target),
            description=_blank_to_none(data.description),
            author_email=author_email,
            is_private=data.is_private,
        )
