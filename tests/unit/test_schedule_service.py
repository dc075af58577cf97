"""ScheduleService のユニットテスト"""

from datetime import date

import pytest
from schooldesk.domain.errors import (
    ConfirmationRequiredError,
    PermissionDeniedError,
    RecordNotFoundError,
    RemoteStoreError,
    ValidationError,
)
from schooldesk.domain.models import CalendarMode, ScheduleCategory, ViewMode
from schooldesk.services import record_kinds
from schooldesk.services.record_store import RecordStore
from schooldesk.services.schedule_service import ScheduleInput, ScheduleService

from tests.conftest import TEACHER_EMAIL


@pytest.fixture
def store(cache):
    store = RecordStore(record_kinds.SCHEDULES, cache)
    cache.set("school_schedules", "[]")
    return store


@pytest.fixture
def service(store, cache) -> ScheduleService:
    return ScheduleService(store, RecordStore(record_kinds.USERS, cache))


def _input(**overrides) -> ScheduleInput:
    values = {
        "title": "교직원 연수",
        "date": "2026-03-12",
        "category": ScheduleCategory.TRAINING,
        "time_range": "15:30",
        "location": "도서실",
    }
    values.update(overrides)
    return ScheduleInput(**values)


class TestCreate:
    def test_author_is_session_user(self, service, teacher_session):
        schedule = service.create(teacher_session, _input())

        assert schedule.author_email == TEACHER_EMAIL
        assert schedule.id
        assert service.list_visible(teacher_session) == [schedule]

    def test_anonymous_cannot_create(self, service):
        with pytest.raises(PermissionDeniedError):
            service.create(None, _input())

    @pytest.mark.parametrize(
        "overrides", [{"title": "  "}, {"date": ""}, {"date": "2026-13-01"}]
    )
    def test_validation_rejects_before_mutation(self, service, teacher_session, overrides):
        with pytest.raises(ValidationError):
            service.create(teacher_session, _input(**overrides))

        assert service.list_visible(teacher_session) == []

    def test_blank_optionals_become_none(self, service, teacher_session):
        schedule = service.create(teacher_session, _input(location=" ", target=""))

        assert schedule.location is None
        assert schedule.target is None


class TestVisibility:
    def test_private_schedule_only_in_mine(self, service, teacher_session, other_session):
        private = service.create(teacher_session, _input(is_private=True))

        assert service.list_visible(teacher_session, ViewMode.ALL) == []
        assert service.list_visible(other_session, ViewMode.ALL) == []
        assert service.list_visible(teacher_session, ViewMode.MINE) == [private]
        assert service.list_visible(other_session, ViewMode.MINE) == []

    def test_anonymous_mine_is_refused(self, service):
        with pytest.raises(PermissionDeniedError):
            service.list_visible(None, ViewMode.MINE)

    def test_date_range(self, service, teacher_session):
        service.create(teacher_session, _input(date="2026-03-01"))
        inside = service.create(teacher_session, _input(date="2026-03-15"))
        service.create(teacher_session, _input(date="2026-04-01"))

        result = service.list_visible(
            teacher_session, from_date=date(2026, 3, 10), to_date=date(2026, 3, 31)
        )

        assert result == [inside]

    def test_day_schedules_sorted_by_time(self, service, teacher_session):
        late = service.create(teacher_session, _input(title="늦게", time_range="16:00"))
        untimed = service.create(teacher_session, _input(title="종일", time_range=None))
        early = service.create(teacher_session, _input(title="일찍", time_range="08:40"))

        result = service.day_schedules(None, date(2026, 3, 12))

        assert result == [early, late, untimed]

    def test_calendar_uses_visible_schedules(self, service, teacher_session):
        service.create(teacher_session, _input(is_private=True))

        weeks = service.calendar(
            None, date(2026, 3, 1), date(2026, 3, 1), mode=CalendarMode.MONTH
        )

        assert all(cell.entries == [] for week in weeks for cell in week)


class TestUpdate:
    def test_author_can_update_and_author_is_kept(self, service, teacher_session):
        original = service.create(teacher_session, _input())

        updated = service.update(teacher_session, original.id, _input(title="변경된 연수"))

        assert updated.id == original.id
        assert updated.title == "변경된 연수"
        assert updated.author_email == TEACHER_EMAIL
        assert len(service.list_visible(teacher_session)) == 1

    def test_admin_can_update(self, service, teacher_session, admin_session):
        original = service.create(teacher_session, _input())

        updated = service.update(admin_session, original.id, _input(title="관리자 수정"))

        assert updated.author_email == TEACHER_EMAIL

    def test_other_user_cannot_update(self, service, teacher_session, other_session):
        original = service.create(teacher_session, _input())

        with pytest.raises(PermissionDeniedError):
            service.update(other_session, original.id, _input(title="x"))

    def test_unknown_id(self, service, teacher_session):
        with pytest.raises(RecordNotFoundError):
            service.update(teacher_session, "missing", _input())


class TestDelete:
    def test_requires_confirmation(self, service, teacher_session):
        schedule = service.create(teacher_session, _input())

        with pytest.raises(ConfirmationRequiredError):
            service.delete(teacher_session, schedule.id)
        assert len(service.list_visible(teacher_session)) == 1

    def test_confirmed_delete(self, service, teacher_session):
        schedule = service.create(teacher_session, _input())

        service.delete(teacher_session, schedule.id, confirm=True)

        assert service.list_visible(teacher_session) == []

    def test_permission_checked_before_confirmation(self, service, teacher_session, other_session):
        schedule = service.create(teacher_session, _input())

        with pytest.raises(PermissionDeniedError):
            service.delete(other_session, schedule.id)


class TestWarnings:
    def test_remote_failure_is_surfaced(self, cache, mock_remote, teacher_session):
        mock_remote.upsert.side_effect = RemoteStoreError("down")
        service = ScheduleService(
            RecordStore(record_kinds.SCHEDULES, cache, mock_remote),
            RecordStore(record_kinds.USERS, cache),
        )

        service.create(teacher_session, _input())

        assert len(service.drain_warnings()) == 1
        assert service.drain_warnings() == []


class TestExports:
    def test_weekly_export_excludes_private(self, service, teacher_session):
        service.create(teacher_session, _input(title="공개 연수"))
        service.create(teacher_session, _input(title="비공개", is_private=True))

        rows = service.weekly_export(date(2026, 3, 12))

        joined = "\n".join(r.others for r in rows)
        assert "공개 연수" in joined
        assert "비공개" not in joined

    def test_monthly_export_has_holiday(self, service):
        rows = service.monthly_export(2026, 3)

        assert rows[0].observance == "삼일절"
