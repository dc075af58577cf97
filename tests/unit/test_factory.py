"""create_portal のユニットテスト

Firestore に接続できない場合でもポータルが組み上がり、
キャッシュで動作し続けることを確認する。
"""

from datetime import date, datetime, timezone
from unittest.mock import patch

import pytest
from google.auth.exceptions import DefaultCredentialsError
from schooldesk.adapters.firestore_store import FirestoreRecordStore
from schooldesk.adapters.local_cache import FileLocalCache, InMemoryLocalCache
from schooldesk.config import AppConfig
from schooldesk.entrypoints.factory import (
    _create_cache,
    _create_remote,
    _UnavailableRemoteStore,
    create_portal,
)
from schooldesk.services.schedule_service import ScheduleInput

from tests.conftest import TEACHER_EMAIL


def _config(**overrides) -> AppConfig:
    values = {"admin_email": "admin@school.kr", "admin_password_hash": "x"}
    values.update(overrides)
    return AppConfig(**values)


class TestCreateRemote:
    def test_no_project_id_means_no_remote(self):
        assert _create_remote(_config()) is None

    def test_firestore_client(self):
        with patch("schooldesk.entrypoints.factory.firestore.Client") as client_cls:
            remote = _create_remote(_config(project_id="school-project"))

        client_cls.assert_called_once_with(project="school-project")
        assert isinstance(remote, FirestoreRecordStore)

    def test_missing_credentials_degrades_to_unavailable_store(self):
        with patch(
            "schooldesk.entrypoints.factory.firestore.Client",
            side_effect=DefaultCredentialsError("no credentials"),
        ):
            remote = _create_remote(_config(project_id="school-project"))

        assert isinstance(remote, _UnavailableRemoteStore)


class TestCreateCache:
    def test_local_mode_uses_memory(self):
        assert isinstance(_create_cache(_config(local_mode=True)), InMemoryLocalCache)

    def test_file_cache(self, tmp_path):
        cache = _create_cache(_config(cache_dir=str(tmp_path)))

        assert isinstance(cache, FileLocalCache)


class TestDegradedPortal:
    def test_reads_seed_and_reports_sync_warning(self, teacher_session, cache, hasher):
        portal = create_portal(
            config=_config(),
            remote=_UnavailableRemoteStore("offline"),
            cache=cache,
            hasher=hasher,
        )

        assert len(portal.schedules.list_visible(None)) == 4
        assert len(portal.shortcuts.list_shortcuts()) == 4

        schedule = portal.schedules.create(
            teacher_session, ScheduleInput(title="학년 협의회", date="2026-03-10")
        )

        assert schedule.author_email == TEACHER_EMAIL
        warnings = portal.schedules.drain_warnings()
        assert len(warnings) == 1
        assert "offline" in warnings[0]


class TestPortalToday:
    _UTC_NOW = datetime(2026, 3, 2, 23, 30, tzinfo=timezone.utc)

    @pytest.mark.parametrize(
        "tz, expected",
        [
            ("Asia/Seoul", date(2026, 3, 3)),
            ("UTC", date(2026, 3, 2)),
        ],
    )
    def test_uses_configured_timezone(self, cache, hasher, tz, expected):
        portal = create_portal(config=_config(timezone=tz), cache=cache, hasher=hasher)

        with patch("schooldesk.entrypoints.factory.datetime") as clock:
            clock.now.side_effect = lambda zone=None: self._UTC_NOW.astimezone(zone)
            assert portal.today() == expected
