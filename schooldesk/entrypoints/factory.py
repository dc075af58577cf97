"""Factory - 依存性注入の組み立て

全AdapterとServiceを組み立て、Portal（API・CLI から使うサービス一式）を生成する。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from zoneinfo import ZoneInfo

from google.api_core import exceptions as gcp_exceptions
from google.auth import exceptions as auth_exceptions
from google.cloud import firestore

from schooldesk.adapters.firestore_store import FirestoreRecordStore
from schooldesk.adapters.ical_renderer import ICalRenderer
from schooldesk.adapters.local_cache import FileLocalCache, InMemoryLocalCache
from schooldesk.adapters.open_meteo import OpenMeteoWeatherSource
from schooldesk.adapters.password_hasher import Pbkdf2PasswordHasher
from schooldesk.adapters.xlsx_renderer import XlsxExportRenderer
from schooldesk.config import AppConfig
from schooldesk.domain.errors import RemoteStoreError
from schooldesk.domain.ports import (
    CalendarFeedRenderer,
    ExportRenderer,
    LocalCache,
    PasswordHasher,
    RemoteRecordStore,
)
from schooldesk.services import record_kinds
from schooldesk.services.auth import AuthService, SessionRegistry
from schooldesk.services.dashboard import DashboardService
from schooldesk.services.record_store import RecordStore
from schooldesk.services.schedule_service import ScheduleService
from schooldesk.services.shortcut_service import ShortcutService
from schooldesk.services.training_board import TrainingBoardService
from schooldesk.services.user_admin import UserAdminService

logger = logging.getLogger(__name__)


@dataclass
class Portal:
    """組み立て済みのサービス一式（プロセスで1つ）"""

    config: AppConfig
    sessions: SessionRegistry
    auth: AuthService
    schedules: ScheduleService
    trainings: TrainingBoardService
    shortcuts: ShortcutService
    users: UserAdminService
    dashboard: DashboardService
    export_renderer: ExportRenderer
    feed_renderer: CalendarFeedRenderer

    def today(self) -> date:
        """学校のタイムゾーンでの今日（サーバーのローカル時刻には依存しない）"""
        return datetime.now(ZoneInfo(self.config.timezone)).date()


def create_portal(
    config: AppConfig | None = None,
    remote: RemoteRecordStore | None = None,
    cache: LocalCache | None = None,
    hasher: PasswordHasher | None = None,
) -> Portal:
    """
    Portal を生成（全依存を組み立て）。

    Args:
        config: アプリケーション設定（Noneの場合は環境変数から読み込み）
        remote: リモートストア（Noneの場合は config.project_id から生成）
        cache: ローカルキャッシュ（Noneの場合は config から生成）
        hasher: パスワードハッシュ（Noneの場合は PBKDF2）

    Raises:
        ValueError: 必須設定が不足している場合
    """
    if config is None:
        config = AppConfig.from_env()

    logger.info(
        "Creating portal: project_id=%s, local_mode=%s",
        config.project_id or "(none)",
        config.local_mode,
    )

    if remote is None:
        remote = _create_remote(config)
    if cache is None:
        cache = _create_cache(config)

    schedule_store = RecordStore(record_kinds.SCHEDULES, cache, remote)
    training_store = RecordStore(record_kinds.TRAININGS, cache, remote)
    shortcut_store = RecordStore(record_kinds.SHORTCUTS, cache, remote)
    user_store = RecordStore(record_kinds.USERS, cache, remote)

    hasher = hasher or Pbkdf2PasswordHasher()
    schedules = ScheduleService(schedule_store, user_store)
    trainings = TrainingBoardService(training_store)
    weather = OpenMeteoWeatherSource(
        latitude=config.weather_latitude,
        longitude=config.weather_longitude,
        location_name=config.weather_location_name,
        timezone=config.timezone,
    )

    sessions = SessionRegistry()

    portal = Portal(
        config=config,
        sessions=sessions,
        auth=AuthService(
            users=user_store,
            hasher=hasher,
            admin_email=config.admin_email,
            admin_password_hash=config.admin_password_hash,
            default_password=config.default_user_password,
        ),
        schedules=schedules,
        trainings=trainings,
        shortcuts=ShortcutService(shortcut_store),
        users=UserAdminService(
            user_store,
            hasher,
            default_password=config.default_user_password,
            sessions=sessions,
        ),
        dashboard=DashboardService(schedules, trainings, weather),
        export_renderer=XlsxExportRenderer(),
        feed_renderer=ICalRenderer(),
    )
    logger.info("Portal created successfully")
    return portal


def _create_remote(config: AppConfig) -> RemoteRecordStore | None:
    if not config.project_id:
        logger.warning("PROJECT_ID not set, running on local cache only")
        return None
    try:
        db = firestore.Client(project=config.project_id)
    except (gcp_exceptions.GoogleAPIError, auth_exceptions.GoogleAuthError) as e:
        logger.error("Firestore client unavailable, degrading to cache: %s", e)
        return _UnavailableRemoteStore(str(e))
    logger.info("Firestore client initialized: project=%s", config.project_id)
    return FirestoreRecordStore(db)


def _create_cache(config: AppConfig) -> LocalCache:
    if config.local_mode:
        logger.info("LOCAL_MODE: using in-memory cache")
        return InMemoryLocalCache()
    return FileLocalCache(config.cache_dir)


# Null Object Pattern（Firestore が設定されているが接続できない場合の代替）


class _UnavailableRemoteStore(RemoteRecordStore):
    """全操作で RemoteStoreError を送出するリモートストア

    RecordStore 側でキャッシュへのフォールバックと同期警告に変換される。
    """

    def __init__(self, reason: str) -> None:
        self._reason = reason

    def fetch_all(
        self, collection: str, order_by: str | None = None, descending: bool = False
    ) -> list[dict]:
        raise RemoteStoreError(f"remote store unavailable: {self._reason}")

    def fetch_where(self, collection: str, field: str, value: object) -> list[dict]:
        raise RemoteStoreError(f"remote store unavailable: {self._reason}")

    def upsert(self, collection: str, record_id: str, data: dict) -> None:
        raise RemoteStoreError(f"remote store unavailable: {self._reason}")

    def delete(self, collection: str, record_id: str) -> None:
        raise RemoteStoreError(f"remote store unavailable: {self._reason}")
