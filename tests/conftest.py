"""共通テストフィクスチャ

全テストから利用可能なモックオブジェクトとサンプルデータを提供。

モックの作成:
- MagicMock(spec=ABC) でABCのメソッドシグネチャを保持
"""

from unittest.mock import MagicMock

import pytest
from schooldesk.adapters.local_cache import InMemoryLocalCache
from schooldesk.adapters.password_hasher import Pbkdf2PasswordHasher
from schooldesk.config import AppConfig
from schooldesk.domain.models import (
    Role,
    Schedule,
    ScheduleCategory,
    SessionContext,
    WeatherCondition,
    WeatherReport,
)
from schooldesk.domain.ports import RemoteRecordStore, WeatherSource
from schooldesk.entrypoints.factory import create_portal
from schooldesk.services.dashboard import DashboardService

ADMIN_EMAIL = "admin@school.kr"
ADMIN_PASSWORD = "admin-pass"
TEACHER_EMAIL = "teacher@school.kr"
OTHER_EMAIL = "other@school.kr"

# ========== サンプルデータ ==========


@pytest.fixture
def admin_session() -> SessionContext:
    return SessionContext(email=ADMIN_EMAIL, name="관리자", role=Role.ADMIN)


@pytest.fixture
def teacher_session() -> SessionContext:
    return SessionContext(email=TEACHER_EMAIL, name="김교사", role=Role.USER)


@pytest.fixture
def other_session() -> SessionContext:
    return SessionContext(email=OTHER_EMAIL, name="이교사", role=Role.USER)


@pytest.fixture
def public_schedule() -> Schedule:
    """サンプル: 教師が登録した公開の日程"""
    return Schedule(
        id="s-public",
        title="학부모 상담주간",
        date="2026-03-10",
        category=ScheduleCategory.EVENT,
        time_range="14:00~16:00",
        location="각 교실",
        target="전교생 학부모",
        author_email=TEACHER_EMAIL,
    )


@pytest.fixture
def private_schedule() -> Schedule:
    """サンプル: 教師が登録した非公開の日程"""
    return Schedule(
        id="s-private",
        title="병원 예약",
        date="2026-03-10",
        category=ScheduleCategory.DUTY,
        time_range="09:00",
        author_email=TEACHER_EMAIL,
        is_private=True,
    )


@pytest.fixture
def others_schedule() -> Schedule:
    """サンプル: 別の教師が登録した公開の日程"""
    return Schedule(
        id="s-other",
        title="3월 학년협의회",
        date="2026-03-11",
        category=ScheduleCategory.MEETING,
        author_email=OTHER_EMAIL,
    )


@pytest.fixture
def sample_weather() -> WeatherReport:
    return WeatherReport(
        temperature=12.5,
        condition=WeatherCondition.PARTLY_CLOUDY,
        weather_code=2,
        location_name="김천시 다수동",
    )


# ========== モック ==========


@pytest.fixture
def mock_remote() -> MagicMock:
    """RemoteRecordStoreのモック（デフォルトは空コレクション）"""
    mock = MagicMock(spec=RemoteRecordStore)
    mock.fetch_all.return_value = []
    mock.fetch_where.return_value = []
    return mock


@pytest.fixture
def mock_weather(sample_weather) -> MagicMock:
    """WeatherSourceのモック"""
    mock = MagicMock(spec=WeatherSource)
    mock.current.return_value = sample_weather
    return mock


@pytest.fixture
def cache() -> InMemoryLocalCache:
    return InMemoryLocalCache()


@pytest.fixture
def hasher() -> Pbkdf2PasswordHasher:
    """テスト用に反復回数を落としたハッシュ"""
    return Pbkdf2PasswordHasher(iterations=1000)


# ========== 組み立て済みポータル ==========


@pytest.fixture
def app_config(hasher) -> AppConfig:
    return AppConfig(
        admin_email=ADMIN_EMAIL,
        admin_password_hash=hasher.hash(ADMIN_PASSWORD),
        default_user_password="123456",
    )


@pytest.fixture
def portal(app_config, cache, hasher, mock_weather):
    """リモートなし・インメモリキャッシュ・天気モックのポータル"""
    portal = create_portal(config=app_config, cache=cache, hasher=hasher)
    portal.dashboard = DashboardService(portal.schedules, portal.trainings, mock_weather)
    return portal


# ========== API クライアント ==========


@pytest.fixture
def client(portal):
    """Portal を差し替えた TestClient"""
    from fastapi.testclient import TestClient
    from schooldesk.entrypoints.api.app import app
    from schooldesk.entrypoints.api.deps import get_portal

    app.dependency_overrides[get_portal] = lambda: portal
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def teacher_headers(portal, teacher_session) -> dict:
    return {"Authorization": f"Bearer {portal.sessions.open(teacher_session)}"}


@pytest.fixture
def other_headers(portal, other_session) -> dict:
    return {"Authorization": f"Bearer {portal.sessions.open(other_session)}"}


@pytest.fixture
def admin_headers(portal, admin_session) -> dict:
    return {"Authorization": f"Bearer {portal.sessions.open(admin_session)}"}
