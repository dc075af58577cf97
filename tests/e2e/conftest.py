"""E2E テスト用フィクスチャ

Firestore Emulator に接続し、実際の FirestoreRecordStore を使ってテストする。

前提: FIRESTORE_EMULATOR_HOST 環境変数が設定されていること
  例: FIRESTORE_EMULATOR_HOST=localhost:8080 pytest tests/e2e/ -m e2e -v
"""

from __future__ import annotations

import os

import pytest
from fastapi.testclient import TestClient
from google.cloud import firestore
from schooldesk.adapters.firestore_store import FirestoreRecordStore
from schooldesk.adapters.local_cache import InMemoryLocalCache
from schooldesk.adapters.password_hasher import Pbkdf2PasswordHasher
from schooldesk.config import AppConfig
from schooldesk.entrypoints.api.app import app
from schooldesk.entrypoints.api.deps import get_portal
from schooldesk.entrypoints.factory import create_portal

# テスト用固定値
ADMIN_EMAIL = "e2e-admin@school.kr"
ADMIN_PASSWORD = "e2e-admin-pass"
COLLECTIONS = ["school_schedules", "training_posts", "app_shortcuts", "registered_users"]


@pytest.fixture(scope="session")
def firestore_client():
    """Firestore Emulator に接続するクライアント（セッション共有）。

    FIRESTORE_EMULATOR_HOST が未設定の場合は localhost:8080 をデフォルトとして使用する。
    エミュレーターが起動していない場合はテストが接続エラーで失敗する。
    """
    host = os.environ.get("FIRESTORE_EMULATOR_HOST", "localhost:8080")
    os.environ["FIRESTORE_EMULATOR_HOST"] = host
    return firestore.Client(project="test-project")


@pytest.fixture(autouse=True)
def _cleanup_firestore(request, firestore_client):
    """各テスト後に Emulator のデータをクリーンアップ（e2e マーク付きのみ）"""
    yield
    if not request.node.get_closest_marker("e2e"):
        return
    for collection_name in COLLECTIONS:
        for doc in firestore_client.collection(collection_name).stream():
            doc.reference.delete()


@pytest.fixture
def remote_store(firestore_client) -> FirestoreRecordStore:
    return FirestoreRecordStore(firestore_client)


@pytest.fixture
def e2e_portal(remote_store):
    """実 Firestore + インメモリキャッシュのポータル"""
    hasher = Pbkdf2PasswordHasher(iterations=1000)
    config = AppConfig(
        admin_email=ADMIN_EMAIL,
        admin_password_hash=hasher.hash(ADMIN_PASSWORD),
        project_id="test-project",
    )
    return create_portal(
        config=config, remote=remote_store, cache=InMemoryLocalCache(), hasher=hasher
    )


@pytest.fixture
def e2e_client(e2e_portal):
    app.dependency_overrides[get_portal] = lambda: e2e_portal
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers(e2e_client) -> dict:
    r = e2e_client.post(
        "/api/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD}
    )
    assert r.status_code == 200
    return {"Authorization": f"Bearer {r.json()['token']}"}
