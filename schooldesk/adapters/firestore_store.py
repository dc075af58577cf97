"""Firestore Record Store Adapter

RemoteRecordStore の Firestore 実装。

Firestore コレクション構造:
  school_schedules/{scheduleId}     ← 学校日程
  training_posts/{postId}           ← 研修・お知らせ
  app_shortcuts/{shortcutId}        ← 共通ショートカット
  registered_users/{email}          ← 登録アカウント

ドキュメントIDがレコードの id を兼ねるため、保存時には id フィールドを除き、
取得時に snap.id から復元する。
"""

from __future__ import annotations

import logging

from google.api_core import exceptions as gcp_exceptions
from google.auth import exceptions as auth_exceptions
from google.cloud import firestore

from schooldesk.domain.errors import RemoteStoreError
from schooldesk.domain.ports import RemoteRecordStore

logger = logging.getLogger(__name__)

# 通信・認証系の失敗はすべて RemoteStoreError に変換してキャッシュへフォールバックさせる
_REMOTE_ERRORS = (gcp_exceptions.GoogleAPIError, auth_exceptions.GoogleAuthError)


class FirestoreRecordStore(RemoteRecordStore):
    """
    Firestore を使った RemoteRecordStore 実装。

    コレクション名は呼び出し側（RecordKind）が指定する。
    """

    def __init__(self, db: firestore.Client) -> None:
        """
        Args:
            db: 初期化済みの Firestore クライアント
        """
        self._db = db

    def fetch_all(
        self,
        collection: str,
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[dict]:
        """コレクション全件を取得"""
        query = self._db.collection(collection)
        if order_by:
            direction = (
                firestore.Query.DESCENDING if descending else firestore.Query.ASCENDING
            )
            query = query.order_by(order_by, direction=direction)
        try:
            records = [self._snap_to_dict(snap) for snap in query.stream()]
        except _REMOTE_ERRORS as e:
            logger.warning("Firestore fetch failed: collection=%s, error=%s", collection, e)
            raise RemoteStoreError(f"fetch {collection} failed: {e}") from e
        logger.info("Fetched %d records from %s", len(records), collection)
        return records

    def fetch_where(self, collection: str, field: str, value: object) -> list[dict]:
        """field == value のレコードを取得"""
        try:
            snaps = self._db.collection(collection).where(field, "==", value).stream()
            return [self._snap_to_dict(snap) for snap in snaps]
        except _REMOTE_ERRORS as e:
            logger.warning(
                "Firestore query failed: collection=%s, field=%s, error=%s",
                collection,
                field,
                e,
            )
            raise RemoteStoreError(f"query {collection} failed: {e}") from e

    def upsert(self, collection: str, record_id: str, data: dict) -> None:
        """レコード全体を置換（merge しない）"""
        payload = {k: v for k, v in data.items() if k != "id"}
        payload["updated_at"] = firestore.SERVER_TIMESTAMP
        try:
            self._db.collection(collection).document(record_id).set(payload)
        except _REMOTE_ERRORS as e:
            logger.warning(
                "Firestore upsert failed: collection=%s, id=%s, error=%s",
                collection,
                record_id,
                e,
            )
            raise RemoteStoreError(f"upsert {collection}/{record_id} failed: {e}") from e
        logger.info("Upserted record: collection=%s, id=%s", collection, record_id)

    def delete(self, collection: str, record_id: str) -> None:
        """レコードを削除"""
        try:
            self._db.collection(collection).document(record_id).delete()
        except _REMOTE_ERRORS as e:
            logger.warning(
                "Firestore delete failed: collection=%s, id=%s, error=%s",
                collection,
                record_id,
                e,
            )
            raise RemoteStoreError(f"delete {collection}/{record_id} failed: {e}") from e
        logger.info("Deleted record: collection=%s, id=%s", collection, record_id)

    # ── 変換ヘルパー ──────────────────────────────────────────────────────────

    @staticmethod
    def _snap_to_dict(snap) -> dict:
        data = dict(snap.to_dict() or {})
        data.pop("updated_at", None)
        data["id"] = snap.id
        return data
