"""FirestoreRecordStore のユニットテスト

Firestore クライアントをモックし、id の扱いとエラー変換を検証する。
"""

from unittest.mock import MagicMock

import pytest
from google.api_core import exceptions as gcp_exceptions
from google.cloud import firestore
from schooldesk.adapters.firestore_store import FirestoreRecordStore
from schooldesk.domain.errors import RemoteStoreError


def _make_snap(doc_id: str, data: dict) -> MagicMock:
    """Firestore DocumentSnapshot のモックを生成する"""
    snap = MagicMock()
    snap.id = doc_id
    snap.to_dict.return_value = data
    return snap


class TestFetchAll:
    def test_ordered_fetch_restores_id_and_drops_timestamp(self):
        # Arrange
        mock_db = MagicMock()
        query = mock_db.collection.return_value.order_by.return_value
        query.stream.return_value = [
            _make_snap("s1", {"title": "개학식", "date": "2026-03-02", "updated_at": "ts"})
        ]
        store = FirestoreRecordStore(mock_db)

        # Act
        rows = store.fetch_all("school_schedules", order_by="date")

        # Assert
        assert rows == [{"id": "s1", "title": "개학식", "date": "2026-03-02"}]
        mock_db.collection.assert_called_once_with("school_schedules")
        mock_db.collection.return_value.order_by.assert_called_once_with(
            "date", direction=firestore.Query.ASCENDING
        )

    def test_descending_order(self):
        mock_db = MagicMock()
        mock_db.collection.return_value.order_by.return_value.stream.return_value = []
        store = FirestoreRecordStore(mock_db)

        store.fetch_all("training_posts", order_by="date", descending=True)

        mock_db.collection.return_value.order_by.assert_called_once_with(
            "date", direction=firestore.Query.DESCENDING
        )

    def test_unordered_fetch_streams_collection(self):
        mock_db = MagicMock()
        mock_db.collection.return_value.stream.return_value = [
            _make_snap("1", {"label": "나이스", "url": "https://www.neis.go.kr"})
        ]
        store = FirestoreRecordStore(mock_db)

        rows = store.fetch_all("app_shortcuts")

        assert rows[0]["id"] == "1"
        mock_db.collection.return_value.order_by.assert_not_called()

    def test_api_error_becomes_remote_store_error(self):
        mock_db = MagicMock()
        mock_db.collection.return_value.stream.side_effect = (
            gcp_exceptions.ServiceUnavailable("down")
        )
        store = FirestoreRecordStore(mock_db)

        with pytest.raises(RemoteStoreError):
            store.fetch_all("app_shortcuts")


class TestFetchWhere:
    def test_equality_query(self):
        mock_db = MagicMock()
        where = mock_db.collection.return_value.where
        where.return_value.stream.return_value = [
            _make_snap("t@school.kr", {"email": "t@school.kr", "name": "김교사"})
        ]
        store = FirestoreRecordStore(mock_db)

        rows = store.fetch_where("registered_users", "email", "t@school.kr")

        assert rows[0]["id"] == "t@school.kr"
        where.assert_called_once_with("email", "==", "t@school.kr")


class TestWrite:
    def test_upsert_sets_whole_document_without_id(self):
        mock_db = MagicMock()
        doc_ref = mock_db.collection.return_value.document.return_value
        store = FirestoreRecordStore(mock_db)

        store.upsert("app_shortcuts", "5", {"id": "5", "label": "교육청", "url": "https://gbe.kr"})

        mock_db.collection.return_value.document.assert_called_once_with("5")
        payload = doc_ref.set.call_args.args[0]
        assert "id" not in payload
        assert payload["label"] == "교육청"
        assert payload["updated_at"] is firestore.SERVER_TIMESTAMP

    def test_upsert_error_is_wrapped(self):
        mock_db = MagicMock()
        mock_db.collection.return_value.document.return_value.set.side_effect = (
            gcp_exceptions.DeadlineExceeded("timeout")
        )
        store = FirestoreRecordStore(mock_db)

        with pytest.raises(RemoteStoreError):
            store.upsert("app_shortcuts", "5", {"label": "x", "url": "y"})

    def test_delete(self):
        mock_db = MagicMock()
        store = FirestoreRecordStore(mock_db)

        store.delete("school_schedules", "s1")

        mock_db.collection.return_value.document.assert_called_once_with("s1")
        mock_db.collection.return_value.document.return_value.delete.assert_called_once()

    def test_delete_error_is_wrapped(self):
        mock_db = MagicMock()
        mock_db.collection.return_value.document.return_value.delete.side_effect = (
            gcp_exceptions.PermissionDenied("denied")
        )
        store = FirestoreRecordStore(mock_db)

        with pytest.raises(RemoteStoreError):
            store.delete("school_schedules", "s1")
