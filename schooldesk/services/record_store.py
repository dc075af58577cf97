"""RecordStore - リモートストアとローカルキャッシュの統合

読み込み（read-through）:
  1. リモートから kind ごとの順序で全件取得 → 成功したらキャッシュを上書きして返す
  2. リモート失敗 / 未設定 → ローカルキャッシュ
  3. キャッシュなし / 破損 → シードデータ（キャッシュにも保存）

書き込み（write-through）:
  メモリとキャッシュへ先に反映し（楽観的更新）、その後リモートへ伝搬する。
  リモートへの伝搬に失敗してもローカルの変更は取り消さない（後勝ち）。
  失敗は警告として drain_warnings() で呼び出し元に返す。
"""

from __future__ import annotations

import json
import logging
import threading
from typing import Generic, TypeVar

from schooldesk.domain.errors import RecordNotFoundError, RemoteStoreError
from schooldesk.domain.ports import LocalCache, RemoteRecordStore
from schooldesk.services.record_kinds import RecordKind

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RecordStore(Generic[T]):
    """
    1種類のレコードについての read-through / write-through ストア。

    メモリ上のコレクションとキャッシュの書き換えはロックで直列化する
    （def のルートはスレッドプールで並行に動く）。リモートへの伝搬はロックの外で行う。
    """

    def __init__(
        self,
        kind: RecordKind[T],
        cache: LocalCache,
        remote: RemoteRecordStore | None = None,
    ) -> None:
        """
        Args:
            kind: レコード種別（コレクション名・変換関数・シード）
            cache: ローカルキャッシュ
            remote: リモートストア（None の場合はキャッシュのみで動作）
        """
        self._kind = kind
        self._cache = cache
        self._remote = remote
        self._records: list[T] | None = None
        self._warnings: list[str] = []
        self._lock = threading.Lock()

    @property
    def kind(self) -> RecordKind[T]:
        return self._kind

    # ── 読み込み ─────────────────────────────────────────────────────────────

    def fetch_all(self) -> list[T]:
        """全件を kind の順序で返す（例外は送出しない）"""
        if self._remote is not None:
            try:
                rows = self._remote.fetch_all(
                    self._kind.collection,
                    order_by=self._kind.sort_field,
                    descending=self._kind.descending,
                )
            except RemoteStoreError as e:
                logger.warning(
                    "Remote fetch failed, falling back to cache: kind=%s, error=%s",
                    self._kind.name,
                    e,
                )
            else:
                records = self._decode_remote(rows)
                self._records = records
                self._write_cache(records)
                return list(records)

        cached = self._read_cache()
        if cached is not None:
            self._records = cached
            return list(cached)

        seed = self._sorted(list(self._kind.seed))
        logger.info(
            "Cache empty, seeding: kind=%s, records=%d", self._kind.name, len(seed)
        )
        self._records = seed
        self._write_cache(seed)
        return list(seed)

    def get(self, record_id: str) -> T | None:
        """id でレコードを取得。存在しない場合は None"""
        for record in self._loaded():
            if self._kind.get_id(record) == record_id:
                return record
        return None

    def find_by(self, field: str, value: object) -> list[T]:
        """
        field == value のレコードを返す。

        リモートがあれば条件付き取得を使い、失敗時はメモリ上の全件から絞り込む。
        """
        if self._remote is not None:
            try:
                rows = self._remote.fetch_where(self._kind.collection, field, value)
            except RemoteStoreError as e:
                logger.warning(
                    "Remote query failed, filtering locally: kind=%s, field=%s, error=%s",
                    self._kind.name,
                    field,
                    e,
                )
            else:
                return self._decode_remote(rows)
        return [
            r for r in self._loaded() if self._kind.to_dict(r).get(field) == value
        ]

    # ── 書き込み ─────────────────────────────────────────────────────────────

    def upsert(self, record: T) -> T:
        """同じ id のレコードを置換、なければ追加"""
        record_id = self._kind.get_id(record)
        with self._lock:
            records = [r for r in self._loaded() if self._kind.get_id(r) != record_id]
            records.append(record)
            self._records = self._sorted(records)
            self._write_cache(self._records)

        if self._remote is not None:
            try:
                self._remote.upsert(
                    self._kind.collection, record_id, self._kind.to_dict(record)
                )
            except RemoteStoreError as e:
                self._warn(f"{self._kind.name} {record_id} saved locally only: {e}")
        return record

    def delete(self, record_id: str) -> None:
        """
        レコードを削除。

        Raises:
            RecordNotFoundError: id が存在しない場合
        """
        with self._lock:
            records = self._loaded()
            remaining = [r for r in records if self._kind.get_id(r) != record_id]
            if len(remaining) == len(records):
                raise RecordNotFoundError(f"{self._kind.name} not found: {record_id}")
            self._records = remaining
            self._write_cache(remaining)

        if self._remote is not None:
            try:
                self._remote.delete(self._kind.collection, record_id)
            except RemoteStoreError as e:
                self._warn(f"{self._kind.name} {record_id} deleted locally only: {e}")

    def drain_warnings(self) -> list[str]:
        """溜まったリモート同期の警告を取り出してクリア"""
        warnings, self._warnings = self._warnings, []
        return warnings

    # ── 内部ヘルパー ─────────────────────────────────────────────────────────

    def _loaded(self) -> list[T]:
        if self._records is None:
            self.fetch_all()
        return list(self._records or [])

    def _sorted(self, records: list[T]) -> list[T]:
        if not self._kind.sort_field:
            return records
        return sorted(records, key=self._kind.sort_key, reverse=self._kind.descending)

    def _warn(self, message: str) -> None:
        logger.warning("Remote sync failed: %s", message)
        self._warnings.append(message)

    def _decode_remote(self, rows: list[dict]) -> list[T]:
        records: list[T] = []
        for row in rows:
            try:
                records.append(self._kind.from_dict(row))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(
                    "Skipping malformed remote record: kind=%s, id=%s, error=%s",
                    self._kind.name,
                    row.get("id"),
                    e,
                )
        return records

    def _read_cache(self) -> list[T] | None:
        """キャッシュを読む。未保存・破損の場合は None（破損エントリは削除）"""
        raw = self._cache.get(self._kind.cache_key)
        if raw is None:
            return None
        try:
            rows = json.loads(raw)
            if not isinstance(rows, list):
                raise ValueError(f"expected list, got {type(rows).__name__}")
            return [self._kind.from_dict(row) for row in rows]
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.warning(
                "Discarding corrupt cache entry: key=%s, error=%s",
                self._kind.cache_key,
                e,
            )
            try:
                self._cache.remove(self._kind.cache_key)
            except OSError:
                logger.warning("Failed to remove cache entry: %s", self._kind.cache_key)
            return None

    def _write_cache(self, records: list[T]) -> None:
        payload = json.dumps(
            [self._kind.to_dict(r) for r in records], ensure_ascii=False
        )
        try:
            self._cache.set(self._kind.cache_key, payload)
        except OSError as e:
            logger.warning(
                "Failed to write cache: key=%s, error=%s", self._kind.cache_key, e
            )
