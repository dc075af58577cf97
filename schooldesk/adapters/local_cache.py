"""Local Cache Adapters

LocalCache ABC の実装。

- FileLocalCache: {cache_dir}/{key}.json に文字列をそのまま保存する
- InMemoryLocalCache: プロセス内 dict（LOCAL_MODE・テスト用）

値の中身（JSON かどうか）は関知しない。壊れた値の扱いは RecordStore の責務。
"""

from __future__ import annotations

import logging
import os
import re

from schooldesk.domain.ports import LocalCache

logger = logging.getLogger(__name__)

_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


class FileLocalCache(LocalCache):
    """ディレクトリ配下のファイルをキー・バリューストアとして使う実装"""

    def __init__(self, cache_dir: str) -> None:
        """
        Args:
            cache_dir: キャッシュファイルを置くディレクトリ（なければ作成）
        """
        if not cache_dir:
            raise ValueError("cache_dir is required")
        self._dir = cache_dir
        os.makedirs(self._dir, exist_ok=True)

    def _path(self, key: str) -> str:
        safe = _UNSAFE_KEY_CHARS.sub("_", key)
        return os.path.join(self._dir, f"{safe}.json")

    def get(self, key: str) -> str | None:
        path = self._path(key)
        if not os.path.exists(path):
            return None
        try:
            with open(path, encoding="utf-8") as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Failed to read cache entry %s: %s", key, e)
            return None

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        tmp_path = f"{path}.tmp"
        # 書き込み途中のファイルを読ませないよう rename で差し替える
        with open(tmp_path, "w", encoding="utf-8") as f:
            f.write(value)
        os.replace(tmp_path, path)
        logger.debug("Cache entry written: key=%s, bytes=%d", key, len(value))

    def remove(self, key: str) -> None:
        try:
            os.remove(self._path(key))
        except FileNotFoundError:
            pass


class InMemoryLocalCache(LocalCache):
    """プロセス内 dict を使う実装（再起動で消える）"""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)
