"""ショートカットバー（管理者が管理する全体共通のリンク）"""

from __future__ import annotations

import logging
import uuid

from schooldesk.domain.errors import PermissionDeniedError, ValidationError
from schooldesk.domain.models import SessionContext, Shortcut
from schooldesk.services.record_store import RecordStore

logger = logging.getLogger(__name__)


def normalize_url(url: str) -> str:
    """スキームがなければ https:// を付ける"""
    url = url.strip()
    return url if url.startswith("http") else f"https://{url}"


class ShortcutService:
    """共通ショートカットの一覧・追加・削除"""

    def __init__(self, shortcuts: RecordStore[Shortcut]) -> None:
        self._shortcuts = shortcuts

    def list_shortcuts(self) -> list[Shortcut]:
        return self._shortcuts.fetch_all()

    def add(self, session: SessionContext | None, label: str, url: str) -> Shortcut:
        """
        Raises:
            PermissionDeniedError: 管理者以外の場合
            ValidationError: 名前・URLが空の場合
        """
        self._ensure_admin(session)
        if not (label or "").strip() or not (url or "").strip():
            raise ValidationError("이름과 주소를 모두 입력해주세요.")
        shortcut = Shortcut(
            id=uuid.uuid4().hex[:9], label=label.strip(), url=normalize_url(url)
        )
        self._shortcuts.upsert(shortcut)
        logger.info("Shortcut added: id=%s, label=%s", shortcut.id, shortcut.label)
        return shortcut

    def remove(self, session: SessionContext | None, shortcut_id: str) -> None:
        self._ensure_admin(session)
        self._shortcuts.delete(shortcut_id)
        logger.info("Shortcut removed: id=%s", shortcut_id)

    def drain_warnings(self) -> list[str]:
        return self._shortcuts.drain_warnings()

    @staticmethod
    def _ensure_admin(session: SessionContext | None) -> None:
        if session is None or not session.is_admin:
            raise PermissionDeniedError("관리자만 바로가기를 편집할 수 있습니다.")
