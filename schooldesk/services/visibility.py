"""可視性フィルター

- "mine": author_email が閲覧者と一致するレコード（公開・非公開とも）
- "all": 非公開でないレコードのみ。閲覧者自身の非公開レコードも含めない
  （"all" は共有フィード、非公開の予定は "mine" でのみ表示される）

管理者でも他人の非公開予定は見えない。編集・削除権限（can_modify）は別の関心事。
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TypeVar

from schooldesk.domain.errors import PermissionDeniedError
from schooldesk.domain.models import (
    Schedule,
    SessionContext,
    TrainingPost,
    ViewContext,
    ViewMode,
)

R = TypeVar("R", Schedule, TrainingPost)


def is_visible(record: Schedule | TrainingPost, context: ViewContext) -> bool:
    """1件のレコードが閲覧コンテキストで見えるかどうか"""
    if context.view_mode is ViewMode.MINE:
        if not context.current_user_email:
            return False
        return record.author_email == context.current_user_email
    # TrainingPost には非公開フラグがない
    return not getattr(record, "is_private", False)


def filter_visible(records: Iterable[R], context: ViewContext) -> list[R]:
    """閲覧コンテキストで見えるレコードだけを元の順序で返す"""
    return [r for r in records if is_visible(r, context)]


def view_context_for(
    session: SessionContext | None, view_mode: ViewMode
) -> ViewContext:
    """
    セッションから ViewContext を作る。

    Raises:
        PermissionDeniedError: 未ログインで "mine" を要求した場合
    """
    if view_mode is ViewMode.MINE and session is None:
        raise PermissionDeniedError("로그인 후 내 일정을 볼 수 있습니다.")
    return ViewContext(
        current_user_email=session.email if session else None,
        view_mode=view_mode,
    )


def can_modify(record: Schedule | TrainingPost, session: SessionContext | None) -> bool:
    """編集・削除できるのは作成者本人または管理者"""
    if session is None:
        return False
    if session.is_admin:
        return True
    return record.author_email is not None and record.author_email == session.email


def ensure_can_modify(
    record: Schedule | TrainingPost, session: SessionContext | None
) -> None:
    """
    Raises:
        PermissionDeniedError: 作成者・管理者以外の場合
    """
    if not can_modify(record, session):
        raise PermissionDeniedError("작성자 또는 관리자만 수정/삭제할 수 있습니다.")
