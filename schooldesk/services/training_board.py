"""研修・お知らせ掲示板

掲示物に非公開フラグはなく、全件が一覧に出る。
未ログインの閲覧者にはタイトル・要約のみを返し、資料URLは渡さない。
"""

from __future__ import annotations

import dataclasses
import logging
import uuid
from dataclasses import dataclass

from schooldesk.domain.errors import (
    ConfirmationRequiredError,
    PermissionDeniedError,
    RecordNotFoundError,
    ValidationError,
)
from schooldesk.domain.models import SessionContext, TrainingPost
from schooldesk.services.record_store import RecordStore
from schooldesk.services.schedule_service import parse_iso_date
from schooldesk.services.visibility import ensure_can_modify

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TrainingInput:
    """資料アップロードフォームの入力値"""

    title: str
    author: str  # 部署名
    date: str
    summary: str = ""
    pdf_url: str | None = None
    file_type: str | None = None


class TrainingBoardService:
    """掲示物の一覧・登録・編集・削除"""

    def __init__(self, posts: RecordStore[TrainingPost]) -> None:
        self._posts = posts

    def list_posts(self, session: SessionContext | None) -> list[TrainingPost]:
        """新しい順の一覧（未ログインでは資料URLを伏せる）"""
        posts = self._posts.fetch_all()
        if session is None:
            return [dataclasses.replace(p, pdf_url=None) for p in posts]
        return posts

    def get_post(self, session: SessionContext | None, post_id: str) -> TrainingPost:
        """
        資料を開く（ログイン必須）。

        Raises:
            PermissionDeniedError: 未ログインの場合
            RecordNotFoundError: id が存在しない場合
        """
        if session is None:
            raise PermissionDeniedError("로그인 후에만 상세 자료를 열람할 수 있습니다.")
        return self._require(post_id)

    def create(self, session: SessionContext | None, data: TrainingInput) -> TrainingPost:
        if session is None:
            raise PermissionDeniedError("로그인 후 자료를 업로드할 수 있습니다.")
        post = self._build(str(uuid.uuid4()), data, author_email=session.email)
        self._posts.upsert(post)
        logger.info("Training post created: id=%s, by=%s", post.id, session.email)
        return post

    def update(
        self, session: SessionContext | None, post_id: str, data: TrainingInput
    ) -> TrainingPost:
        current = self._require(post_id)
        ensure_can_modify(current, session)
        post = self._build(post_id, data, author_email=current.author_email)
        self._posts.upsert(post)
        logger.info("Training post updated: id=%s, by=%s", post_id, session.email)
        return post

    def delete(
        self, session: SessionContext | None, post_id: str, confirm: bool = False
    ) -> None:
        current = self._require(post_id)
        ensure_can_modify(current, session)
        if not confirm:
            raise ConfirmationRequiredError("자료 삭제를 확인해주세요.")
        self._posts.delete(post_id)
        logger.info("Training post deleted: id=%s, by=%s", post_id, session.email)

    def drain_warnings(self) -> list[str]:
        return self._posts.drain_warnings()

    def _require(self, post_id: str) -> TrainingPost:
        post = self._posts.get(post_id)
        if post is None:
            raise RecordNotFoundError(f"training post not found: {post_id}")
        return post

    @staticmethod
    def _build(post_id: str, data: TrainingInput, author_email: str | None) -> TrainingPost:
        title = (data.title or "").strip()
        author = (data.author or "").strip()
        if not title:
            raise ValidationError("자료 제목을 입력해주세요.")
        if not author:
            raise ValidationError("부서명을 입력해주세요.")
        return TrainingPost(
            id=post_id,
            title=title,
            author=author,
            date=parse_iso_date(data.date).isoformat(),
            summary=(data.summary or "").strip(),
            author_email=author_email,
            pdf_url=(data.pdf_url or "").strip() or None,
            file_type=(data.file_type or "").strip() or None,
        )
