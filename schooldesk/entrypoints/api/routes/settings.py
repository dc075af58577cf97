"""ユーザー設定 API ルート

POST /api/settings/password  → 200 { warnings }
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from schooldesk.domain.models import SessionContext
from schooldesk.entrypoints.api.deps import get_portal, get_session
from schooldesk.entrypoints.factory import Portal

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/settings", tags=["settings"])


class PasswordChangeRequest(BaseModel):
    current_password: str
    new_password: str
    confirm_password: str


class PasswordChangeResponse(BaseModel):
    warnings: list[str] = []


@router.post("/password", response_model=PasswordChangeResponse)
def change_password(
    body: PasswordChangeRequest,
    session: SessionContext = Depends(get_session),
    portal: Portal = Depends(get_portal),
) -> PasswordChangeResponse:
    """パスワードを変更する（現在のパスワードの照合・確認入力の一致・4文字以上）"""
    portal.auth.change_password(
        session,
        body.current_password,
        body.new_password,
        body.confirm_password,
    )
    return PasswordChangeResponse(warnings=portal.users.drain_warnings())
