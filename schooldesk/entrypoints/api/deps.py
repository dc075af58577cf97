"""FastAPI 依存性注入

Portal（サービス一式）の初期化と、Bearer トークンから SessionContext への解決を担当する。
各ルートは Depends() でこのモジュールの関数を呼び出してセッションとサービスを受け取る。
"""

from __future__ import annotations

import logging

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from schooldesk.domain.models import SessionContext
from schooldesk.entrypoints.factory import Portal, create_portal

logger = logging.getLogger(__name__)

# ── Portal（シングルトン） ──────────────────────────────────────────────────────

_portal: Portal | None = None


def get_portal() -> Portal:
    """Portal を返す依存関数（初回呼び出し時に組み立てる）"""
    global _portal
    if _portal is None:
        _portal = create_portal()
    return _portal


# ── 認証 ────────────────────────────────────────────────────────────────────────

# 未ログインでも閲覧できるルートがあるため auto_error=False
_bearer = HTTPBearer(auto_error=False)


async def get_token(
    creds: HTTPAuthorizationCredentials | None = Depends(_bearer),
) -> str | None:
    return creds.credentials if creds else None


async def get_optional_session(
    token: str | None = Depends(get_token),
    portal: Portal = Depends(get_portal),
) -> SessionContext | None:
    """
    Authorization: Bearer <token> からセッションを解決する。

    ヘッダーなしは未ログイン（None）。

    Raises:
        HTTPException(401): トークンが無効・期限切れの場合
    """
    if token is None:
        return None
    session = portal.sessions.resolve(token)
    if session is None:
        logger.warning("Unknown session token")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired session token",
        )
    return session


async def get_session(
    session: SessionContext | None = Depends(get_optional_session),
) -> SessionContext:
    """
    ログイン必須のルート用。

    Raises:
        HTTPException(401): 未ログインの場合
    """
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="로그인이 필요합니다.",
        )
    return session


async def require_admin(
    session: SessionContext = Depends(get_session),
) -> SessionContext:
    """
    管理者権限を要求する依存関数。

    Raises:
        HTTPException(403): 管理者でない場合
    """
    if not session.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="관리자 권한이 필요합니다.",
        )
    return session
