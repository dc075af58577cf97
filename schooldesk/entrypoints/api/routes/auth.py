"""認証 API ルート

POST /api/auth/login   → 200 { token, email, name, role }
POST /api/auth/logout  → 204
GET  /api/auth/me      → 200 { email, name, role }
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from schooldesk.domain.models import SessionContext
from schooldesk.entrypoints.api.deps import get_portal, get_session, get_token
from schooldesk.entrypoints.factory import Portal

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/auth", tags=["auth"])


class LoginRequest(BaseModel):
    email: str
    password: str


class SessionResponse(BaseModel):
    email: str
    name: str
    role: str
    is_admin: bool

    @classmethod
    def of(cls, session: SessionContext) -> "SessionResponse":
        return cls(
            email=session.email,
            name=session.name,
            role=session.role.value,
            is_admin=session.is_admin,
        )


class LoginResponse(SessionResponse):
    token: str


@router.post("/login", response_model=LoginResponse)
def login(
    body: LoginRequest,
    portal: Portal = Depends(get_portal),
) -> LoginResponse:
    """メール・パスワードで照合し、セッショントークンを発行する"""
    session = portal.auth.login(body.email, body.password)
    token = portal.sessions.open(session)
    return LoginResponse(token=token, **SessionResponse.of(session).model_dump())


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    token: str | None = Depends(get_token),
    portal: Portal = Depends(get_portal),
) -> None:
    """セッションを破棄する（未ログインでも 204）"""
    if token:
        portal.sessions.close(token)


@router.get("/me", response_model=SessionResponse)
async def me(session: SessionContext = Depends(get_session)) -> SessionResponse:
    """ログイン中のユーザー"""
    return SessionResponse.of(session)
