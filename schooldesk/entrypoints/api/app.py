"""FastAPI アプリケーション

SchoolDesk（教務室ポータル）バックエンド API。
Cloud Run Service として動作し（`schooldesk serve` で uvicorn を起動）、ログインで発行したセッショントークンで認証する。

エンドポイント一覧:
  POST   /api/auth/login
  POST   /api/auth/logout
  GET    /api/auth/me
  GET    /api/dashboard
  GET    /api/schedules
  GET    /api/schedules/day
  POST   /api/schedules
  PUT    /api/schedules/{id}
  DELETE /api/schedules/{id}?confirm=true
  GET    /api/calendar
  GET    /api/exports/weekly[.xlsx]
  GET    /api/exports/monthly[.xlsx]
  GET    /api/trainings
  GET    /api/trainings/{id}
  POST   /api/trainings
  PUT    /api/trainings/{id}
  DELETE /api/trainings/{id}?confirm=true
  GET    /api/shortcuts
  POST   /api/shortcuts             ← 管理者のみ
  DELETE /api/shortcuts/{id}        ← 管理者のみ
  GET    /api/users                 ← 管理者のみ
  POST   /api/users/import          ← 管理者のみ
  GET    /api/users/template.csv    ← 管理者のみ
  DELETE /api/users/{id}?confirm=true ← 管理者のみ
  POST   /api/settings/password
  GET    /api/ical/public.ics       ← 認証不要
  GET    /api/weather
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.responses import Response

from schooldesk.domain.errors import (
    AuthenticationError,
    ConfirmationRequiredError,
    PermissionDeniedError,
    RecordNotFoundError,
    RemoteStoreError,
    SchoolDeskError,
    ValidationError,
    WeatherUnavailableError,
)
from schooldesk.entrypoints.api.routes import (
    auth,
    calendar,
    dashboard,
    exports,
    ical,
    schedules,
    settings,
    shortcuts,
    trainings,
    users,
    weather,
)
from schooldesk.logging_config import setup_logging

# ── ロギング初期化 ───────────────────────────────────────────────────────────
setup_logging()
logger = logging.getLogger(__name__)

# ── FastAPI アプリ ───────────────────────────────────────────────────────────
app = FastAPI(
    title="SchoolDesk API",
    description="교무실 업무 포털 SchoolDesk のバックエンド API",
    version="1.0.0",
)

# ── ドメイン例外 → HTTP ステータス ──────────────────────────────────────────────
# 上から順に判定する（ConfirmationRequiredError は ValidationError より先）
_STATUS_BY_ERROR: list[tuple[type[SchoolDeskError], int]] = [
    (ConfirmationRequiredError, status.HTTP_409_CONFLICT),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (AuthenticationError, status.HTTP_401_UNAUTHORIZED),
    (PermissionDeniedError, status.HTTP_403_FORBIDDEN),
    (RecordNotFoundError, status.HTTP_404_NOT_FOUND),
    (WeatherUnavailableError, status.HTTP_503_SERVICE_UNAVAILABLE),
    (RemoteStoreError, status.HTTP_503_SERVICE_UNAVAILABLE),
]


def status_for(exc: SchoolDeskError) -> int:
    for error_type, code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


@app.exception_handler(SchoolDeskError)
async def _handle_domain_error(request: Request, exc: SchoolDeskError) -> JSONResponse:
    code = status_for(exc)
    logger.info(
        "Domain error: %s %s -> %d %s: %s",
        request.method,
        request.url.path,
        code,
        type(exc).__name__,
        exc,
    )
    return JSONResponse(
        status_code=code,
        content={"detail": str(exc), "error": type(exc).__name__},
    )


# ── グローバル例外ミドルウェア ──────────────────────────────────────────────────
# 【登録順の注意】
#   add_middleware は後から登録したものが外側になる。
#   このミドルウェアを CORSMiddleware より先に登録して内側に置き、
#   500 レスポンスにも CORS ヘッダーが付くようにする。
#
# スタック: ServerErrorMiddleware → CORSMiddleware → このMW → ExceptionMiddleware → Routes


@app.middleware("http")
async def _catch_unhandled_exceptions(
    request: Request, call_next: Callable[[Request], Response]
) -> Response:
    try:
        return await call_next(request)
    except Exception as exc:
        logger.error(
            "Unhandled exception: %s %s - %s",
            request.method,
            request.url.path,
            exc,
            exc_info=True,
        )
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )


# ── CORS（SPA フロントエンドからのリクエストを許可） ─────────────────────────
# CORS_ORIGINS 環境変数でカンマ区切りのオリジンを指定可能
_extra_origins = [
    o.strip() for o in os.environ.get("CORS_ORIGINS", "").split(",") if o.strip()
]
app.add_middleware(
    CORSMiddleware,
    allow_origins=_extra_origins if _extra_origins else ["http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type"],
    expose_headers=["Content-Disposition"],
)

# ── ルーター登録 ─────────────────────────────────────────────────────────────
_PREFIX = "/api"

app.include_router(auth.router, prefix=_PREFIX)
app.include_router(dashboard.router, prefix=_PREFIX)
app.include_router(schedules.router, prefix=_PREFIX)
app.include_router(calendar.router, prefix=_PREFIX)
app.include_router(exports.router, prefix=_PREFIX)
app.include_router(trainings.router, prefix=_PREFIX)
app.include_router(shortcuts.router, prefix=_PREFIX)
app.include_router(users.router, prefix=_PREFIX)
app.include_router(settings.router, prefix=_PREFIX)
app.include_router(ical.router, prefix=_PREFIX)
app.include_router(weather.router, prefix=_PREFIX)


@app.get("/health")
async def health() -> dict:
    """ヘルスチェックエンドポイント（Cloud Run の起動確認用）"""
    return {"status": "ok"}


logger.info("SchoolDesk API started")
