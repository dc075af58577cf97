"""ショートカット API ルート

GET    /api/shortcuts        → 200 [Shortcut...]
POST   /api/shortcuts        → 201 { shortcut, warnings }（管理者のみ）
DELETE /api/shortcuts/{id}   → 200 { warnings }（管理者のみ）
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from schooldesk.domain.models import SessionContext
from schooldesk.entrypoints.api.deps import get_portal, require_admin
from schooldesk.entrypoints.api.routes.schedules import DeleteResponse
from schooldesk.entrypoints.factory import Portal

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/shortcuts", tags=["shortcuts"])


class ShortcutRequest(BaseModel):
    label: str
    url: str


class ShortcutResponse(BaseModel):
    id: str
    label: str
    url: str


class ShortcutMutationResponse(BaseModel):
    shortcut: ShortcutResponse
    warnings: list[str] = []


@router.get("", response_model=list[ShortcutResponse])
async def list_shortcuts(portal: Portal = Depends(get_portal)) -> list[ShortcutResponse]:
    return [ShortcutResponse(**vars(s)) for s in portal.shortcuts.list_shortcuts()]


@router.post(
    "", status_code=status.HTTP_201_CREATED, response_model=ShortcutMutationResponse
)
async def add_shortcut(
    body: ShortcutRequest,
    session: SessionContext = Depends(require_admin),
    portal: Portal = Depends(get_portal),
) -> ShortcutMutationResponse:
    """スキームのない URL には https:// を付けて登録する"""
    shortcut = portal.shortcuts.add(session, body.label, body.url)
    return ShortcutMutationResponse(
        shortcut=ShortcutResponse(**vars(shortcut)),
        warnings=portal.shortcuts.drain_warnings(),
    )


@router.delete("/{shortcut_id}", response_model=DeleteResponse)
async def remove_shortcut(
    shortcut_id: str,
    session: SessionContext = Depends(require_admin),
    portal: Portal = Depends(get_portal),
) -> DeleteResponse:
    portal.shortcuts.remove(session, shortcut_id)
    return DeleteResponse(warnings=portal.shortcuts.drain_warnings())
