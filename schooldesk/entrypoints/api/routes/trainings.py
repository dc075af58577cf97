"""研修・お知らせ掲示板 API ルート

GET    /api/trainings                    → 200 [TrainingPost...]（未ログインは pdf_url なし）
GET    /api/trainings/{id}               → 200 TrainingPost（ログイン必須）
POST   /api/trainings                    → 201 { post, warnings }
PUT    /api/trainings/{id}               → 200 { post, warnings }
DELETE /api/trainings/{id}?confirm=true  → 200 { warnings }
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from schooldesk.domain.models import SessionContext, TrainingPost
from schooldesk.entrypoints.api.deps import (
    get_optional_session,
    get_portal,
    get_session,
)
from schooldesk.entrypoints.api.routes.schedules import DeleteResponse
from schooldesk.entrypoints.factory import Portal
from schooldesk.services.training_board import TrainingInput

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/trainings", tags=["trainings"])


class TrainingRequest(BaseModel):
    title: str
    author: str
    date: str
    summary: str = ""
    pdf_url: str | None = None
    file_type: str | None = None


class TrainingResponse(BaseModel):
    id: str
    title: str
    author: str
    date: str
    summary: str
    author_email: str | None = None
    pdf_url: str | None = None
    file_type: str | None = None

    @classmethod
    def of(cls, p: TrainingPost) -> "TrainingResponse":
        return cls(**vars(p))


class TrainingMutationResponse(BaseModel):
    post: TrainingResponse
    warnings: list[str] = []


@router.get("", response_model=list[TrainingResponse])
async def list_trainings(
    session: SessionContext | None = Depends(get_optional_session),
    portal: Portal = Depends(get_portal),
) -> list[TrainingResponse]:
    """新しい順の一覧"""
    return [TrainingResponse.of(p) for p in portal.trainings.list_posts(session)]


@router.get("/{post_id}", response_model=TrainingResponse)
async def get_training(
    post_id: str,
    session: SessionContext = Depends(get_session),
    portal: Portal = Depends(get_portal),
) -> TrainingResponse:
    return TrainingResponse.of(portal.trainings.get_post(session, post_id))


@router.post(
    "", status_code=status.HTTP_201_CREATED, response_model=TrainingMutationResponse
)
async def create_training(
    body: TrainingRequest,
    session: SessionContext = Depends(get_session),
    portal: Portal = Depends(get_portal),
) -> TrainingMutationResponse:
    post = portal.trainings.create(session, TrainingInput(**body.model_dump()))
    return TrainingMutationResponse(
        post=TrainingResponse.of(post), warnings=portal.trainings.drain_warnings()
    )


@router.put("/{post_id}", response_model=TrainingMutationResponse)
async def update_training(
    post_id: str,
    body: TrainingRequest,
    session: SessionContext = Depends(get_session),
    portal: Portal = Depends(get_portal),
) -> TrainingMutationResponse:
    post = portal.trainings.update(session, post_id, TrainingInput(**body.model_dump()))
    return TrainingMutationResponse(
        post=TrainingResponse.of(post), warnings=portal.trainings.drain_warnings()
    )


@router.delete("/{post_id}", response_model=DeleteResponse)
async def delete_training(
    post_id: str,
    confirm: bool = False,
    session: SessionContext = Depends(get_session),
    portal: Portal = Depends(get_portal),
) -> DeleteResponse:
    portal.trainings.delete(session, post_id, confirm=confirm)
    return DeleteResponse(warnings=portal.trainings.drain_warnings())
