"""学校日程 API ルート

GET    /api/schedules?view=all|mine&from_date=&to_date=  → 200 [Schedule...]
GET    /api/schedules/day?date=&view=                    → 200 [Schedule...]（時刻順）
POST   /api/schedules                                    → 201 { schedule, warnings }
PUT    /api/schedules/{id}                               → 200 { schedule, warnings }
DELETE /api/schedules/{id}?confirm=true                  → 200 { warnings }
"""

from __future__ import annotations

import logging
from datetime import date

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel

from schooldesk.domain.models import Schedule, ScheduleCategory, SessionContext, ViewMode
from schooldesk.entrypoints.api.deps import (
    get_optional_session,
    get_portal,
    get_session,
)
from schooldesk.entrypoints.factory import Portal
from schooldesk.services.schedule_service import ScheduleInput

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/schedules", tags=["schedules"])


class ScheduleRequest(BaseModel):
    title: str
    date: str
    category: ScheduleCategory = ScheduleCategory.OTHER
    time_range: str | None = None
    location: str | None = None
    target: str | None = None
    description: str | None = None
    is_private: bool = False

    def to_input(self) -> ScheduleInput:
        return ScheduleInput(**self.model_dump())


class ScheduleResponse(BaseModel):
    id: str
    title: str
    date: str
    category: str
    time_range: str | None = None
    location: str | None = None
    target: str | None = None
    description: str | None = None
    author_email: str | None = None
    is_private: bool = False

    @classmethod
    def of(cls, s: Schedule) -> "ScheduleResponse":
        return cls(
            id=s.id,
            title=s.title,
            date=s.date,
            category=s.category.value,
            time_range=s.time_range,
            location=s.location,
            target=s.target,
            description=s.description,
            author_email=s.author_email,
            is_private=s.is_private,
        )


class ScheduleMutationResponse(BaseModel):
    schedule: ScheduleResponse
    warnings: list[str] = []


class DeleteResponse(BaseModel):
    warnings: list[str] = []


@router.get("", response_model=list[ScheduleResponse])
async def list_schedules(
    view: ViewMode = ViewMode.ALL,
    from_date: date | None = None,
    to_date: date | None = None,
    session: SessionContext | None = Depends(get_optional_session),
    portal: Portal = Depends(get_portal),
) -> list[ScheduleResponse]:
    """閲覧モードで見える日程を日付順で返す"""
    schedules = portal.schedules.list_visible(session, view, from_date, to_date)
    return [ScheduleResponse.of(s) for s in schedules]


@router.get("/day", response_model=list[ScheduleResponse])
async def day_schedules(
    day: date = Query(alias="date"),
    view: ViewMode = ViewMode.ALL,
    session: SessionContext | None = Depends(get_optional_session),
    portal: Portal = Depends(get_portal),
) -> list[ScheduleResponse]:
    """1日分の日程（時刻順）"""
    return [
        ScheduleResponse.of(s)
        for s in portal.schedules.day_schedules(session, day, view)
    ]


@router.post(
    "", status_code=status.HTTP_201_CREATED, response_model=ScheduleMutationResponse
)
async def create_schedule(
    body: ScheduleRequest,
    session: SessionContext = Depends(get_session),
    portal: Portal = Depends(get_portal),
) -> ScheduleMutationResponse:
    """日程を登録する（作成者 = ログインユーザー）"""
    schedule = portal.schedules.create(session, body.to_input())
    return ScheduleMutationResponse(
        schedule=ScheduleResponse.of(schedule),
        warnings=portal.schedules.drain_warnings(),
    )


@router.put("/{schedule_id}", response_model=ScheduleMutationResponse)
async def update_schedule(
    schedule_id: str,
    body: ScheduleRequest,
    session: SessionContext = Depends(get_session),
    portal: Portal = Depends(get_portal),
) -> ScheduleMutationResponse:
    """日程を置き換える（作成者本人または管理者）"""
    schedule = portal.schedules.update(session, schedule_id, body.to_input())
    return ScheduleMutationResponse(
        schedule=ScheduleResponse.of(schedule),
        warnings=portal.schedules.drain_warnings(),
    )


@router.delete("/{schedule_id}", response_model=DeleteResponse)
async def delete_schedule(
    schedule_id: str,
    confirm: bool = False,
    session: SessionContext = Depends(get_session),
    portal: Portal = Depends(get_portal),
) -> DeleteResponse:
    """日程を削除する（confirm=true 必須）"""
    portal.schedules.delete(session, schedule_id, confirm=confirm)
    return DeleteResponse(warnings=portal.schedules.drain_warnings())
