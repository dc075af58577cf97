"""カレンダー API ルート

GET /api/calendar?anchor=&selected=&mode=month|week&view=all|mine
  → 200 { start, end, weeks: [[DayCell...]...] }
"""

from __future__ import annotations

import logging
from datetime import date

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from schooldesk.domain.models import CalendarMode, DayCell, SessionContext, ViewMode
from schooldesk.entrypoints.api.deps import get_optional_session, get_portal
from schooldesk.entrypoints.api.routes.schedules import ScheduleResponse
from schooldesk.entrypoints.factory import Portal
from schooldesk.services.calendar_grid import display_window

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/calendar", tags=["calendar"])


class DayCellResponse(BaseModel):
    date: date
    in_month: bool
    is_today: bool
    is_selected: bool
    entries: list[ScheduleResponse]
    total_count: int
    more_count: int

    @classmethod
    def of(cls, cell: DayCell) -> "DayCellResponse":
        return cls(
            date=cell.date,
            in_month=cell.in_month,
            is_today=cell.is_today,
            is_selected=cell.is_selected,
            entries=[ScheduleResponse.of(s) for s in cell.visible_entries],
            total_count=cell.total_count,
            more_count=cell.more_count,
        )


class CalendarResponse(BaseModel):
    start: date
    end: date
    mode: CalendarMode
    view: ViewMode
    weeks: list[list[DayCellResponse]]


@router.get("", response_model=CalendarResponse)
async def get_calendar(
    anchor: date | None = None,
    selected: date | None = None,
    mode: CalendarMode = CalendarMode.MONTH,
    view: ViewMode = ViewMode.ALL,
    session: SessionContext | None = Depends(get_optional_session),
    portal: Portal = Depends(get_portal),
) -> CalendarResponse:
    """月表示・週表示のグリッド（各セルは最大2件＋残り件数）"""
    today = portal.today()
    anchor = anchor or today
    weeks = portal.schedules.calendar(session, anchor, today, selected, mode, view)
    start, end = display_window(anchor, mode)
    return CalendarResponse(
        start=start,
        end=end,
        mode=mode,
        view=view,
        weeks=[[DayCellResponse.of(c) for c in week] for week in weeks],
    )
