"""エクスポート API ルート（公開日程のみ）

GET /api/exports/weekly?date=YYYY-MM-DD          → 200 { title, rows }
GET /api/exports/weekly.xlsx?date=YYYY-MM-DD     → xlsx
GET /api/exports/monthly?year=&month=            → 200 { title, rows }
GET /api/exports/monthly.xlsx?year=&month=       → xlsx
"""

from __future__ import annotations

import logging
from datetime import date
from urllib.parse import quote

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from pydantic import BaseModel

from schooldesk.entrypoints.api.deps import get_portal, get_session
from schooldesk.entrypoints.factory import Portal
from schooldesk.services.export_projector import monthly_title, weekly_title

logger = logging.getLogger(__name__)
router = APIRouter(
    prefix="/exports", tags=["exports"], dependencies=[Depends(get_session)]
)

_XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


class WeeklyRowResponse(BaseModel):
    date: date
    label: str
    observance: str
    others: str
    authors: str
    is_public_holiday: bool


class MonthlyRowResponse(BaseModel):
    date: date
    day: int
    weekday: str
    observance: str
    others: str
    authors: str
    is_public_holiday: bool


class WeeklyExportResponse(BaseModel):
    title: str
    rows: list[WeeklyRowResponse]


class MonthlyExportResponse(BaseModel):
    title: str
    rows: list[MonthlyRowResponse]


def _xlsx_response(content: bytes, filename: str) -> Response:
    # 日本語・韓国語のファイル名は RFC 5987 形式で渡す
    return Response(
        content=content,
        media_type=_XLSX_MEDIA_TYPE,
        headers={
            "Content-Disposition": f"attachment; filename*=UTF-8''{quote(filename)}"
        },
    )


@router.get("/weekly", response_model=WeeklyExportResponse)
async def weekly_export(
    reference: date | None = Query(default=None, alias="date"),
    portal: Portal = Depends(get_portal),
) -> WeeklyExportResponse:
    """reference を含む週（月〜日）の7行"""
    reference = reference or portal.today()
    rows = portal.schedules.weekly_export(reference)
    return WeeklyExportResponse(
        title=weekly_title(reference),
        rows=[WeeklyRowResponse(**vars(r)) for r in rows],
    )


@router.get("/weekly.xlsx")
async def weekly_export_xlsx(
    reference: date | None = Query(default=None, alias="date"),
    portal: Portal = Depends(get_portal),
) -> Response:
    reference = reference or portal.today()
    title = weekly_title(reference)
    content = portal.export_renderer.render_weekly(
        title, portal.schedules.weekly_export(reference)
    )
    logger.info("Weekly export rendered: reference=%s, bytes=%d", reference, len(content))
    return _xlsx_response(content, f"{title}.xlsx")


@router.get("/monthly", response_model=MonthlyExportResponse)
async def monthly_export(
    year: int = Query(ge=1900, le=9999),
    month: int = Query(ge=1, le=12),
    portal: Portal = Depends(get_portal),
) -> MonthlyExportResponse:
    """指定月の日数分の行（祝日付き）"""
    rows = portal.schedules.monthly_export(year, month)
    return MonthlyExportResponse(
        title=monthly_title(year, month),
        rows=[MonthlyRowResponse(**vars(r)) for r in rows],
    )


@router.get("/monthly.xlsx")
async def monthly_export_xlsx(
    year: int = Query(ge=1900, le=9999),
    month: int = Query(ge=1, le=12),
    portal: Portal = Depends(get_portal),
) -> Response:
    title = monthly_title(year, month)
    content = portal.export_renderer.render_monthly(
        title, portal.schedules.monthly_export(year, month)
    )
    logger.info("Monthly export rendered: %04d-%02d, bytes=%d", year, month, len(content))
    return _xlsx_response(content, f"{title}.xlsx")
