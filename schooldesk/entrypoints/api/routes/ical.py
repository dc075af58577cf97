"""iCal フィード API ルート

GET /api/ical/public.ics  → text/calendar（認証不要、公開日程のみ）

スマートフォンのカレンダーアプリや Google Calendar からこの URL を登録すると
学校日程を自動同期できる。
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from schooldesk.domain.models import ViewMode
from schooldesk.entrypoints.api.deps import get_portal
from schooldesk.entrypoints.factory import Portal

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/ical", tags=["ical"])


@router.get("/public.ics", response_class=PlainTextResponse)
async def get_public_feed(portal: Portal = Depends(get_portal)) -> PlainTextResponse:
    """共有フィード（非公開の日程は含めない）"""
    schedules = portal.schedules.list_visible(None, ViewMode.ALL)
    ical_content = portal.feed_renderer.render(schedules)
    logger.info("iCal feed rendered: events=%d", len(schedules))

    return PlainTextResponse(
        content=ical_content,
        media_type="text/calendar; charset=utf-8",
        headers={"Content-Disposition": 'attachment; filename="schooldesk.ics"'},
    )
