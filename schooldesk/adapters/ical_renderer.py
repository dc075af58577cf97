"""iCal Feed Renderer Adapter

CalendarFeedRenderer ABC の icalendar ライブラリを使った実装。
公開日程を終日イベントとして RFC 5545 準拠の iCal 形式文字列に変換する。

出力例:
  BEGIN:VCALENDAR
  VERSION:2.0
  PRODID:-//SchoolDesk//SchoolDesk//KO
  ...
  BEGIN:VEVENT
  ...
  END:VEVENT
  END:VCALENDAR
"""

from __future__ import annotations

import logging
from datetime import timedelta

from icalendar import Calendar, Event, vText

from schooldesk.domain.models import Schedule
from schooldesk.domain.ports import CalendarFeedRenderer

logger = logging.getLogger(__name__)

_PRODID = "-//SchoolDesk//SchoolDesk//KO"
_UID_DOMAIN = "schooldesk"


class ICalRenderer(CalendarFeedRenderer):
    """
    icalendar ライブラリを使った iCal フィード生成実装。

    time_range は自由記述（"15:00~16:30" など）のため DATETIME には変換せず、
    全て終日イベント（DATE 型）として出力し、時刻は説明文に含める。
    """

    def __init__(self, calendar_name: str = "SchoolDesk") -> None:
        self._calendar_name = calendar_name

    def render(self, schedules: list[Schedule]) -> str:
        """
        Schedule リストから iCal 形式の文字列を生成。

        Args:
            schedules: 出力する日程（可視性フィルター適用済み）

        Returns:
            RFC 5545 準拠の iCal 文字列（Content-Type: text/calendar）
        """
        cal = Calendar()
        cal.add("prodid", _PRODID)
        cal.add("version", "2.0")
        cal.add("calscale", "GREGORIAN")
        cal.add("method", "PUBLISH")
        cal.add("x-wr-calname", vText(self._calendar_name))
        cal.add("x-wr-timezone", vText("Asia/Seoul"))

        for schedule in schedules:
            cal.add_component(self._build_vevent(schedule))

        result = cal.to_ical().decode("utf-8")
        logger.info("Rendered iCal: events=%d, bytes=%d", len(schedules), len(result))
        return result

    @staticmethod
    def _build_vevent(schedule: Schedule) -> Event:
        """Schedule から VEVENT コンポーネントを構築"""
        vevent = Event()
        vevent.add("uid", f"{schedule.id}@{_UID_DOMAIN}")
        vevent.add("summary", f"[{schedule.category.value}] {schedule.title}")
        vevent.add("dtstart", schedule.day)
        vevent.add("dtend", schedule.day + timedelta(days=1))

        if schedule.location:
            vevent.add("location", schedule.location)

        lines = [
            part
            for part in (schedule.time_range, schedule.target, schedule.description)
            if part
        ]
        if lines:
            vevent.add("description", "\n".join(lines))

        return vevent
