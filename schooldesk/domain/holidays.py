"""祝日テーブル（読み取り専用の静的データ）"""

from __future__ import annotations

from datetime import date

from schooldesk.domain.models import Holiday

HOLIDAYS_2026: tuple[Holiday, ...] = (
    Holiday("2026-01-01", "신정", True),
    Holiday("2026-02-16", "설날 연휴", True),
    Holiday("2026-02-17", "설날", True),
    Holiday("2026-02-18", "설날 연휴", True),
    Holiday("2026-03-01", "삼일절", True),
    Holiday("2026-03-02", "삼일절 대체공휴일", True),
    Holiday("2026-05-05", "어린이날", True),
    Holiday("2026-05-24", "부처님 오신 날", True),
    Holiday("2026-05-25", "부처님 오신 날 대체공휴일", True),
    Holiday("2026-06-06", "현충일", True),
    Holiday("2026-07-17", "제헌절", True),
    Holiday("2026-08-15", "광복절", True),
    Holiday("2026-08-17", "광복절 대체공휴일", True),
    Holiday("2026-09-24", "추석 연휴", True),
    Holiday("2026-09-25", "추석", True),
    Holiday("2026-09-26", "추석 연휴", True),
    Holiday("2026-10-03", "개천절", True),
    Holiday("2026-10-05", "개천절 대체공휴일", True),
    Holiday("2026-10-09", "한글날", True),
    Holiday("2026-12-25", "크리스마스", True),
    # 記念日（休日ではない）
    Holiday("2026-02-14", "발렌타인데이", False),
    Holiday("2026-03-20", "춘분", False),
    Holiday("2026-04-05", "식목일", False),
    Holiday("2026-05-01", "근로자의 날", False),
    Holiday("2026-05-08", "어버이날", False),
    Holiday("2026-05-15", "스승의 날", False),
    Holiday("2026-06-21", "하지", False),
    Holiday("2026-09-23", "추분", False),
    Holiday("2026-10-01", "국군의 날", False),
    Holiday("2026-12-22", "동지", False),
)

_BY_DATE: dict[str, Holiday] = {h.date: h for h in HOLIDAYS_2026}


def find_holiday(day: date | str) -> Holiday | None:
    """日付に該当する祝日・記念日を返す。該当なしは None"""
    key = day if isinstance(day, str) else day.isoformat()
    return _BY_DATE.get(key)


def is_public_holiday(day: date | str) -> bool:
    """法定休日かどうか（記念日は False）"""
    holiday = find_holiday(day)
    return holiday is not None and holiday.is_public
