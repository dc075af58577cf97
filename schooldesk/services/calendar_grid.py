"""カレンダーグリッドの生成

月表示: 1日を含む週の日曜日 〜 末日を含む週の土曜日
週表示: アンカー日を含む週を中心とした3週間

各セルには可視性フィルター適用済みの日程を時刻順に割り当てる。
"""

from __future__ import annotations

import calendar
from collections import defaultdict
from collections.abc import Iterable
from datetime import date, timedelta

from schooldesk.domain.models import CalendarMode, DayCell, Schedule

# "HH:MM" 形式のどの文字列よりも辞書順で後ろに来る値
NO_TIME_SENTINEL = "99:99"
DISPLAY_LIMIT = 2


def _sunday_on_or_before(day: date) -> date:
    # weekday(): 月=0 … 日=6
    return day - timedelta(days=(day.weekday() + 1) % 7)


def _saturday_on_or_after(day: date) -> date:
    return day + timedelta(days=(5 - day.weekday()) % 7)


def display_window(anchor: date, mode: CalendarMode = CalendarMode.MONTH) -> tuple[date, date]:
    """表示範囲（開始日, 終了日）を両端含みで返す"""
    if mode is CalendarMode.WEEK:
        start = _sunday_on_or_before(anchor) - timedelta(days=7)
        return start, start + timedelta(days=20)

    first = anchor.replace(day=1)
    last = first.replace(day=calendar.monthrange(first.year, first.month)[1])
    return _sunday_on_or_before(first), _saturday_on_or_after(last)


def time_sort_key(schedule: Schedule) -> str:
    """時刻なしの日程を最後に並べるためのソートキー"""
    return schedule.time_range or NO_TIME_SENTINEL


def sort_by_time(schedules: Iterable[Schedule]) -> list[Schedule]:
    """time_range の辞書順（安定ソート）"""
    return sorted(schedules, key=time_sort_key)


def entries_for_day(schedules: Iterable[Schedule], day: date) -> list[Schedule]:
    """指定日の日程を時刻順で返す（1日詳細・ダッシュボード用）"""
    key = day.isoformat()
    return sort_by_time(s for s in schedules if s.date == key)


def build_grid(
    anchor: date,
    schedules: Iterable[Schedule],
    today: date,
    selected: date | None = None,
    mode: CalendarMode = CalendarMode.MONTH,
) -> list[list[DayCell]]:
    """
    カレンダーグリッドを週ごとの行（各7セル）で返す。

    Args:
        anchor: 表示中の月/週を決める日付
        schedules: 可視性フィルター適用済みの日程
        today: 今日の日付（is_today 判定用）
        selected: 選択中の日付
        mode: 月表示 / 週表示

    Returns:
        list[list[DayCell]]: 日曜始まりの週行のリスト
    """
    by_date: dict[str, list[Schedule]] = defaultdict(list)
    for schedule in schedules:
        by_date[schedule.date].append(schedule)

    start, end = display_window(anchor, mode)
    weeks: list[list[DayCell]] = []
    day = start
    while day <= end:
        if day.weekday() == 6 or not weeks:
            weeks.append([])
        weeks[-1].append(
            DayCell(
                date=day,
                in_month=(day.year, day.month) == (anchor.year, anchor.month),
                is_today=day == today,
                is_selected=selected is not None and day == selected,
                entries=sort_by_time(by_date.get(day.isoformat(), [])),
                display_limit=DISPLAY_LIMIT,
            )
        )
        day += timedelta(days=1)
    return weeks
