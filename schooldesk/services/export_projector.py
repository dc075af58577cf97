"""エクスポート用の表データ生成

日程リストから週間表（月〜日の7行）と月間表（日数分の行）を作る。
非公開の日程はどちらの表にも含めない。

列の構成:
  - 계기교육 列: カテゴリが 계기교육 の日程タイトル（カンマ区切り）
    月間表では祝日名を先頭に付ける
  - 주요 일정 列: その他カテゴリを "タイトル (時間, 場所, 対象)" で改行区切り
  - 작성자 列: 作成者の表示名（重複除去・カンマ区切り）
"""

from __future__ import annotations

import calendar
from collections.abc import Iterable
from datetime import date, timedelta

from schooldesk.domain.holidays import find_holiday
from schooldesk.domain.models import (
    MonthlyExportRow,
    RegisteredUser,
    Schedule,
    ScheduleCategory,
    WeeklyExportRow,
)
from schooldesk.services.calendar_grid import entries_for_day

ADMIN_AUTHOR_LABEL = "관리자"
WEEKDAY_LABELS = ("월", "화", "수", "목", "금", "토", "일")  # date.weekday() 順


def build_author_lookup(users: Iterable[RegisteredUser]) -> dict[str, str]:
    """email → 表示名 の辞書"""
    return {u.email: u.name for u in users if u.name}


def resolve_author(author_email: str | None, lookup: dict[str, str]) -> str:
    """表示名 → メールのローカル部 → "관리자" の順に解決"""
    if not author_email:
        return ADMIN_AUTHOR_LABEL
    return lookup.get(author_email) or author_email.split("@")[0]


def format_entry(schedule: Schedule) -> str:
    """'タイトル (時間, 場所, 対象)'。補足がすべて空ならタイトルのみ"""
    details = [
        part
        for part in (schedule.time_range, schedule.location, schedule.target)
        if part and part.strip()
    ]
    if not details:
        return schedule.title
    return f"{schedule.title} ({', '.join(details)})"


def _is_red_day(day: date) -> bool:
    holiday = find_holiday(day)
    return day.weekday() == 6 or (holiday is not None and holiday.is_public)


def _project_day(
    entries: list[Schedule], lookup: dict[str, str]
) -> tuple[list[str], str, str]:
    """1日分の (계기교육タイトル, その他列, 作成者列)"""
    observances = [
        s.title for s in entries if s.category is ScheduleCategory.INSTRUCTIONAL_OBSERVANCE
    ]
    others = "\n".join(
        format_entry(s)
        for s in entries
        if s.category is not ScheduleCategory.INSTRUCTIONAL_OBSERVANCE
    )
    authors: list[str] = []
    for s in entries:
        name = resolve_author(s.author_email, lookup)
        if name not in authors:
            authors.append(name)
    return observances, others, ", ".join(authors)


def week_range(reference: date) -> tuple[date, date]:
    """reference を含む月曜〜日曜"""
    monday = reference - timedelta(days=reference.weekday())
    return monday, monday + timedelta(days=6)


def weekly_rows(
    schedules: Iterable[Schedule],
    reference: date,
    users: Iterable[RegisteredUser] = (),
) -> list[WeeklyExportRow]:
    """reference を含む週の7行"""
    public = [s for s in schedules if not s.is_private]
    lookup = build_author_lookup(users)
    monday, _ = week_range(reference)

    rows: list[WeeklyExportRow] = []
    for offset in range(7):
        day = monday + timedelta(days=offset)
        observances, others, authors = _project_day(entries_for_day(public, day), lookup)
        rows.append(
            WeeklyExportRow(
                date=day,
                label=f"{day.month}/{day.day}({WEEKDAY_LABELS[day.weekday()]})",
                observance=", ".join(observances),
                others=others,
                authors=authors,
                is_public_holiday=_is_red_day(day),
            )
        )
    return rows


def monthly_rows(
    schedules: Iterable[Schedule],
    year: int,
    month: int,
    users: Iterable[RegisteredUser] = (),
) -> list[MonthlyExportRow]:
    """指定月の日数分の行（祝日名を 계기교육 列の先頭に付ける）"""
    public = [s for s in schedules if not s.is_private]
    lookup = build_author_lookup(users)
    days_in_month = calendar.monthrange(year, month)[1]

    rows: list[MonthlyExportRow] = []
    for day_number in range(1, days_in_month + 1):
        day = date(year, month, day_number)
        observances, others, authors = _project_day(entries_for_day(public, day), lookup)
        holiday = find_holiday(day)
        if holiday is not None:
            observances.insert(0, holiday.name)
        rows.append(
            MonthlyExportRow(
                date=day,
                day=day_number,
                weekday=WEEKDAY_LABELS[day.weekday()],
                observance=", ".join(observances),
                others=others,
                authors=authors,
                is_public_holiday=_is_red_day(day),
            )
        )
    return rows


def weekly_title(reference: date) -> str:
    monday, sunday = week_range(reference)
    # 年をまたぐ週は日曜側にも年を付ける
    end_year = f"{sunday.year}년 " if sunday.year != monday.year else ""
    return (
        f"{monday.year}년 {monday.month}월 {monday.day}일 ~ "
        f"{end_year}{sunday.month}월 {sunday.day}일 주간 학교 일정"
    )


def monthly_title(year: int, month: int) -> str:
    return f"{year}년 {month}월 학교 일정"
