"""ドメインモデル - 外部依存なしのデータ構造"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum


class ScheduleCategory(Enum):
    """日程のカテゴリ（表示名は韓国語のまま保存する）"""

    OFFICIAL_DOCUMENT = "공문"
    DUTY = "복무"
    EVENT = "행사"
    TRAINING = "연수"
    MEETING = "회의"
    INSTRUCTIONAL_OBSERVANCE = "계기교육"
    OTHER = "기타"

    @classmethod
    def parse(cls, value: str | None) -> ScheduleCategory:
        """保存値からカテゴリを復元。未知の値は OTHER"""
        for category in cls:
            if value in (category.value, category.name):
                return category
        return cls.OTHER


class Role(Enum):
    """アカウントの権限"""

    ADMIN = "admin"
    USER = "user"

    @classmethod
    def parse(cls, value: str | None) -> Role:
        """'admin' / '관리자' のみ ADMIN、それ以外は全て USER"""
        normalized = (value or "").strip().lower()
        if normalized in ("admin", "관리자"):
            return cls.ADMIN
        return cls.USER


class ViewMode(Enum):
    """カレンダーの表示モード"""

    ALL = "all"  # 共有（公開）フィード
    MINE = "mine"  # 自分が登録した予定（非公開含む）


class CalendarMode(Enum):
    """グリッドの表示範囲"""

    MONTH = "month"
    WEEK = "week"


class WeatherCondition(Enum):
    """天気ウィジェットの表示状態"""

    CLEAR = "clear"
    PARTLY_CLOUDY = "partly-cloudy"
    RAIN = "rain"
    SNOW = "snow"
    FOG = "fog"


@dataclass(frozen=True)
class Schedule:
    """学校日程"""

    id: str
    title: str
    date: str  # YYYY-MM-DD: "2026-02-22"
    category: ScheduleCategory = ScheduleCategory.OTHER
    time_range: str | None = None  # 例: "15:00~16:30"
    location: str | None = None  # 例: "시청각실"
    target: str | None = None  # 例: "전교직원"
    description: str | None = None
    author_email: str | None = None  # None はシード/旧データ（管理者扱い）
    is_private: bool = False

    @property
    def day(self) -> date:
        return date.fromisoformat(self.date)


@dataclass(frozen=True)
class TrainingPost:
    """研修・お知らせ掲示物"""

    id: str
    title: str
    author: str  # 部署名: "교육연구부"
    date: str  # YYYY-MM-DD
    summary: str = ""
    author_email: str | None = None
    pdf_url: str | None = None
    file_type: str | None = None  # 例: "pdf", "hwp"


@dataclass(frozen=True)
class Shortcut:
    """外部リンク（管理者が管理する全体共通のセット）"""

    id: str
    label: str
    url: str


@dataclass(frozen=True)
class RegisteredUser:
    """登録済みアカウント（id はメールアドレス）"""

    id: str
    email: str
    name: str
    role: Role = Role.USER
    password_hash: str = ""  # "pbkdf2_sha256$<iterations>$<salt>$<hash>"


@dataclass(frozen=True)
class Holiday:
    """祝日・記念日（静的データ）"""

    date: str  # YYYY-MM-DD
    name: str
    is_public: bool  # True: 法定休日, False: 記念日


@dataclass(frozen=True)
class SessionContext:
    """ログイン中のユーザー情報。ログイン時に生成され、各処理に明示的に渡される"""

    email: str
    name: str
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN


@dataclass(frozen=True)
class ViewContext:
    """可視性フィルターの入力"""

    current_user_email: str | None = None
    view_mode: ViewMode = ViewMode.ALL


@dataclass(frozen=True)
class DayCell:
    """カレンダーグリッドの1日分"""

    date: date
    in_month: bool
    is_today: bool
    is_selected: bool
    entries: list[Schedule] = field(default_factory=list)  # 時刻順・全件
    display_limit: int = 2

    @property
    def visible_entries(self) -> list[Schedule]:
        return self.entries[: self.display_limit]

    @property
    def total_count(self) -> int:
        return len(self.entries)

    @property
    def more_count(self) -> int:
        return max(0, self.total_count - self.display_limit)


@dataclass(frozen=True)
class WeeklyExportRow:
    """週間エクスポートの1行（月〜日）"""

    date: date
    label: str  # 例: "3/2(월)"
    observance: str  # 계기교육 のタイトルをカンマ区切り
    others: str  # その他カテゴリを改行区切り
    authors: str
    is_public_holiday: bool = False  # 法定休日または日曜日（赤字表示用）


@dataclass(frozen=True)
class MonthlyExportRow:
    """月間エクスポートの1行"""

    date: date
    day: int
    weekday: str  # 例: "일"
    observance: str  # 祝日名 + 계기교육
    others: str
    authors: str
    is_public_holiday: bool  # 法定休日または日曜日（赤字表示用）


@dataclass(frozen=True)
class WeatherReport:
    """現在の天気"""

    temperature: float
    condition: WeatherCondition
    weather_code: int
    location_name: str = ""


@dataclass(frozen=True)
class ImportResult:
    """CSV 一括登録の結果"""

    added: list[RegisteredUser] = field(default_factory=list)
    parsed_count: int = 0
    skipped_duplicates: int = 0
    skipped_malformed: int = 0
