"""レコード種別の定義

RecordStore が扱う4種類のレコードについて、リモートのコレクション名・
ローカルキャッシュのキー・並び順・dict との相互変換・シードデータをまとめる。
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

from schooldesk.domain.models import (
    RegisteredUser,
    Role,
    Schedule,
    ScheduleCategory,
    Shortcut,
    TrainingPost,
)
from schooldesk.domain.seed import SEED_SCHEDULES, SEED_SHORTCUTS, SEED_TRAININGS

T = TypeVar("T")


@dataclass(frozen=True)
class RecordKind(Generic[T]):
    """レコード種別ごとの永続化設定"""

    name: str
    collection: str  # リモートストアのコレクション名
    cache_key: str  # ローカルキャッシュのキー
    to_dict: Callable[[T], dict]
    from_dict: Callable[[dict], T]
    get_id: Callable[[T], str]
    sort_field: str | None = None
    descending: bool = False
    seed: tuple = ()

    def sort_key(self, record: T):
        """メモリ上での並び替え用（リモート側の order_by と同じ順序）"""
        return getattr(record, self.sort_field) if self.sort_field else 0


def _opt(value) -> str | None:
    """空文字・None を None に正規化"""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


# ── Schedule ─────────────────────────────────────────────────────────────────


def schedule_to_dict(s: Schedule) -> dict:
    return {
        "id": s.id,
        "title": s.title,
        "date": s.date,
        "category": s.category.value,
        "time_range": s.time_range,
        "location": s.location,
        "target": s.target,
        "description": s.description,
        "author_email": s.author_email,
        "is_private": s.is_private,
    }


def schedule_from_dict(d: dict) -> Schedule:
    return Schedule(
        id=str(d["id"]),
        title=d["title"],
        date=d["date"],
        category=ScheduleCategory.parse(d.get("category")),
        time_range=_opt(d.get("time_range")),
        location=_opt(d.get("location")),
        target=_opt(d.get("target")),
        description=_opt(d.get("description")),
        author_email=_opt(d.get("author_email")),
        is_private=bool(d.get("is_private", False)),
    )


# ── TrainingPost ─────────────────────────────────────────────────────────────


def training_to_dict(p: TrainingPost) -> dict:
    return {
        "id": p.id,
        "title": p.title,
        "author": p.author,
        "date": p.date,
        "summary": p.summary,
        "author_email": p.author_email,
        "pdf_url": p.pdf_url,
        "file_type": p.file_type,
    }


def training_from_dict(d: dict) -> TrainingPost:
    return TrainingPost(
        id=str(d["id"]),
        title=d["title"],
        author=d.get("author") or "",
        date=d["date"],
        summary=d.get("summary") or "",
        author_email=_opt(d.get("author_email")),
        pdf_url=_opt(d.get("pdf_url")),
        file_type=_opt(d.get("file_type")),
    )


# ── Shortcut ─────────────────────────────────────────────────────────────────


def shortcut_to_dict(s: Shortcut) -> dict:
    return {"id": s.id, "label": s.label, "url": s.url}


def shortcut_from_dict(d: dict) -> Shortcut:
    return Shortcut(id=str(d["id"]), label=d["label"], url=d["url"])


# ── RegisteredUser ───────────────────────────────────────────────────────────


def user_to_dict(u: RegisteredUser) -> dict:
    return {
        "id": u.id,
        "email": u.email,
        "name": u.name,
        "role": u.role.value,
        "password_hash": u.password_hash,
    }


def user_from_dict(d: dict) -> RegisteredUser:
    email = d["email"]
    return RegisteredUser(
        id=str(d.get("id") or email),
        email=email,
        name=d.get("name") or email.split("@")[0],
        role=Role.parse(d.get("role")),
        password_hash=d.get("password_hash") or "",
    )


SCHEDULES: RecordKind[Schedule] = RecordKind(
    name="schedule",
    collection="school_schedules",
    cache_key="school_schedules",
    to_dict=schedule_to_dict,
    from_dict=schedule_from_dict,
    get_id=lambda s: s.id,
    sort_field="date",
    seed=SEED_SCHEDULES,
)

TRAININGS: RecordKind[TrainingPost] = RecordKind(
    name="training",
    collection="training_posts",
    cache_key="training_posts",
    to_dict=training_to_dict,
    from_dict=training_from_dict,
    get_id=lambda p: p.id,
    sort_field="date",
    descending=True,
    seed=SEED_TRAININGS,
)

SHORTCUTS: RecordKind[Shortcut] = RecordKind(
    name="shortcut",
    collection="app_shortcuts",
    cache_key="global_shortcuts",
    to_dict=shortcut_to_dict,
    from_dict=shortcut_from_dict,
    get_id=lambda s: s.id,
    seed=SEED_SHORTCUTS,
)

USERS: RecordKind[RegisteredUser] = RecordKind(
    name="user",
    collection="registered_users",
    cache_key="registered_users",
    to_dict=user_to_dict,
    from_dict=user_from_dict,
    get_id=lambda u: u.id,
)
