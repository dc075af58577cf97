"""ユーザー管理 API ルート（管理者のみ）

GET    /api/users                    → 200 [User...]
POST   /api/users/import             → 201 { added, parsed_count, ..., warnings }（CSV アップロード）
GET    /api/users/template.csv       → text/csv
DELETE /api/users/{id}?confirm=true  → 200 { warnings }
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, UploadFile, status
from fastapi.responses import Response
from pydantic import BaseModel

from schooldesk.domain.errors import ImportFormatError
from schooldesk.domain.models import RegisteredUser
from schooldesk.entrypoints.api.deps import get_portal, require_admin
from schooldesk.entrypoints.api.routes.schedules import DeleteResponse
from schooldesk.entrypoints.factory import Portal

logger = logging.getLogger(__name__)
router = APIRouter(
    prefix="/users", tags=["users"], dependencies=[Depends(require_admin)]
)


class UserResponse(BaseModel):
    id: str
    email: str
    name: str
    role: str

    @classmethod
    def of(cls, u: RegisteredUser) -> "UserResponse":
        # パスワードハッシュは返さない
        return cls(id=u.id, email=u.email, name=u.name, role=u.role.value)


class ImportResponse(BaseModel):
    added: list[UserResponse]
    parsed_count: int
    skipped_duplicates: int
    skipped_malformed: int
    warnings: list[str] = []


@router.get("", response_model=list[UserResponse])
async def list_users(portal: Portal = Depends(get_portal)) -> list[UserResponse]:
    return [UserResponse.of(u) for u in portal.users.list_users()]


@router.post("/import", status_code=status.HTTP_201_CREATED, response_model=ImportResponse)
def import_users(
    file: UploadFile,
    portal: Portal = Depends(get_portal),
) -> ImportResponse:
    """
    CSV（이메일, 이름, 역할）で一括登録する。

    - ヘッダー行は自動判定してスキップ
    - 登録済みのメールアドレスはスキップ
    - パスワードのハッシュ計算を含むため def（スレッドプールで実行）
    """
    content = file.file.read()
    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise ImportFormatError("CSV 파일은 UTF-8 인코딩이어야 합니다.") from e

    result = portal.users.import_csv(text)
    logger.info("Users imported from %s: added=%d", file.filename, len(result.added))
    return ImportResponse(
        added=[UserResponse.of(u) for u in result.added],
        parsed_count=result.parsed_count,
        skipped_duplicates=result.skipped_duplicates,
        skipped_malformed=result.skipped_malformed,
        warnings=portal.users.drain_warnings(),
    )


@router.get("/template.csv")
async def download_template(portal: Portal = Depends(get_portal)) -> Response:
    # Excel で文字化けしないよう BOM を付ける
    return Response(
        content="\ufeff" + portal.users.template_csv(),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": 'attachment; filename="user_template.csv"'},
    )


@router.delete("/{user_id}", response_model=DeleteResponse)
async def delete_user(
    user_id: str,
    confirm: bool = False,
    portal: Portal = Depends(get_portal),
) -> DeleteResponse:
    portal.users.delete_user(user_id, confirm=confirm)
    return DeleteResponse(warnings=portal.users.drain_warnings())
