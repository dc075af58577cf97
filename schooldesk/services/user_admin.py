"""ユーザー管理（管理者専用）

- 登録アカウント一覧・削除
- CSV 一括登録（"이메일, 이름, 역할"）
- CSV テンプレートの生成

CSV 取り込みのルール:
  - 空行は無視
  - 1行目が "email" / "이메일" を含み "@" を含まない場合はヘッダーとして読み飛ばす
  - メールアドレスに "@" がない行は黙って読み飛ばす
  - 役割は admin / 관리자 のみ admin、それ以外は user
  - 登録済みのメールアドレスは追加しない（同じ CSV を2回取り込んでも重複しない）
"""

from __future__ import annotations

import csv
import logging

from schooldesk.domain.errors import ConfirmationRequiredError, ImportFormatError
from schooldesk.domain.models import ImportResult, RegisteredUser, Role
from schooldesk.domain.ports import PasswordHasher
from schooldesk.services.auth import SessionRegistry
from schooldesk.services.record_store import RecordStore

logger = logging.getLogger(__name__)

TEMPLATE_HEADER = "이메일, 이름, 역할"
TEMPLATE_EXAMPLE = "example@sc2.gyo6.net, 홍길동, user"


def _is_header(line: str) -> bool:
    # "@" を含む行はデータ行（"myemail@..." をヘッダーと誤認しない）
    return "@" not in line and ("email" in line.lower() or "이메일" in line)


def parse_user_csv(text: str) -> tuple[list[tuple[str, str, Role]], int]:
    """
    CSV テキストを (email, name, role) のリストに変換。

    Returns:
        (有効行のリスト, 読み飛ばした不正行の数)
    """
    lines = [line.strip() for line in text.lstrip("\ufeff").splitlines()]
    lines = [line for line in lines if line]
    if lines and _is_header(lines[0]):
        lines = lines[1:]

    parsed: list[tuple[str, str, Role]] = []
    malformed = 0
    for fields in csv.reader(lines, skipinitialspace=True):
        fields = [f.strip() for f in fields]
        email = fields[0] if fields else ""
        if "@" not in email:
            malformed += 1
            continue
        name = fields[1] if len(fields) > 1 and fields[1] else email.split("@")[0]
        role = Role.parse(fields[2] if len(fields) > 2 else None)
        parsed.append((email, name, role))
    return parsed, malformed


class UserAdminService:
    """登録アカウントの管理"""

    def __init__(
        self,
        users: RecordStore[RegisteredUser],
        hasher: PasswordHasher,
        default_password: str = "123456",
        sessions: SessionRegistry | None = None,
    ) -> None:
        """
        Args:
            users: 登録アカウントのストア
            hasher: 初期パスワードのハッシュ化に使う
            default_password: 一括登録したアカウントの初期パスワード
            sessions: 削除したアカウントのセッションを破棄するレジストリ
        """
        self._users = users
        self._hasher = hasher
        self._default_password = default_password
        self._sessions = sessions

    def list_users(self) -> list[RegisteredUser]:
        return self._users.fetch_all()

    def import_csv(self, text: str) -> ImportResult:
        """
        CSV から一括登録する。

        Raises:
            ImportFormatError: 有効な行が1件もない場合
        """
        parsed, malformed = parse_user_csv(text)
        if not parsed:
            raise ImportFormatError("유효한 사용자 데이터가 없습니다.")

        known = {u.email for u in self._users.fetch_all()}
        # 全員同じ初期パスワードなのでハッシュは取り込みごとに1回だけ計算する
        default_hash: str | None = None
        added: list[RegisteredUser] = []
        duplicates = 0
        for email, name, role in parsed:
            if email in known:
                duplicates += 1
                continue
            if default_hash is None:
                default_hash = self._hasher.hash(self._default_password)
            user = RegisteredUser(
                id=email,
                email=email,
                name=name,
                role=role,
                password_hash=default_hash,
            )
            self._users.upsert(user)
            known.add(email)
            added.append(user)

        logger.info(
            "CSV import: parsed=%d, added=%d, duplicates=%d, malformed=%d",
            len(parsed),
            len(added),
            duplicates,
            malformed,
        )
        return ImportResult(
            added=added,
            parsed_count=len(parsed),
            skipped_duplicates=duplicates,
            skipped_malformed=malformed,
        )

    def delete_user(self, user_id: str, confirm: bool = False) -> None:
        """
        Raises:
            ConfirmationRequiredError: confirm が付いていない場合
            RecordNotFoundError: id が存在しない場合
        """
        if not confirm:
            raise ConfirmationRequiredError("사용자 삭제를 확인해주세요.")
        user = self._users.get(user_id)
        self._users.delete(user_id)
        logger.info("User deleted: id=%s", user_id)

        # 削除済みアカウントのトークンで操作を続けられないようにする
        if self._sessions is not None:
            self._sessions.revoke_user(user.email if user else user_id)

    @staticmethod
    def template_csv() -> str:
        """CSV 一括登録のテンプレート"""
        return f"{TEMPLATE_HEADER}\n{TEMPLATE_EXAMPLE}\n"

    def drain_warnings(self) -> list[str]:
        return self._users.drain_warnings()
