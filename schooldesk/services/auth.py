"""認証とセッション管理

ログインで SessionContext を生成し、不透明なトークンに紐付けてプロセス内に保持する。
ログアウトでトークンを破棄する。各処理には SessionContext を明示的に渡す。

管理者アカウントは環境設定で1つだけ指定され、registered_users テーブルを経由しない。
"""

from __future__ import annotations

import logging
import threading
import uuid

from schooldesk.domain.errors import AuthenticationError, ValidationError
from schooldesk.domain.models import RegisteredUser, Role, SessionContext
from schooldesk.domain.ports import PasswordHasher
from schooldesk.services.record_store import RecordStore

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 4
_LOGIN_FAILED = "아이디 또는 비밀번호가 올바르지 않습니다."


class SessionRegistry:
    """トークン → SessionContext（プロセスの生存期間のみ有効）"""

    def __init__(self) -> None:
        self._sessions: dict[str, SessionContext] = {}
        # open / close / revoke_user はスレッドプールからも呼ばれる
        self._lock = threading.Lock()

    def open(self, session: SessionContext) -> str:
        token = str(uuid.uuid4())
        with self._lock:
            self._sessions[token] = session
        logger.info("Session opened: email=%s, role=%s", session.email, session.role.value)
        return token

    def resolve(self, token: str) -> SessionContext | None:
        return self._sessions.get(token)

    def close(self, token: str) -> None:
        with self._lock:
            session = self._sessions.pop(token, None)
        if session is not None:
            logger.info("Session closed: email=%s", session.email)

    def revoke_user(self, email: str) -> int:
        """そのユーザーの全セッションを破棄する（アカウント削除時）

        Returns:
            破棄したセッション数
        """
        with self._lock:
            tokens = [t for t, s in self._sessions.items() if s.email == email]
            for token in tokens:
                del self._sessions[token]
        if tokens:
            logger.info("Sessions revoked: email=%s, count=%d", email, len(tokens))
        return len(tokens)


class AuthService:
    """
    ログインとパスワード変更。

    1. 環境設定の管理者アカウント
    2. registered_users のアカウント
    の順に照合する。
    """

    def __init__(
        self,
        users: RecordStore[RegisteredUser],
        hasher: PasswordHasher,
        admin_email: str,
        admin_password_hash: str,
        default_password: str = "123456",
        admin_name: str = "관리자",
    ) -> None:
        """
        Args:
            users: 登録アカウントのストア
            hasher: パスワードハッシュ
            admin_email: 管理者のメールアドレス
            admin_password_hash: 管理者パスワードのハッシュ
            default_password: パスワード未設定の旧データに適用する初期パスワード
            admin_name: 管理者の表示名
        """
        self._users = users
        self._hasher = hasher
        self._admin_email = admin_email
        self._admin_password_hash = admin_password_hash
        self._default_password = default_password
        self._admin_name = admin_name

    def login(self, email: str, password: str) -> SessionContext:
        """
        Raises:
            ValidationError: メール・パスワードが未入力の場合
            AuthenticationError: 照合に失敗した場合
        """
        email = (email or "").strip()
        if not email or not password:
            raise ValidationError("이메일과 비밀번호를 입력해주세요.")

        if email == self._admin_email:
            if self._hasher.verify(password, self._admin_password_hash):
                logger.info("Admin login: email=%s", email)
                return SessionContext(email=email, name=self._admin_name, role=Role.ADMIN)
            logger.warning("Admin login failed: email=%s", email)
            raise AuthenticationError(_LOGIN_FAILED)

        user = self._find_user(email)
        if user is None or not self._verify_user_password(user, password):
            logger.warning("Login failed: email=%s", email)
            raise AuthenticationError(_LOGIN_FAILED)

        logger.info("User login: email=%s, role=%s", email, user.role.value)
        return SessionContext(email=user.email, name=user.name, role=user.role)

    def change_password(
        self,
        session: SessionContext,
        current_password: str,
        new_password: str,
        confirm_password: str,
    ) -> None:
        """
        パスワードを変更する。

        Raises:
            ValidationError: 管理者アカウント / 不一致 / 長さ不足の場合
            AuthenticationError: 現在のパスワードが一致しない場合
        """
        if session.email == self._admin_email:
            raise ValidationError("관리자 비밀번호는 환경 설정에서 변경해야 합니다.")

        user = self._find_user(session.email)
        if user is None:
            raise ValidationError("사용자 정보를 찾을 수 없습니다.")
        if not self._verify_user_password(user, current_password):
            raise AuthenticationError("현재 비밀번호가 일치하지 않습니다.")
        if new_password != confirm_password:
            raise ValidationError("새 비밀번호와 확인 비밀번호가 일치하지 않습니다.")
        if len(new_password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"신규 비밀번호는 {MIN_PASSWORD_LENGTH}자리 이상이어야 합니다."
            )

        self._users.upsert(
            RegisteredUser(
                id=user.id,
                email=user.email,
                name=user.name,
                role=user.role,
                password_hash=self._hasher.hash(new_password),
            )
        )
        logger.info("Password changed: email=%s", session.email)

    def _find_user(self, email: str) -> RegisteredUser | None:
        matches = self._users.find_by("email", email)
        return matches[0] if matches else None

    def _verify_user_password(self, user: RegisteredUser, password: str) -> bool:
        if not user.password_hash:
            # パスワード未設定の旧データは初期パスワードで照合
            return password == self._default_password
        return self._hasher.verify(password, user.password_hash)
