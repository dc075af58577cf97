"""AuthService / SessionRegistry のユニットテスト"""

import pytest
from schooldesk.domain.errors import AuthenticationError, ValidationError
from schooldesk.domain.models import RegisteredUser, Role, SessionContext
from schooldesk.services import record_kinds
from schooldesk.services.auth import AuthService, SessionRegistry
from schooldesk.services.record_store import RecordStore

from tests.conftest import ADMIN_EMAIL, ADMIN_PASSWORD, TEACHER_EMAIL


@pytest.fixture
def users(cache, hasher) -> RecordStore[RegisteredUser]:
    store = RecordStore(record_kinds.USERS, cache)
    store.upsert(
        RegisteredUser(
            id=TEACHER_EMAIL,
            email=TEACHER_EMAIL,
            name="김교사",
            password_hash=hasher.hash("teacher-pw"),
        )
    )
    store.upsert(RegisteredUser(id="legacy@school.kr", email="legacy@school.kr", name="옛사용자"))
    return store


@pytest.fixture
def auth(users, hasher) -> AuthService:
    return AuthService(
        users=users,
        hasher=hasher,
        admin_email=ADMIN_EMAIL,
        admin_password_hash=hasher.hash(ADMIN_PASSWORD),
    )


class TestLogin:
    def test_admin_login(self, auth):
        session = auth.login(ADMIN_EMAIL, ADMIN_PASSWORD)

        assert session == SessionContext(email=ADMIN_EMAIL, name="관리자", role=Role.ADMIN)

    def test_admin_wrong_password(self, auth):
        with pytest.raises(AuthenticationError):
            auth.login(ADMIN_EMAIL, "wrong")

    def test_registered_user_login(self, auth):
        session = auth.login(f"  {TEACHER_EMAIL} ", "teacher-pw")

        assert session.email == TEACHER_EMAIL
        assert session.name == "김교사"
        assert session.role is Role.USER

    def test_unknown_user(self, auth):
        with pytest.raises(AuthenticationError, match="올바르지 않습니다"):
            auth.login("nobody@school.kr", "whatever")

    def test_user_without_hash_uses_default_password(self, auth):
        assert auth.login("legacy@school.kr", "123456").name == "옛사용자"
        with pytest.raises(AuthenticationError):
            auth.login("legacy@school.kr", "654321")

    @pytest.mark.parametrize("email, password", [("", "pw"), (TEACHER_EMAIL, "")])
    def test_blank_input(self, auth, email, password):
        with pytest.raises(ValidationError):
            auth.login(email, password)


class TestChangePassword:
    def test_success(self, auth, teacher_session):
        auth.change_password(teacher_session, "teacher-pw", "new-pw", "new-pw")

        assert auth.login(TEACHER_EMAIL, "new-pw").email == TEACHER_EMAIL
        with pytest.raises(AuthenticationError):
            auth.login(TEACHER_EMAIL, "teacher-pw")

    def test_new_password_is_stored_hashed(self, auth, users, teacher_session):
        auth.change_password(teacher_session, "teacher-pw", "new-pw", "new-pw")

        stored = users.get(TEACHER_EMAIL)
        assert stored.password_hash.startswith("pbkdf2_sha256$")
        assert "new-pw" not in stored.password_hash

    def test_wrong_current_password(self, auth, teacher_session):
        with pytest.raises(AuthenticationError):
            auth.change_password(teacher_session, "bad", "new-pw", "new-pw")

    def test_confirmation_mismatch(self, auth, teacher_session):
        with pytest.raises(ValidationError, match="일치하지"):
            auth.change_password(teacher_session, "teacher-pw", "new-pw", "new-pw2")

    def test_too_short(self, auth, teacher_session):
        with pytest.raises(ValidationError, match="4자리"):
            auth.change_password(teacher_session, "teacher-pw", "abc", "abc")

    def test_admin_cannot_change_here(self, auth, admin_session):
        with pytest.raises(ValidationError):
            auth.change_password(admin_session, ADMIN_PASSWORD, "newpass", "newpass")


class TestSessionRegistry:
    def test_open_resolve_close(self, teacher_session):
        registry = SessionRegistry()

        token = registry.open(teacher_session)

        assert registry.resolve(token) == teacher_session
        registry.close(token)
        assert registry.resolve(token) is None

    def test_tokens_are_unique(self, teacher_session):
        registry = SessionRegistry()

        assert registry.open(teacher_session) != registry.open(teacher_session)

    def test_close_unknown_token_is_noop(self):
        SessionRegistry().close("missing")

    def test_revoke_user_drops_all_sessions_of_user(self, teacher_session, other_session):
        registry = SessionRegistry()
        first = registry.open(teacher_session)
        second = registry.open(teacher_session)
        other = registry.open(other_session)

        assert registry.revoke_user(TEACHER_EMAIL) == 2

        assert registry.resolve(first) is None
        assert registry.resolve(second) is None
        assert registry.resolve(other) == other_session

    def test_revoke_user_without_sessions(self):
        assert SessionRegistry().revoke_user(TEACHER_EMAIL) == 0
