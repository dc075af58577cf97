"""PBKDF2 パスワードハッシュのユニットテスト"""

from schooldesk.adapters.password_hasher import Pbkdf2PasswordHasher


class TestPbkdf2PasswordHasher:
    def test_verify_roundtrip(self, hasher):
        hashed = hasher.hash("1234")

        assert hasher.verify("1234", hashed)
        assert not hasher.verify("12345", hashed)

    def test_hash_is_salted(self, hasher):
        assert hasher.hash("same") != hasher.hash("same")

    def test_plain_text_is_not_stored(self, hasher):
        hashed = hasher.hash("secret-pw")

        assert "secret-pw" not in hashed
        assert hashed.startswith("pbkdf2_sha256$1000$")

    def test_iterations_are_read_from_hash(self, hasher):
        """反復回数の異なるインスタンスでも照合できる"""
        hashed = Pbkdf2PasswordHasher(iterations=2000).hash("pw")

        assert hasher.verify("pw", hashed)

    def test_malformed_hash_is_rejected(self, hasher):
        assert not hasher.verify("pw", "")
        assert not hasher.verify("pw", "plain-text")
        assert not hasher.verify("pw", "md5$1$salt$hash")
        assert not hasher.verify("pw", "pbkdf2_sha256$many$salt$hash")
