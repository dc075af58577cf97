"""PBKDF2 Password Hasher Adapter

PasswordHasher ABC の hashlib 実装。

保存形式: "pbkdf2_sha256$<iterations>$<salt(hex)>$<hash(hex)>"
"""

from __future__ import annotations

import hashlib
import hmac
import secrets

from schooldesk.domain.ports import PasswordHasher

_ALGORITHM = "pbkdf2_sha256"
_DEFAULT_ITERATIONS = 390_000
_SALT_BYTES = 16


class Pbkdf2PasswordHasher(PasswordHasher):
    """ソルト付き PBKDF2-HMAC-SHA256"""

    def __init__(self, iterations: int = _DEFAULT_ITERATIONS) -> None:
        self._iterations = iterations

    def hash(self, password: str) -> str:
        salt = secrets.token_hex(_SALT_BYTES)
        digest = self._derive(password, salt, self._iterations)
        return f"{_ALGORITHM}${self._iterations}${salt}${digest}"

    def verify(self, password: str, hashed: str) -> bool:
        try:
            algorithm, iterations, salt, expected = hashed.split("$")
            rounds = int(iterations)
        except ValueError:
            return False
        if algorithm != _ALGORITHM:
            return False
        actual = self._derive(password, salt, rounds)
        return hmac.compare_digest(actual, expected)

    @staticmethod
    def _derive(password: str, salt: str, iterations: int) -> str:
        return hashlib.pbkdf2_hmac(
            "sha256", password.encode("utf-8"), salt.encode("utf-8"), iterations
        ).hex()
