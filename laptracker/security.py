from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import Optional

from itsdangerous import BadSignature, URLSafeTimedSerializer
from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def _prehash(password: str) -> str:
    # bcrypt only looks at the first 72 bytes
    if len(password.encode("utf-8")) > 72:
        return hashlib.sha256(password.encode("utf-8")).hexdigest()
    return password


def hash_password(password: str) -> str:
    return pwd_context.hash(_prehash(password))


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return pwd_context.verify(_prehash(password), password_hash)
    except ValueError:
        return False


@dataclass(frozen=True)
class SessionToken:
    """Claims carried by the signed session cookie."""

    email: str
    user_role: str


class TokenCodec:
    """Signs and verifies session tokens with the configured secret.

    A token that fails verification, has expired or lacks the expected claims
    decodes to ``None``; callers treat that the same as a missing token.
    """

    def __init__(self, secret: str, *, max_age: Optional[int] = None) -> None:
        self._serializer = URLSafeTimedSerializer(secret, salt="laptracker-session")
        self.max_age = max_age

    def dumps(self, token: SessionToken) -> str:
        return self._serializer.dumps({"email": token.email, "userRole": token.user_role})

    def loads(self, raw: Optional[str]) -> Optional[SessionToken]:
        if not raw:
            return None
        try:
            data = self._serializer.loads(raw, max_age=self.max_age)
        except BadSignature:
            return None
        if not isinstance(data, dict):
            return None
        return SessionToken(
            email=str(data.get("email") or ""),
            user_role=str(data.get("userRole") or ""),
        )
