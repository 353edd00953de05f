from __future__ import annotations

from typing import Optional, Protocol

from itsdangerous import BadSignature, Signer


class AuthSession(Protocol):
    """Issues and verifies the admin session token."""

    def issue(self, user_id: int) -> str:
        raise NotImplementedError

    def verify(self, token: Optional[str]) -> Optional[int]:
        raise NotImplementedError


class SignedCookieSession(AuthSession):
    """Token = ``<user_id>.<HMAC signature>``, stored in an HttpOnly cookie."""

    def __init__(self, secret_key: str, *, salt: str = "time-tracking.admin"):
        if not secret_key:
            raise ValueError("secret_key is required")
        self._signer = Signer(secret_key, salt=salt, sep=".")

    def issue(self, user_id: int) -> str:
        return self._signer.sign(str(int(user_id))).decode("ascii")

    def verify(self, token: Optional[str]) -> Optional[int]:
        if not token:
            return None
        try:
            payload = self._signer.unsign(token).decode("ascii")
        except BadSignature:
            return None
        return int(payload) if payload.isdigit() else None
