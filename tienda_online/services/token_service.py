"""Bearer tokens for the shop API.

A token is the base64 encoding of a JSON payload holding the user id, the
username, the issue time and the server's shared secret. It is readable by
anyone who holds it; the only tamper check is that the embedded secret must
match the configured one. Tokens are not stored server-side, so they stay
valid until the TTL runs out.
"""

from __future__ import annotations

import base64
import binascii
import json
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional


@dataclass(frozen=True)
class Identity:
    user_id: Any
    username: str


@dataclass(frozen=True)
class IssuedToken:
    token: str
    issued_at: int
    expires_at: int


_REQUIRED_FIELDS = ("user_id", "username", "timestamp", "secret")


class TokenService:
    def __init__(self, secret: str, ttl: int, clock: Callable[[], float] = time.time) -> None:
        if not secret:
            raise ValueError("secret must not be empty")
        self._secret = secret
        self._ttl = int(ttl)
        self._clock = clock

    def issue(self, user_id: Any, username: str) -> IssuedToken:
        issued_at = int(self._clock())
        payload = {
            "user_id": user_id,
            "username": username,
            "timestamp": issued_at,
            "secret": self._secret,
        }
        raw = json.dumps(payload, ensure_ascii=False).encode("utf-8")
        token = base64.b64encode(raw).decode("ascii")
        return IssuedToken(token=token, issued_at=issued_at, expires_at=issued_at + self._ttl)

    def verify(self, token: Optional[str]) -> Optional[Identity]:
        """Return the identity in a valid token, or None for anything else."""

        if not token:
            return None
        payload = self._decode(token)
        if payload is None:
            return None
        if any(payload.get(name) is None for name in _REQUIRED_FIELDS):
            return None
        if payload["secret"] != self._secret:
            return None
        issued_at = payload["timestamp"]
        if isinstance(issued_at, bool) or not isinstance(issued_at, (int, float)):
            return None
        try:
            if self._clock() - issued_at > self._ttl:
                return None
        except OverflowError:
            return None
        return Identity(user_id=payload["user_id"], username=str(payload["username"]))

    @staticmethod
    def _decode(token: str) -> Optional[dict]:
        try:
            raw = base64.b64decode(token.strip(), validate=True)
            payload = json.loads(raw.decode("utf-8"))
        except (binascii.Error, ValueError, UnicodeDecodeError, RecursionError):
            return None
        if not isinstance(payload, dict):
            return None
        return payload
