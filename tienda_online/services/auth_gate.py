"""Bearer authentication in front of the protected API views."""

from __future__ import annotations

import re
from functools import wraps
from typing import Optional

from flask import current_app, g, request

from ..common.errors import Unauthenticated
from ..common.logging import log_event
from .token_service import Identity, TokenService


_BEARER_RE = re.compile(r"Bearer\s+(.*)$", re.IGNORECASE)

MISSING_TOKEN_MESSAGE = "Token no proporcionado. Debes iniciar sesión."
INVALID_TOKEN_MESSAGE = "Token inválido o expirado. Debes iniciar sesión nuevamente."


def extract_token(header_value: Optional[str]) -> Optional[str]:
    """Take the token from ``Bearer <token>``, or the raw value without prefix."""

    if not header_value:
        return None
    match = _BEARER_RE.search(header_value)
    token = match.group(1) if match else header_value
    token = token.strip()
    return token or None


class AuthGate:
    def __init__(self, token_service: TokenService) -> None:
        self._tokens = token_service

    def authenticate(self, header_value: Optional[str]) -> Identity:
        token = extract_token(header_value)
        if token is None:
            raise Unauthenticated(MISSING_TOKEN_MESSAGE)
        identity = self._tokens.verify(token)
        if identity is None:
            raise Unauthenticated(INVALID_TOKEN_MESSAGE)
        return identity


def require_auth(view):
    """Run the auth gate before the view and expose the caller as ``g.identity``."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        gate: AuthGate = current_app.extensions["tienda_components"]["auth_gate"]
        try:
            g.identity = gate.authenticate(request.headers.get("Authorization"))
        except Unauthenticated as exc:
            log_event("warning", "auth.rejected", path=request.path, reason=exc.message)
            raise
        return view(*args, **kwargs)

    return wrapper
