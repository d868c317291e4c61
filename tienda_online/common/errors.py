"""Failure kinds raised by the shop services and rendered by the API router."""

from __future__ import annotations

from typing import Any, List, Optional


class TiendaError(Exception):
    """Base error carrying the HTTP status and optional envelope data."""

    status_code = 500
    event = "api.error"

    def __init__(self, message: str, *, data: Optional[Any] = None) -> None:
        super().__init__(message)
        self.message = message
        self.data = data


class MalformedInput(TiendaError):
    status_code = 400


class Unauthenticated(TiendaError):
    status_code = 401


class InvalidCredentials(TiendaError):
    status_code = 401


class CartRejected(TiendaError):
    """One or more cart lines failed validation; the whole cart is refused."""

    status_code = 400

    def __init__(self, errors: List[str], message: str = "Se encontraron problemas con el carrito.") -> None:
        super().__init__(message, data={"errores": list(errors)})
        self.errors = list(errors)


class NotFound(TiendaError):
    status_code = 404


class MethodNotAllowed(TiendaError):
    status_code = 405


class CatalogUnavailable(TiendaError):
    status_code = 500
    event = "catalog.unavailable"


class CredentialsUnavailable(TiendaError):
    status_code = 500
    event = "credentials.unavailable"
