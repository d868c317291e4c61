"""Shop services: data stores, tokens, auth and checkout."""

from .auth_gate import AuthGate
from .cart_validator import CartValidator
from .catalog_repository import CatalogRepository
from .token_service import TokenService
from .user_repository import UserRepository

__all__ = [
    "AuthGate",
    "CartValidator",
    "CatalogRepository",
    "TokenService",
    "UserRepository",
]
