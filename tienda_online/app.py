"""Tienda Online backend Flask application."""

from __future__ import annotations

from typing import Optional

from flask import Flask, request
from werkzeug.exceptions import HTTPException, MethodNotAllowed as HTTPMethodNotAllowed, NotFound as HTTPNotFound

from .common.errors import MethodNotAllowed, NotFound, TiendaError
from .common.logging import configure_logging, log_event
from .config import TiendaConfig
from .routes import api
from .services import AuthGate, CartValidator, CatalogRepository, TokenService, UserRepository


def _from_http_error(exc: HTTPException) -> TiendaError:
    """Translate werkzeug routing errors into the shop's error kinds."""
    if isinstance(exc, HTTPMethodNotAllowed):
        allowed = sorted(set(exc.valid_methods or []) - {"HEAD", "OPTIONS"})
        if allowed:
            return MethodNotAllowed(f"Método no permitido. Usa {', '.join(allowed)}.")
        return MethodNotAllowed("Método no permitido.")
    if isinstance(exc, HTTPNotFound):
        return NotFound("Recurso no encontrado.")
    error = TiendaError(exc.description or exc.name)
    error.status_code = exc.code or 500
    return error


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(HTTPException)
    def handle_http_error(exc: HTTPException):
        error = _from_http_error(exc)
        return api.envelope(False, error.data, error.message, error.status_code)

    @app.errorhandler(Exception)
    def handle_unexpected(exc: Exception):
        log_event("error", "api.unhandled", path=request.path, error=repr(exc))
        return api.envelope(False, None, "Error interno del servidor.", 500)


def create_app(config: Optional[TiendaConfig] = None) -> Flask:
    config = config or TiendaConfig.load()
    configure_logging(config.log_level)

    app = Flask(__name__)
    app.config["TIENDA_CONFIG"] = config
    app.json.ensure_ascii = False
    app.json.sort_keys = False

    token_service = TokenService(config.secret_token, config.token_ttl)
    components = {
        "catalog_repo": CatalogRepository(config.catalog_file),
        "user_repo": UserRepository(config.users_file),
        "token_service": token_service,
        "auth_gate": AuthGate(token_service),
        "cart_validator": CartValidator(),
    }
    app.extensions["tienda_components"] = components

    app.register_blueprint(api.api_bp)
    _register_error_handlers(app)

    return app


def main() -> None:
    config = TiendaConfig.load()
    app = create_app(config)
    app.run(host=config.host, port=config.port, debug=False)


if __name__ == "__main__":
    main()
