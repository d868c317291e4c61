"""JSON API for the shop frontend: login, checkout and viewed products."""

from __future__ import annotations

from typing import Any, Dict, Optional

from flask import Blueprint, current_app, g, jsonify, request

from ..common.errors import InvalidCredentials, MalformedInput, TiendaError
from ..common.logging import log_event
from ..services.auth_gate import require_auth
from ..services.viewed_products import describe_storage, register_view


api_bp = Blueprint("tienda_api", __name__, url_prefix="/api")


def _components() -> Dict[str, Any]:
    return current_app.extensions["tienda_components"]


def envelope(success: bool, data: Any = None, message: str = "", status: int = 200):
    """Single response shape for every outcome of the API."""
    return jsonify({"success": success, "data": data, "message": message}), status


def _json_body() -> Dict[str, Any]:
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise MalformedInput("El cuerpo de la petición debe ser un objeto JSON.")
    return payload


@api_bp.errorhandler(TiendaError)
def handle_tienda_error(exc: TiendaError):
    if exc.status_code >= 500:
        log_event("error", exc.event, path=request.path, message=exc.message)
    return envelope(False, exc.data, exc.message, exc.status_code)


@api_bp.post("/login")
@api_bp.post("/login.php")
def login():
    payload = _json_body()
    if payload.get("username") is None or payload.get("password") is None:
        raise MalformedInput("Faltan credenciales. Proporciona username y password.")
    username = str(payload["username"]).strip()
    password = str(payload["password"]).strip()
    if not username or not password:
        raise MalformedInput("Username y password no pueden estar vacíos.")

    components = _components()
    try:
        user = components["user_repo"].authenticate(username, password)
    except InvalidCredentials:
        log_event("warning", "auth.login_failed", username=username)
        raise
    tienda = components["catalog_repo"].read_payload("Error al cargar el catálogo de la tienda.")
    issued = components["token_service"].issue(user.id, user.username)
    log_event("info", "auth.login_succeeded", user_id=user.id)

    data = {
        "token": issued.token,
        "expiracion": issued.expires_at,
        "usuario": user.to_dict(),
        "tienda": tienda,
    }
    return envelope(True, data, f"Login exitoso. Bienvenido {user.nombre}")


@api_bp.post("/carrito")
@api_bp.post("/carrito.php")
@require_auth
def validate_cart():
    payload = _json_body()
    components = _components()
    validator = components["cart_validator"]
    cart = payload.get("carrito")
    # shape errors win over an unreadable catalog
    validator.check_shape(cart)
    catalog = components["catalog_repo"].load()
    order = validator.validate(cart, catalog, g.identity)
    return envelope(True, order.to_dict(), "¡Pedido confirmado exitosamente!")


@api_bp.route("/productos_vistos", methods=["GET", "POST"])
@api_bp.route("/productos_vistos.php", methods=["GET", "POST"])
@require_auth
def viewed_products():
    if request.method == "GET":
        return envelope(True, describe_storage(g.identity), "Endpoint informativo.")

    payload = _json_body()
    producto_id: Optional[Any] = payload.get("producto_id")
    if producto_id is None:
        raise MalformedInput("Falta producto_id.")
    catalog = _components()["catalog_repo"].load("Error al cargar productos.")
    record = register_view(catalog, g.identity, producto_id, payload.get("timestamp"))
    return envelope(True, record, "Producto registrado como visto.")
