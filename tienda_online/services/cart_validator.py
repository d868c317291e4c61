"""Server-side checkout: re-price a client cart against the catalog."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Callable, Dict, List, Optional
from uuid import uuid4

from ..common.errors import CartRejected, MalformedInput
from ..common.logging import log_event
from ..common.utils.validators import as_decimal, as_positive_int
from .catalog_repository import Catalog, product_key
from .token_service import Identity


CENT = Decimal("0.01")
ORDER_STATUS_CONFIRMED = "confirmado"

INVALID_FORMAT_MESSAGE = "Formato de carrito inválido."
EMPTY_CART_MESSAGE = "El carrito está vacío."
INVALID_LINE_MESSAGE = "Item con estructura inválida"


def round_money(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def same_price(sent: Optional[Decimal], real: Decimal) -> bool:
    """Compare two prices to the cent; values too large to round never match."""
    if sent is None:
        return False
    try:
        return round_money(sent) == round_money(real)
    except InvalidOperation:
        return False


@dataclass
class ValidatedLine:
    id: Any
    nombre: str
    cantidad: int
    precio_unitario: Decimal
    subtotal: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "nombre": self.nombre,
            "cantidad": self.cantidad,
            "precio_unitario": float(self.precio_unitario),
            "subtotal": float(self.subtotal),
        }


@dataclass
class Order:
    numero_pedido: str
    usuario_id: Any
    usuario_nombre: str
    fecha: str
    productos: List[ValidatedLine] = field(default_factory=list)
    total: Decimal = Decimal("0")
    estado: str = ORDER_STATUS_CONFIRMED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "numero_pedido": self.numero_pedido,
            "usuario_id": self.usuario_id,
            "usuario_nombre": self.usuario_nombre,
            "fecha": self.fecha,
            "productos": [line.to_dict() for line in self.productos],
            "total": float(self.total),
            "estado": self.estado,
        }


def default_order_number(user_id: Any, now: float) -> str:
    # the random suffix keeps two orders of one user in the same second apart
    return f"PED-{int(now)}-{user_id}-{uuid4().hex[:12]}"


class CartValidator:
    """Recompute a cart from catalog data and turn it into a confirmed order.

    Every line is checked even when an earlier one fails, so the caller gets
    the full list of problems. A single bad line rejects the whole cart.
    Stock is only compared, never reserved or decremented.
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.time,
        order_number_factory: Callable[[Any, float], str] = default_order_number,
    ) -> None:
        self._clock = clock
        self._order_number = order_number_factory

    @staticmethod
    def check_shape(cart: Any) -> None:
        """Reject a cart that is not a list, or an empty one, before any line is read."""
        if not isinstance(cart, list):
            raise MalformedInput(INVALID_FORMAT_MESSAGE)
        if not cart:
            raise CartRejected([EMPTY_CART_MESSAGE], message=EMPTY_CART_MESSAGE)

    def validate(self, cart: Any, catalog: Catalog, identity: Identity) -> Order:
        self.check_shape(cart)

        products = catalog.products_by_id()
        errors: List[str] = []
        lines: List[ValidatedLine] = []
        total = Decimal("0")

        for item in cart:
            line = self._check_line(item, products, errors)
            if line is None:
                continue
            total += line.subtotal
            lines.append(line)

        if errors:
            log_event("info", "cart.rejected", user_id=identity.user_id, errors=len(errors), lines=len(cart))
            raise CartRejected(errors)

        now = self._clock()
        order = Order(
            numero_pedido=self._order_number(identity.user_id, now),
            usuario_id=identity.user_id,
            usuario_nombre=identity.username,
            fecha=datetime.fromtimestamp(now).strftime("%Y-%m-%d %H:%M:%S"),
            productos=lines,
            total=round_money(total),
        )
        log_event(
            "info",
            "order.confirmed",
            numero_pedido=order.numero_pedido,
            user_id=identity.user_id,
            items=len(lines),
            total=float(order.total),
        )
        return order

    @staticmethod
    def _check_line(item: Any, products: Dict[Any, Any], errors: List[str]) -> Optional[ValidatedLine]:
        if not isinstance(item, dict) or any(item.get(k) is None for k in ("id", "cantidad", "precio")):
            errors.append(INVALID_LINE_MESSAGE)
            return None

        product_id = item["id"]
        product = products.get(product_key(product_id))
        if product is None:
            errors.append(f"Producto ID {product_id} no existe")
            return None

        sent_price = as_decimal(item["precio"])
        if not same_price(sent_price, product.precio):
            errors.append(
                f"Precio manipulado en producto '{product.nombre}'. "
                f"Precio real: €{product.precio}, precio enviado: €{item['precio']}"
            )
            return None

        quantity = as_positive_int(item["cantidad"])
        if quantity is None:
            errors.append(f"Cantidad inválida para producto '{product.nombre}'")
            return None

        if quantity > product.stock:
            errors.append(
                f"Stock insuficiente para '{product.nombre}'. "
                f"Disponible: {product.stock}, solicitado: {quantity}"
            )
            return None

        return ValidatedLine(
            id=product.id,
            nombre=product.nombre,
            cantidad=quantity,
            precio_unitario=product.precio,
            subtotal=product.precio * quantity,
        )
