"""Recently viewed products.

The history itself lives in the browser; the server only checks that the
product exists and echoes a normalised record back.
"""

from __future__ import annotations

import time
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from ..common.errors import MalformedInput, NotFound
from ..common.logging import log_event
from ..common.utils.validators import as_int
from .catalog_repository import Catalog
from .token_service import Identity


def register_view(
    catalog: Catalog,
    identity: Identity,
    producto_id: Any,
    timestamp: Optional[Any] = None,
    clock: Callable[[], float] = time.time,
) -> Dict[str, Any]:
    if timestamp is None:
        ts = int(clock())
    else:
        ts = as_int(timestamp)
        if ts is None or ts < 0:
            raise MalformedInput("timestamp inválido.")

    product = catalog.get_product(producto_id)
    if product is None:
        raise NotFound("Producto no encontrado.")

    log_event("info", "product.viewed", user_id=identity.user_id, product_id=product.id)
    return {
        "usuario_id": identity.user_id,
        "producto": {
            "id": product.id,
            "nombre": product.nombre,
            "precio": float(product.precio),
        },
        "timestamp": ts,
        "fecha": datetime.fromtimestamp(ts).strftime("%Y-%m-%d %H:%M:%S"),
    }


def describe_storage(identity: Identity) -> Dict[str, Any]:
    return {
        "mensaje": "Los productos vistos se gestionan en LocalStorage del cliente.",
        "usuario_id": identity.user_id,
    }
