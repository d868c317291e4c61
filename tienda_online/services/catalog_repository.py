"""Read-only access to the shop catalog stored in tienda.json."""

from __future__ import annotations

import json
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..common.errors import CatalogUnavailable
from ..common.utils.validators import as_decimal, as_int


@dataclass
class Category:
    id: int
    nombre: str
    descripcion: str = ""


@dataclass
class Product:
    """A catalog entry; precio is kept as Decimal to avoid float noise."""

    id: Any
    nombre: str
    precio: Decimal
    stock: int
    descripcion: str = ""
    id_categoria: Optional[int] = None
    destacado: bool = False
    especificaciones: Optional[Dict[str, str]] = None


def product_key(value: Any) -> Any:
    """Normalise a product id so that "3" and 3 address the same product."""

    number = as_int(value)
    if number is not None:
        return number
    return str(value)


@dataclass
class Catalog:
    categorias: List[Category]
    productos: List[Product]

    def products_by_id(self) -> Dict[Any, Product]:
        return {product_key(p.id): p for p in self.productos}

    def get_product(self, product_id: Any) -> Optional[Product]:
        return self.products_by_id().get(product_key(product_id))

    def category_for(self, product: Product) -> Optional[Category]:
        """Return the product's category, or None when the id is dangling."""

        for category in self.categorias:
            if category.id == product.id_categoria:
                return category
        return None


SERVER_ERROR_MESSAGE = "Error al cargar productos del servidor."


class CatalogRepository:
    """File-backed catalog; every call reads the latest snapshot of the file."""

    def __init__(self, data_file: Path) -> None:
        self._data_file = Path(data_file)

    def load(self, error_message: str = SERVER_ERROR_MESSAGE) -> Catalog:
        payload = self.read_payload(error_message)
        if not isinstance(payload, dict) or not isinstance(payload.get("productos"), list):
            raise CatalogUnavailable(error_message)
        categorias = [
            self._parse_category(item)
            for item in payload.get("categorias") or []
            if isinstance(item, dict)
        ]
        productos = [self._parse_product(item, error_message) for item in payload["productos"]]
        return Catalog(categorias=categorias, productos=productos)

    def read_payload(self, error_message: str = SERVER_ERROR_MESSAGE) -> Any:
        """Return the file's JSON as stored; only a missing or unparsable file fails."""

        if not self._data_file.exists():
            raise CatalogUnavailable(error_message)
        try:
            payload = json.loads(self._data_file.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise CatalogUnavailable(error_message) from exc
        if payload is None:
            raise CatalogUnavailable(error_message)
        return payload

    @staticmethod
    def _parse_category(item: Dict[str, Any]) -> Category:
        return Category(
            id=as_int(item.get("id")),
            nombre=str(item.get("nombre", "")),
            descripcion=str(item.get("descripcion", "")),
        )

    @staticmethod
    def _parse_product(item: Any, error_message: str) -> Product:
        if not isinstance(item, dict) or "id" not in item:
            raise CatalogUnavailable(error_message)
        precio = as_decimal(item.get("precio"))
        stock = as_int(item.get("stock"))
        if precio is None or precio < 0 or stock is None or stock < 0:
            raise CatalogUnavailable(error_message)
        specs = item.get("especificaciones")
        return Product(
            id=item["id"],
            nombre=str(item.get("nombre", "")),
            precio=precio,
            stock=stock,
            descripcion=str(item.get("descripcion", "")),
            id_categoria=as_int(item.get("id_categoria")),
            destacado=bool(item.get("destacado", False)),
            especificaciones={str(k): str(v) for k, v in specs.items()} if isinstance(specs, dict) else None,
        )
