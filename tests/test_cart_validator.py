from decimal import Decimal

import pytest

from tienda_online.common.errors import CartRejected, MalformedInput
from tienda_online.services.cart_validator import CartValidator, default_order_number


def _rejected_errors(validator, cart, catalog, identity):
    with pytest.raises(CartRejected) as excinfo:
        validator.validate(cart, catalog, identity)
    return excinfo.value.errors


@pytest.fixture
def validator():
    return CartValidator(clock=lambda: 1_700_000_000)


def test_valid_cart_builds_confirmed_order(validator, catalog, identity):
    cart = [
        {"id": 1, "cantidad": 2, "precio": 899.99},
        {"id": 2, "cantidad": 3, "precio": 19.99},
    ]

    order = validator.validate(cart, catalog, identity)

    assert order.estado == "confirmado"
    assert order.usuario_id == 7
    assert order.usuario_nombre == "ana"
    assert order.total == Decimal("1859.95")
    assert [line.id for line in order.productos] == [1, 2]
    assert order.productos[0].subtotal == Decimal("1799.98")
    assert order.numero_pedido.startswith("PED-1700000000-7-")
    assert len(order.fecha) == len("2023-11-14 22:13:20")


def test_order_uses_server_price_not_client_noise(validator, catalog, identity):
    order = validator.validate([{"id": 2, "cantidad": 1, "precio": 19.990000001}], catalog, identity)
    line = order.productos[0]
    assert line.precio_unitario == Decimal("19.99")
    assert order.to_dict()["total"] == 19.99


def test_tampered_price_is_reported_with_both_prices(validator, catalog, identity):
    errors = _rejected_errors(validator, [{"id": 2, "cantidad": 1, "precio": 0.99}], catalog, identity)
    assert errors == ["Precio manipulado en producto 'Ratón'. Precio real: €19.99, precio enviado: €0.99"]


@pytest.mark.parametrize("claimed", [19.98, 20, 19.995, "19.999", "abc", 0])
def test_any_other_price_is_rejected(validator, catalog, identity, claimed):
    errors = _rejected_errors(validator, [{"id": 2, "cantidad": 1, "precio": claimed}], catalog, identity)
    assert len(errors) == 1
    assert "Ratón" in errors[0]


def test_price_given_as_string_is_accepted(validator, catalog, identity):
    order = validator.validate([{"id": "3", "cantidad": "2", "precio": "45.50"}], catalog, identity)
    assert order.total == Decimal("91.00")


@pytest.mark.parametrize("cantidad", [0, -1, 1.5, "dos", True])
def test_non_positive_or_fractional_quantity_is_rejected(validator, catalog, identity, cantidad):
    errors = _rejected_errors(validator, [{"id": 2, "cantidad": cantidad, "precio": 19.99}], catalog, identity)
    assert errors == ["Cantidad inválida para producto 'Ratón'"]


def test_stock_ceiling(validator, catalog, identity):
    errors = _rejected_errors(validator, [{"id": 3, "cantidad": 3, "precio": 45.5}], catalog, identity)
    assert errors == ["Stock insuficiente para 'Cafetera'. Disponible: 2, solicitado: 3"]


def test_quantity_equal_to_stock_passes(validator, catalog, identity):
    order = validator.validate([{"id": 3, "cantidad": 2, "precio": 45.5}], catalog, identity)
    assert order.total == Decimal("91.00")


def test_unknown_product(validator, catalog, identity):
    errors = _rejected_errors(validator, [{"id": 999, "cantidad": 1, "precio": 1}], catalog, identity)
    assert errors == ["Producto ID 999 no existe"]


@pytest.mark.parametrize(
    "line",
    [{"cantidad": 1, "precio": 1}, {"id": 1, "precio": 1}, {"id": 1, "cantidad": 1}, {"id": 1, "cantidad": 1, "precio": None}, "x", 5],
)
def test_invalid_structure(validator, catalog, identity, line):
    errors = _rejected_errors(validator, [line], catalog, identity)
    assert errors == ["Item con estructura inválida"]


def test_all_lines_checked_and_nothing_partial(validator, catalog, identity):
    cart = [
        {"id": 1, "cantidad": 1, "precio": 899.99},
        {"id": 2, "cantidad": 1, "precio": 1.00},
        {"id": 3, "cantidad": 1, "precio": 45.5},
        {"id": 3, "cantidad": 10, "precio": 45.5},
        {"id": 42, "cantidad": 1, "precio": 1},
    ]
    with pytest.raises(CartRejected) as excinfo:
        validator.validate(cart, catalog, identity)

    errors = excinfo.value.errors
    assert len(errors) == 3
    assert errors[0].startswith("Precio manipulado en producto 'Ratón'")
    assert errors[1].startswith("Stock insuficiente para 'Cafetera'")
    assert errors[2] == "Producto ID 42 no existe"
    assert excinfo.value.data == {"errores": errors}
    assert excinfo.value.status_code == 400


def test_empty_cart_rejected_before_line_checks(validator, catalog, identity):
    with pytest.raises(CartRejected) as excinfo:
        validator.validate([], catalog, identity)
    assert excinfo.value.errors == ["El carrito está vacío."]
    assert excinfo.value.message == "El carrito está vacío."


def test_empty_cart_does_not_need_a_catalog(validator, identity):
    with pytest.raises(CartRejected):
        validator.validate([], None, identity)


@pytest.mark.parametrize("cart", [None, {"id": 1}, "carrito", 3])
def test_non_list_cart_is_malformed(validator, catalog, identity, cart):
    with pytest.raises(MalformedInput):
        validator.validate(cart, catalog, identity)


def test_dangling_category_is_not_an_error(validator, catalog, identity):
    order = validator.validate([{"id": 4, "cantidad": 3, "precio": 10.0}], catalog, identity)
    assert order.total == Decimal("30.00")
    assert catalog.category_for(catalog.get_product(4)) is None


def test_stock_is_not_decremented(validator, catalog, identity):
    cart = [{"id": 3, "cantidad": 2, "precio": 45.5}]
    validator.validate(cart, catalog, identity)
    validator.validate(cart, catalog, identity)
    assert catalog.get_product(3).stock == 2


def test_order_numbers_unique_within_same_second(validator, catalog, identity):
    cart = [{"id": 2, "cantidad": 1, "precio": 19.99}]
    numbers = {validator.validate(cart, catalog, identity).numero_pedido for _ in range(50)}
    assert len(numbers) == 50


def test_default_order_number_format():
    number = default_order_number(12, 1_700_000_000.7)
    prefix, epoch, user, suffix = number.split("-")
    assert (prefix, epoch, user) == ("PED", "1700000000", "12")
    assert len(suffix) == 12


def test_order_to_dict_shape(validator, catalog, identity):
    data = validator.validate([{"id": 2, "cantidad": 2, "precio": 19.99}], catalog, identity).to_dict()
    assert set(data) == {"numero_pedido", "usuario_id", "usuario_nombre", "fecha", "productos", "total", "estado"}
    assert data["productos"] == [
        {"id": 2, "nombre": "Ratón", "cantidad": 2, "precio_unitario": 19.99, "subtotal": 39.98}
    ]
    assert data["total"] == 39.98


@pytest.mark.parametrize("claimed", [1e30, "1e400", -1e25])
def test_huge_price_is_reported_as_manipulated(validator, catalog, identity, claimed):
    cart = [
        {"id": 2, "cantidad": 1, "precio": claimed},
        {"id": 1, "cantidad": 1, "precio": 899.99},
    ]
    errors = _rejected_errors(validator, cart, catalog, identity)
    assert len(errors) == 1
    assert errors[0].startswith("Precio manipulado en producto 'Ratón'")


def test_superscript_digit_id_is_unknown_product(validator, catalog, identity):
    errors = _rejected_errors(validator, [{"id": "²", "cantidad": 1, "precio": 1}], catalog, identity)
    assert errors == ["Producto ID ² no existe"]


@pytest.mark.parametrize("cantidad", ["²", "+-2", "-3"])
def test_odd_quantity_strings_are_invalid(validator, catalog, identity, cantidad):
    errors = _rejected_errors(validator, [{"id": 2, "cantidad": cantidad, "precio": 19.99}], catalog, identity)
    assert errors == ["Cantidad inválida para producto 'Ratón'"]
