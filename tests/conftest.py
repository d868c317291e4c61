import json

import pytest

from tienda_online.app import create_app
from tienda_online.config import TiendaConfig
from tienda_online.services.catalog_repository import CatalogRepository
from tienda_online.services.token_service import Identity, TokenService


SECRET = "secreto-de-pruebas"

CATALOG = {
    "categorias": [
        {"id": 1, "nombre": "Electrónica", "descripcion": "Aparatos"},
        {"id": 2, "nombre": "Hogar", "descripcion": "Casa"},
    ],
    "productos": [
        {"id": 1, "nombre": "Portátil", "descripcion": "", "precio": 899.99, "stock": 5, "id_categoria": 1, "destacado": True},
        {"id": 2, "nombre": "Ratón", "descripcion": "", "precio": 19.99, "stock": 40, "id_categoria": 1, "destacado": False},
        {"id": 3, "nombre": "Cafetera", "descripcion": "", "precio": 45.5, "stock": 2, "id_categoria": 2, "destacado": False},
        {"id": 4, "nombre": "Lámpara", "descripcion": "", "precio": 10, "stock": 3, "id_categoria": 99, "destacado": False},
    ],
}

USERS = {
    "usuarios": [
        {"id": 7, "username": "ana", "password": "clave123", "email": "ana@tienda.com", "nombre": "Ana"},
    ]
}


@pytest.fixture
def data_dir(tmp_path):
    (tmp_path / "tienda.json").write_text(json.dumps(CATALOG, ensure_ascii=False), encoding="utf-8")
    (tmp_path / "usuarios.json").write_text(json.dumps(USERS, ensure_ascii=False), encoding="utf-8")
    return tmp_path


@pytest.fixture
def config(data_dir):
    return TiendaConfig(secret_token=SECRET, token_ttl=3600, data_dir=data_dir)


@pytest.fixture
def app(config):
    app = create_app(config)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def catalog(data_dir):
    return CatalogRepository(data_dir / "tienda.json").load()


@pytest.fixture
def identity():
    return Identity(user_id=7, username="ana")


@pytest.fixture
def auth_header():
    token = TokenService(SECRET, 3600).issue(7, "ana").token
    return {"Authorization": f"Bearer {token}"}
