"""Credential lookup backed by usuarios.json."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List

from ..common.errors import CredentialsUnavailable, InvalidCredentials


@dataclass
class User:
    id: Any
    username: str
    email: str
    nombre: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "nombre": self.nombre,
        }


class UserRepository:
    def __init__(self, data_file: Path) -> None:
        self._data_file = Path(data_file)

    def authenticate(self, username: str, password: str) -> User:
        """Return the user matching both fields; passwords never leave this method."""

        for entry in self._load():
            if not isinstance(entry, dict):
                continue
            if entry.get("username") == username and entry.get("password") == password:
                return User(
                    id=entry.get("id"),
                    username=str(entry.get("username", "")),
                    email=str(entry.get("email", "")),
                    nombre=str(entry.get("nombre", "")),
                )
        raise InvalidCredentials("Credenciales incorrectas.")

    def _load(self) -> List[Any]:
        if not self._data_file.exists():
            raise CredentialsUnavailable("Error al cargar usuarios del sistema.")
        try:
            payload = json.loads(self._data_file.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise CredentialsUnavailable("Error al cargar usuarios del sistema.") from exc
        if not isinstance(payload, dict) or not isinstance(payload.get("usuarios"), list):
            raise CredentialsUnavailable("Error al cargar usuarios del sistema.")
        return payload["usuarios"]
