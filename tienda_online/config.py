"""Tienda Online backend settings."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv


DEFAULT_SECRET_TOKEN = "tienda_online_token_secreto_2024"
DEFAULT_TOKEN_TTL = 86400  # 24 h


def _parse_ttl(value: str) -> int:
    try:
        ttl = int(str(value).strip())
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid token TTL: {value!r}") from exc
    if ttl <= 0:
        raise ValueError("Invalid token TTL: expected a positive number of seconds")
    return ttl


@dataclass
class TiendaConfig:
    """Settings shared by the token service, the data stores and the router."""

    secret_token: str = DEFAULT_SECRET_TOKEN
    token_ttl: int = DEFAULT_TOKEN_TTL
    data_dir: Path = field(default_factory=lambda: Path(__file__).resolve().parent / "data")
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000

    def __post_init__(self) -> None:
        self.data_dir = Path(self.data_dir)
        self.token_ttl = _parse_ttl(self.token_ttl)
        if not self.secret_token:
            raise ValueError("secret_token must not be empty")

    @property
    def catalog_file(self) -> Path:
        return self.data_dir / "tienda.json"

    @property
    def users_file(self) -> Path:
        return self.data_dir / "usuarios.json"

    @classmethod
    def load(cls, env_file: Path | None = None) -> "TiendaConfig":
        """Build settings from environment variables, reading .env first if present."""

        package_root = Path(__file__).resolve().parent
        dotenv_path = env_file or package_root.parent / ".env"
        if dotenv_path.exists():
            load_dotenv(dotenv_path)

        data_dir = os.environ.get("TIENDA_DATA_DIR")
        return cls(
            secret_token=os.environ.get("TIENDA_SECRET_TOKEN", DEFAULT_SECRET_TOKEN),
            token_ttl=_parse_ttl(os.environ.get("TIENDA_TOKEN_TTL", str(DEFAULT_TOKEN_TTL))),
            data_dir=Path(data_dir).expanduser() if data_dir else package_root / "data",
            log_level=os.environ.get("TIENDA_LOG_LEVEL", "INFO"),
            host=os.environ.get("TIENDA_HOST", "0.0.0.0"),
            port=int(os.environ.get("TIENDA_PORT", "8000")),
        )
