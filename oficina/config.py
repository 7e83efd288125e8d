"""
Configuration de l'application.

``Settings`` lit les variables d'environnement ``OFICINA_*`` avec des valeurs
par défaut. L'instance est passée explicitement aux constructeurs (voir
``oficina.bootstrap``) ; il n'y a pas de registre global.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

DEFAULT_DATA_DIR = Path(__file__).resolve().parents[1] / "data"


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw in (None, ""):
        return default
    return float(raw)


@dataclass
class Settings:
    data_dir: Path = DEFAULT_DATA_DIR
    log_level: str = "INFO"
    log_file: Optional[str] = None

    backup_enabled: bool = True
    backup_keep: int = 5

    # service d'identité distant ; vide -> annuaire JSON local
    identity_base_url: str = ""
    http_connect_timeout: float = 5.0
    http_read_timeout: float = 5.0

    discount_percent: float = 0.0

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            data_dir=Path(os.getenv("OFICINA_DATA_DIR") or DEFAULT_DATA_DIR),
            log_level=os.getenv("OFICINA_LOG_LEVEL", "INFO"),
            log_file=os.getenv("OFICINA_LOG_FILE") or None,
            backup_enabled=_env_bool("OFICINA_BACKUP_ENABLED", True),
            backup_keep=int(os.getenv("OFICINA_BACKUP_KEEP", "5")),
            identity_base_url=os.getenv("OFICINA_IDENTITY_URL", "").rstrip("/"),
            http_connect_timeout=_env_float("OFICINA_HTTP_CONNECT_TIMEOUT", 5.0),
            http_read_timeout=_env_float("OFICINA_HTTP_READ_TIMEOUT", 5.0),
            discount_percent=_env_float("OFICINA_DISCOUNT_PERCENT", 0.0),
        )

    @property
    def http_timeout(self) -> tuple[float, float]:
        return (self.http_connect_timeout, self.http_read_timeout)
