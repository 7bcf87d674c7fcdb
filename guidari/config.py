from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()

logger = logging.getLogger(__name__)

# Claves del almacenamiento local (compatibles con las del cliente web)
REMOTE_URL_KEY = "GUIDARI_SB_URL"
REMOTE_KEY_KEY = "GUIDARI_SB_KEY"
SETUP_USED_KEY = "GUIDARI_SETUP_USED"


class Settings(BaseModel):
    remote_url: str = os.getenv("GUIDARI_SB_URL", "https://zugbripyvaidkpesrvaa.supabase.co")
    remote_key: str = os.getenv("GUIDARI_SB_KEY", "")
    remote_timeout_seconds: float = float(os.getenv("REMOTE_TIMEOUT_SECONDS", "30"))
    local_config_path: str = os.getenv(
        "GUIDARI_LOCAL_CONFIG", str(Path.home() / ".guidari" / "config.json")
    )
    jwt_secret: str = os.getenv("JWT_SECRET", "change_me_please")
    jwt_alg: str = os.getenv("JWT_ALG", "HS256")
    jwt_expire_minutes: int = int(os.getenv("JWT_EXPIRE_MINUTES", "480"))
    bcrypt_rounds: int = int(os.getenv("BCRYPT_ROUNDS", "12"))
    refresh_interval_minutes: float = float(os.getenv("REFRESH_INTERVAL_MINUTES", "30"))
    admin_email: str = os.getenv("ADMIN_EMAIL", "admin@guidari.local")
    setup_token: Optional[str] = os.getenv("SETUP_TOKEN") or None
    commission_basis: str = os.getenv("COMMISSION_BASIS", "paid_invoices")
    cors_origins: str = os.getenv("CORS_ORIGINS", "*")
    login_attempts_per_minute: int = int(os.getenv("LOGIN_ATTEMPTS_PER_MINUTE", "5"))


settings = Settings()


class LocalConfigStore:
    """
    Almacenamiento clave-valor local (archivo JSON) para la configuración
    que el administrador puede cambiar en caliente: credenciales del
    almacén remoto y estado del token de configuración inicial.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def _read(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Local config unreadable, using defaults: %s", exc)
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")

    def get(self, key: str, default: Any = None) -> Any:
        value = self._read().get(key)
        return default if value in (None, "") else value

    def set_many(self, values: Dict[str, Any]) -> None:
        data = self._read()
        data.update(values)
        self._write(data)

    def remote_credentials(self, defaults: Settings) -> tuple[str, str]:
        """Devuelve (url, clave) guardados o, si faltan, los valores compilados."""
        return (
            self.get(REMOTE_URL_KEY, defaults.remote_url),
            self.get(REMOTE_KEY_KEY, defaults.remote_key),
        )

    def save_remote_credentials(self, url: str, key: str) -> None:
        self.set_many({REMOTE_URL_KEY: url.strip(), REMOTE_KEY_KEY: key.strip()})
