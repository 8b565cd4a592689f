import os
from dataclasses import dataclass
from typing import List

from dotenv import load_dotenv

load_dotenv()


def _get_bool(env_name: str, default: bool = False) -> bool:
    val = os.getenv(env_name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "y", "on"}


@dataclass
class Settings:
    # App
    APP_HOST: str = os.getenv("APP_HOST", "0.0.0.0")
    APP_PORT: int = int(os.getenv("PORT", "5000"))
    INSTANCE_ID: str = os.getenv("INSTANCE_ID", "unknown")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS: str = os.getenv("CORS_ORIGINS", "*")

    # Admin panel credentials
    ADMIN_USERNAME: str = os.getenv("ADMIN_USERNAME", "")
    ADMIN_PASSWORD: str = os.getenv("ADMIN_PASSWORD", "")

    # Google service account
    GOOGLE_SHEETS_CLIENT_EMAIL: str = os.getenv("GOOGLE_SHEETS_CLIENT_EMAIL", "")
    GOOGLE_SHEETS_PRIVATE_KEY: str = os.getenv("GOOGLE_SHEETS_PRIVATE_KEY", "")
    GOOGLE_SHEETS_PROJECT_ID: str = os.getenv("GOOGLE_SHEETS_PROJECT_ID", "")

    # Spreadsheets
    PRODUCTS_SHEET_ID: str = os.getenv("PRODUCTS_SHEET_ID", "")
    ORDER_LINKS_SHEET_ID: str = os.getenv("ORDER_LINKS_SHEET_ID", "")
    GOOGLE_SHEETS_ID: str = os.getenv("GOOGLE_SHEETS_ID", "")

    # Constants written on every order row
    PICKUP_CODE: str = os.getenv("PICKUP_CODE", "13556454")
    ORDER_COUNTRY: str = os.getenv("ORDER_COUNTRY", "India")

    # Write locks ("local" or "redis")
    LOCK_BACKEND: str = os.getenv("LOCK_BACKEND", "local")
    LOCK_TIMEOUT: float = float(os.getenv("LOCK_TIMEOUT", "30"))

    # Redis (only used by the redis lock backend)
    REDIS_HOST: str = os.getenv("REDIS_HOST", "redis")
    REDIS_PORT: int = int(os.getenv("REDIS_PORT", "6379"))
    REDIS_DB: int = int(os.getenv("REDIS_DB", "0"))
    REDIS_USERNAME: str = os.getenv("REDIS_USERNAME", "")
    REDIS_PASSWORD: str = os.getenv("REDIS_PASSWORD", "")
    REDIS_SSL: bool = _get_bool("REDIS_SSL", False)

    def has_sheets_credentials(self) -> bool:
        return bool(self.GOOGLE_SHEETS_CLIENT_EMAIL and self.GOOGLE_SHEETS_PRIVATE_KEY)

    def private_key(self) -> str:
        # keys pasted into .env files usually carry escaped newlines
        return self.GOOGLE_SHEETS_PRIVATE_KEY.replace("\\n", "\n")

    def cors_origins(self) -> List[str]:
        origins = [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]
        return origins or ["*"]


settings = Settings()
