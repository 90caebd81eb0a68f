"""Environment-driven settings."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv
from sqlalchemy.engine import URL


@dataclass(frozen=True)
class Settings:
    database_url: str
    port: int = 3002
    connect_timeout: int = 5
    use_fallback: bool = False


def _flag(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in {"1", "true", "yes", "on"}


def _database_url(env: Mapping[str, str]) -> str:
    explicit = env.get("DATABASE_URL")
    if explicit:
        return explicit

    url = URL.create(
        "postgresql+psycopg2",
        username=env.get("DB_USER", "postgres"),
        password=env.get("DB_PASSWORD") or None,
        host=env.get("DB_HOST", "localhost"),
        port=int(env.get("DB_PORT", "5432")),
        database=env.get("DB_NAME", "devguard"),
    )
    return url.render_as_string(hide_password=False)


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """Build settings from ``env`` or, by default, the process environment plus ``.env``."""

    if env is None:
        load_dotenv()
        env = os.environ

    return Settings(
        database_url=_database_url(env),
        port=int(env.get("PORT", "3002")),
        connect_timeout=int(env.get("DB_CONNECT_TIMEOUT", "5")),
        use_fallback=_flag(env.get("DEVGUARD_USE_FALLBACK")),
    )
