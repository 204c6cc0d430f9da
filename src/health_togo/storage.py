"""Persistencia SQLite de las preferencias de la app (nunca de datos de salud)."""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from pathlib import Path

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS app_config (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL
);
"""

DEFAULT_DAYS = 7


@dataclass(frozen=True)
class AppConfig:
    """Configuracion persistida de la app."""

    is_premium: bool = False
    export_dir: str = ""
    default_days: int = DEFAULT_DAYS
    source_dir: str = ""


class SQLiteConfigStore:
    """Repositorio SQLite para la configuracion."""

    def __init__(self, db_path: Path) -> None:
        """Create store and ensure schema exists."""
        self._db_path = db_path
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_schema(self) -> None:
        with self._connect() as conn:
            conn.executescript(SCHEMA_SQL)
            conn.commit()

    def load_config(self) -> AppConfig:
        """Devuelve configuracion guardada o defaults."""
        with self._connect() as conn:
            rows = conn.execute("SELECT key, value FROM app_config").fetchall()
        values = {row["key"]: row["value"] for row in rows}
        defaults = AppConfig()
        return AppConfig(
            is_premium=_parse_bool(values.get("is_premium"), defaults.is_premium),
            export_dir=values.get("export_dir", defaults.export_dir),
            default_days=_parse_days(values.get("default_days")),
            source_dir=values.get("source_dir", defaults.source_dir),
        )

    def save_config(self, config: AppConfig) -> None:
        """Guarda la configuracion en tabla key/value."""
        payload = {
            "is_premium": "1" if config.is_premium else "0",
            "export_dir": config.export_dir,
            "default_days": str(config.default_days),
            "source_dir": config.source_dir,
        }
        with self._connect() as conn:
            conn.executemany(
                """
                INSERT INTO app_config(key, value) VALUES(?, ?)
                ON CONFLICT(key) DO UPDATE SET value=excluded.value
                """,
                payload.items(),
            )
            conn.commit()


def _parse_bool(raw: str | None, default: bool) -> bool:
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes"}


def _parse_days(raw: str | None) -> int:
    try:
        days = int(raw) if raw is not None else DEFAULT_DAYS
    except ValueError:
        return DEFAULT_DAYS
    return days if days > 0 else DEFAULT_DAYS
