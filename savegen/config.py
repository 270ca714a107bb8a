"""Database settings read from the environment and an optional .env file."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path

from dotenv import load_dotenv
from sqlalchemy.engine import URL

log = logging.getLogger(__name__)

_ENV_FILE = ".env"
_TIME_ZONE = "Asia/Jakarta"
_ENV_PREFIX = "DB_"


@dataclass(frozen=True)
class DBConfig:
    """Connection settings for the PostgreSQL database."""

    host: str = ""
    user: str = ""
    password: str = ""
    dbname: str = ""
    port: str = ""

    def dsn(self) -> str:
        """Return the settings as a libpq keyword/value connection string."""
        return (
            f"host={self.host} user={self.user} password={self.password} "
            f"dbname={self.dbname} port={self.port} "
            f"sslmode=disable TimeZone={_TIME_ZONE}"
        )

    def url(self) -> str:
        """Return the settings as a SQLAlchemy database URL."""
        url = URL.create(
            "postgresql",
            username=self.user or None,
            password=self.password or None,
            host=self.host or None,
            port=int(self.port) if self.port else None,
            database=self.dbname or None,
            query={"sslmode": "disable", "options": f"-c TimeZone={_TIME_ZONE}"},
        )
        return url.render_as_string(hide_password=False)


def _getenv(key: str, default: str = "") -> str:
    return os.environ.get(key) or default


def _env_key(field_name: str) -> str:
    """Map a settings field to its variable: ``dbname`` -> ``DB_NAME``, ``host`` -> ``DB_HOST``."""
    return _ENV_PREFIX + field_name.removeprefix("db").upper()


def load_db_config() -> DBConfig:
    """Load ``.env`` from the working directory if present and read the DB_* variables."""
    env_file = Path(_ENV_FILE)
    if env_file.is_file():
        load_dotenv(env_file)
    else:
        log.warning("Warning: Error loading .env file: open %s: no such file", _ENV_FILE)

    values = {field.name: _getenv(_env_key(field.name)) for field in fields(DBConfig)}
    return DBConfig(**values)