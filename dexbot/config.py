"""Bot configuration utilities."""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from sqlalchemy.engine import URL

from .constants import DEFAULT_PAGE_SIZE, SESSION_TIMEOUT, TOTAL_UNIVERSE_SIZE

PROJECT_BASE = Path(__file__).resolve().parent.parent
DEFAULT_CONFIG_PATH = PROJECT_BASE / "config" / "bot.toml"
DEFAULT_SAVE_DIRECTORY = PROJECT_BASE.parent / "world" / "data" / "pokemon"
MYSQL_DRIVER = "mysql+aiomysql"


class ConfigError(RuntimeError):
    """Raised when the bot configuration is missing or malformed."""


def env(name: str, default: str | None = None) -> str:
    value = os.getenv(name, default)
    if value is None or not value.strip():
        raise ConfigError(f"Missing required environment variable: {name}")
    return value


def _as_int(name: str, value: Any, *, minimum: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{name} must be an integer, got {value!r}") from exc
    if number < minimum:
        raise ConfigError(f"{name} must be at least {minimum}, got {number}")
    return number


def _as_float(name: str, value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{name} must be a number, got {value!r}") from exc
    if number <= 0:
        raise ConfigError(f"{name} must be positive, got {number}")
    return number


def _table(payload: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    section = payload.get(name, {})
    if not isinstance(section, Mapping):
        raise ConfigError(f"[{name}] must be a table")
    return section


def mysql_url(section: Mapping[str, Any]) -> str:
    """Build an async MySQL URL from a ``[mysql]`` table."""

    missing = [key for key in ("host", "user", "database") if not section.get(key)]
    if missing:
        raise ConfigError(f"[mysql] is missing: {', '.join(missing)}")
    port = section.get("port")
    url = URL.create(
        MYSQL_DRIVER,
        username=str(section["user"]),
        password=str(section.get("password") or "") or None,
        host=str(section["host"]),
        port=_as_int("mysql.port", port, minimum=1) if port is not None else None,
        database=str(section["database"]),
    )
    return url.render_as_string(hide_password=False)


@dataclass(slots=True)
class BotConfig:
    token: str
    database_url: str
    save_directory: Path = DEFAULT_SAVE_DIRECTORY
    page_size: int = DEFAULT_PAGE_SIZE
    session_timeout: float = SESSION_TIMEOUT
    universe_size: int = TOTAL_UNIVERSE_SIZE
    command_prefix: str = "!"

    @classmethod
    def from_env(cls) -> "BotConfig":
        token = env("DISCORD_TOKEN")
        database_url = env("DEX_DATABASE_URL")
        save_directory = Path(
            os.getenv("DEX_SAVE_DIRECTORY", str(DEFAULT_SAVE_DIRECTORY))
        ).expanduser()
        page_size = _as_int(
            "DEX_PAGE_SIZE", os.getenv("DEX_PAGE_SIZE", str(DEFAULT_PAGE_SIZE)), minimum=1
        )
        session_timeout = _as_float(
            "DEX_SESSION_TIMEOUT", os.getenv("DEX_SESSION_TIMEOUT", str(SESSION_TIMEOUT))
        )
        universe_size = _as_int(
            "DEX_UNIVERSE_SIZE",
            os.getenv("DEX_UNIVERSE_SIZE", str(TOTAL_UNIVERSE_SIZE)),
            minimum=0,
        )
        return cls(
            token=token,
            database_url=database_url,
            save_directory=save_directory,
            page_size=page_size,
            session_timeout=session_timeout,
            universe_size=universe_size,
        )

    @classmethod
    def from_file(cls, path: Path) -> "BotConfig":
        """Load the configuration from a TOML file.

        The database is given either as ``[database] url`` or through the
        ``[mysql]`` connection table.  Relative save directories are resolved
        against the file's parent directory.
        """

        try:
            with path.open("rb") as handle:
                payload = tomllib.load(handle)
        except FileNotFoundError as exc:
            raise ConfigError(f"Missing configuration file at {path}") from exc
        except (tomllib.TOMLDecodeError, OSError) as exc:
            raise ConfigError(f"Unable to read configuration {path}: {exc}") from exc

        discord_section = _table(payload, "discord")
        token = str(discord_section.get("token") or "").strip()
        if not token:
            raise ConfigError("[discord] token is required")

        database_section = _table(payload, "database")
        database_url = str(database_section.get("url") or "").strip()
        if not database_url:
            mysql_section = _table(payload, "mysql")
            if not mysql_section:
                raise ConfigError("Either [database] url or [mysql] must be configured")
            database_url = mysql_url(mysql_section)

        options = _table(payload, "pokedex")
        save_directory = Path(
            str(options.get("save_directory", DEFAULT_SAVE_DIRECTORY))
        ).expanduser()
        if not save_directory.is_absolute():
            save_directory = (path.parent / save_directory).resolve()

        return cls(
            token=token,
            database_url=database_url,
            save_directory=save_directory,
            page_size=_as_int(
                "pokedex.page_size", options.get("page_size", DEFAULT_PAGE_SIZE), minimum=1
            ),
            session_timeout=_as_float(
                "pokedex.session_timeout", options.get("session_timeout", SESSION_TIMEOUT)
            ),
            universe_size=_as_int(
                "pokedex.universe_size",
                options.get("universe_size", TOTAL_UNIVERSE_SIZE),
                minimum=0,
            ),
            command_prefix=str(options.get("command_prefix", "!")) or "!",
        )

    @classmethod
    def load(cls) -> "BotConfig":
        """Prefer ``DEX_CONFIG_FILE`` or ``config/bot.toml``, else the environment."""

        override = os.getenv("DEX_CONFIG_FILE")
        if override:
            return cls.from_file(Path(override).expanduser())
        if DEFAULT_CONFIG_PATH.is_file():
            return cls.from_file(DEFAULT_CONFIG_PATH)
        return cls.from_env()


__all__ = ["BotConfig", "ConfigError", "mysql_url"]
