"""Project-level configuration and path helpers."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Union

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
DATA_DIR = PROJECT_ROOT / "03_data"
LOGS_DIR = PROJECT_ROOT / "04_logs"
DEFAULT_DB_PATH = DATA_DIR / "storage.db"
DEFAULT_LOG_PATH = LOGS_DIR / "app.log"


PathLike = Union[str, Path]


def resolve_db_path(env_value: PathLike | None = None) -> PathLike:
    """Resolve SQLITE_DB_PATH to an absolute path."""
    if not env_value:
        return DEFAULT_DB_PATH

    if str(env_value) == ":memory:":
        return ":memory:"

    candidate = Path(env_value)
    return candidate if candidate.is_absolute() else PROJECT_ROOT / candidate


@dataclass(frozen=True)
class Settings:
    """Startup configuration, built once and passed down explicitly."""

    db_path: PathLike = DEFAULT_DB_PATH
    log_level: str = "INFO"
    log_file: PathLike = DEFAULT_LOG_PATH
    api_host: str = "localhost"
    api_port: int = 8000
    reply_webhook_url: str | None = None  # None -> replies kept in the Outbox
    send_timeout: float = 10.0

    @property
    def api_url(self) -> str:
        return f"http://{self.api_host}:{self.api_port}"


def _parse(environ: Mapping[str, str], name: str, default, cast):
    raw = environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return cast(raw)
    except ValueError as e:
        raise ValueError(f"Invalid value for {name}: {raw!r}") from e


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """
    Build Settings from environment variables.

    Args:
        environ: Mapping to read from. Defaults to os.environ.

    Returns:
        Settings instance

    Raises:
        ValueError: If a numeric variable cannot be parsed.
    """
    env = os.environ if environ is None else environ

    return Settings(
        db_path=resolve_db_path(env.get("SQLITE_DB_PATH")),
        log_level=env.get("LOG_LEVEL") or "INFO",
        log_file=env.get("LOG_FILE") or DEFAULT_LOG_PATH,
        api_host=env.get("API_HOST") or "localhost",
        api_port=_parse(env, "API_PORT", 8000, int),
        reply_webhook_url=env.get("REPLY_WEBHOOK_URL") or None,
        send_timeout=_parse(env, "SEND_TIMEOUT", 10.0, float),
    )
