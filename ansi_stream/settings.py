"""Environment driven settings for the HTTP service and CLI."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

ENV_PREFIX = "ANSI_STREAM_"
PLACEHOLDER_TOKEN = "changeme"

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8787
DEFAULT_MAX_INPUT = 65536
DEFAULT_MAX_SESSIONS = 256
DEFAULT_SESSION_TTL = 600.0
DEFAULT_RATE_LIMIT = 50
DEFAULT_LOG_LEVEL = "INFO"


@dataclass
class Settings:
    token: str = ""
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    max_input: int = DEFAULT_MAX_INPUT
    max_sessions: int = DEFAULT_MAX_SESSIONS
    session_ttl: float = DEFAULT_SESSION_TTL
    rate_limit: int = DEFAULT_RATE_LIMIT
    log_level: str = DEFAULT_LOG_LEVEL

    @property
    def auth_enabled(self) -> bool:
        return bool(self.token)


def load_export_env(path: Path) -> dict[str, str]:
    """Read ``KEY=value`` / ``export KEY=value`` lines from a shell env file."""
    values: dict[str, str] = {}
    if not path.exists():
        return values

    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("export "):
            line = line[len("export ") :]
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip("'").strip('"')
        if key:
            values[key] = value
    return values


def _env_int(env: Mapping[str, str], name: str, fallback: int) -> int:
    raw = env.get(ENV_PREFIX + name, "").strip()
    if not raw:
        return fallback
    try:
        value = int(raw)
    except ValueError:
        return fallback
    return value if value > 0 else fallback


def _env_float(env: Mapping[str, str], name: str, fallback: float) -> float:
    raw = env.get(ENV_PREFIX + name, "").strip()
    if not raw:
        return fallback
    try:
        value = float(raw)
    except ValueError:
        return fallback
    return value if value > 0 else fallback


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build settings from *environ* (default ``os.environ``).

    When ``ANSI_STREAM_ENV_FILE`` names a file, its values are read first and
    real environment variables override them.
    """
    base = dict(os.environ if environ is None else environ)
    env: dict[str, str] = {}
    env_file = base.get(ENV_PREFIX + "ENV_FILE", "").strip()
    if env_file:
        env.update(load_export_env(Path(env_file).expanduser()))
    env.update(base)

    return Settings(
        token=env.get(ENV_PREFIX + "TOKEN", "").strip(),
        host=env.get(ENV_PREFIX + "HOST", "").strip() or DEFAULT_HOST,
        port=_env_int(env, "PORT", DEFAULT_PORT),
        max_input=_env_int(env, "MAX_INPUT", DEFAULT_MAX_INPUT),
        max_sessions=_env_int(env, "MAX_SESSIONS", DEFAULT_MAX_SESSIONS),
        session_ttl=_env_float(env, "SESSION_TTL", DEFAULT_SESSION_TTL),
        rate_limit=_env_int(env, "RATE_LIMIT", DEFAULT_RATE_LIMIT),
        log_level=(env.get(ENV_PREFIX + "LOG_LEVEL", "").strip() or DEFAULT_LOG_LEVEL).upper(),
    )
