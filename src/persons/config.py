"""Runtime settings read from ``PERSONS_*`` environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Mapping

from persons.vocabulary import Vocabulary, get_vocabulary

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 3000
DEFAULT_POOL_SIZE = 5
DEFAULT_POOL_TIMEOUT = 30.0


def _parse_csv_list(raw: str | None) -> list[str]:
    if not raw:
        return []
    return [part.strip() for part in raw.split(",") if part.strip()]


def _is_truthy(value: str | None) -> bool:
    if value is None:
        return False
    return value.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(env: Mapping[str, str], key: str, default: int) -> int:
    raw = (env.get(key) or "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"{key} must be an integer, got {raw!r}") from exc
    if value < 1:
        raise ValueError(f"{key} must be positive, got {value}")
    return value


def _env_float(env: Mapping[str, str], key: str, default: float) -> float:
    raw = (env.get(key) or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{key} must be a number, got {raw!r}") from exc


@dataclass(frozen=True)
class Settings:
    vocabulary: Vocabulary
    db_path: str
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    pool_size: int = DEFAULT_POOL_SIZE
    pool_timeout: float = DEFAULT_POOL_TIMEOUT
    cors_origins: tuple[str, ...] = ("*",)
    sql_trace: bool = False

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None, **overrides) -> "Settings":
        """Build settings from ``env`` (default ``os.environ``).

        Keyword ``overrides`` win over the environment; ``None`` values are
        ignored so CLI flags can be passed through unconditionally.
        """

        env = os.environ if env is None else env
        overrides = {k: v for k, v in overrides.items() if v is not None}

        vocabulary = get_vocabulary(
            overrides.pop("vocabulary", None) or env.get("PERSONS_VOCABULARY")
        )
        db_path = (env.get("PERSONS_DB_PATH") or "").strip() or vocabulary.default_db_file
        settings = cls(
            vocabulary=vocabulary,
            db_path=db_path,
            host=(env.get("PERSONS_HOST") or "").strip() or DEFAULT_HOST,
            port=_env_int(env, "PERSONS_PORT", DEFAULT_PORT),
            pool_size=_env_int(env, "PERSONS_POOL_SIZE", DEFAULT_POOL_SIZE),
            pool_timeout=_env_float(env, "PERSONS_POOL_TIMEOUT", DEFAULT_POOL_TIMEOUT),
            cors_origins=tuple(_parse_csv_list(env.get("PERSONS_CORS_ORIGINS")) or ["*"]),
            sql_trace=_is_truthy(env.get("PERSONS_SQL_TRACE")),
        )
        return replace(settings, **overrides) if overrides else settings
