"""Runtime settings read from environment variables.

| Variable                         | Default                 |
|----------------------------------|-------------------------|
| STAKEMATE_CORS_ORIGINS           | http://localhost:3000   |
| STAKEMATE_MAX_SESSIONS           | 1000 (0 = unbounded)    |
| STAKEMATE_EVICT_WHEN_FULL        | true                    |
| STAKEMATE_MAX_MESSAGE_LENGTH     | 2000                    |
| STAKEMATE_RANDOM_SEED            | unset (unseeded)        |
| STAKEMATE_NAME_PROBABILITY       | 0.3                     |
| LOG_LEVEL                        | INFO                    |
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field

from stakemate.shared.errors import ConfigurationError

_TRUE = frozenset({"1", "true", "yes", "on"})
_FALSE = frozenset({"0", "false", "no", "off"})


def _int(environ: Mapping[str, str], key: str, default: int, *, minimum: int = 0) -> int:
    raw = environ.get(key, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigurationError(key, f"{key} must be an integer, got {raw!r}") from None
    if value < minimum:
        raise ConfigurationError(key, f"{key} must be >= {minimum}, got {value}")
    return value


def _bool(environ: Mapping[str, str], key: str, default: bool) -> bool:
    raw = environ.get(key, "").strip().lower()
    if not raw:
        return default
    if raw in _TRUE:
        return True
    if raw in _FALSE:
        return False
    raise ConfigurationError(key, f"{key} must be a boolean, got {raw!r}")


@dataclass(frozen=True)
class Settings:
    """Immutable application settings."""

    cors_origins: list[str] = field(default_factory=lambda: ["http://localhost:3000"])
    max_sessions: int = 1000
    evict_when_full: bool = True
    max_message_length: int = 2000
    random_seed: int | None = None
    name_probability: float = 0.3
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Build settings from ``environ`` (defaults to ``os.environ``).

        Raises:
            ConfigurationError: on any malformed value.
        """
        env = os.environ if environ is None else environ

        cors_raw = env.get("STAKEMATE_CORS_ORIGINS", "http://localhost:3000")
        cors_origins = [o.strip() for o in cors_raw.split(",") if o.strip()]

        seed_raw = env.get("STAKEMATE_RANDOM_SEED", "").strip()
        random_seed: int | None = None
        if seed_raw:
            try:
                random_seed = int(seed_raw)
            except ValueError:
                raise ConfigurationError(
                    "STAKEMATE_RANDOM_SEED",
                    f"STAKEMATE_RANDOM_SEED must be an integer, got {seed_raw!r}",
                ) from None

        prob_raw = env.get("STAKEMATE_NAME_PROBABILITY", "").strip()
        name_probability = 0.3
        if prob_raw:
            try:
                name_probability = float(prob_raw)
            except ValueError:
                raise ConfigurationError(
                    "STAKEMATE_NAME_PROBABILITY",
                    f"STAKEMATE_NAME_PROBABILITY must be a number, got {prob_raw!r}",
                ) from None
            if not 0.0 <= name_probability <= 1.0:
                raise ConfigurationError(
                    "STAKEMATE_NAME_PROBABILITY",
                    f"STAKEMATE_NAME_PROBABILITY must be within [0, 1], got {name_probability}",
                )

        return cls(
            cors_origins=cors_origins,
            max_sessions=_int(env, "STAKEMATE_MAX_SESSIONS", 1000),
            evict_when_full=_bool(env, "STAKEMATE_EVICT_WHEN_FULL", True),
            max_message_length=_int(env, "STAKEMATE_MAX_MESSAGE_LENGTH", 2000, minimum=1),
            random_seed=random_seed,
            name_probability=name_probability,
            log_level=env.get("LOG_LEVEL", "INFO").strip().upper() or "INFO",
        )
