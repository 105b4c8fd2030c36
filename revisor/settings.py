# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2024 Revisor contributors

"""Environment-driven configuration for the review agent."""
from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from typing import Mapping, Optional

from .errors import ConfigError

DEFAULT_LIST_URL = "https://zombie-app.zubale.com/submissions/new"
DEFAULT_CLIENT = "Liverpool Delivery Integracion"
EVIDENCE_MODES = ("off", "advisory", "required")

__all__ = [
    "Credentials",
    "Timeouts",
    "ReviewSettings",
    "DEFAULT_LIST_URL",
    "DEFAULT_CLIENT",
    "EVIDENCE_MODES",
]


def _env_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None:
        return default
    raw = raw.strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None:
        return default
    raw = raw.strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_truthy(env: Mapping[str, str], name: str, default: bool = False) -> bool:
    raw = env.get(name)
    if raw is None:
        return default
    return raw.strip().lower() not in {"0", "false", "no", "off", ""}


def _env_str(env: Mapping[str, str], name: str, default: str) -> str:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip()


@dataclass(frozen=True)
class Credentials:
    username: str
    password: str = field(repr=False)


@dataclass(frozen=True)
class Timeouts:
    """Bounded waits, in milliseconds."""

    task_row_ms: int = 15000
    reviewer_ms: int = 15000
    list_ready_ms: int = 10000
    evidence_container_ms: int = 10000
    race_signal_ms: int = 3000
    settle_ms: int = 2000


@dataclass(frozen=True)
class ReviewSettings:
    list_url: str = DEFAULT_LIST_URL
    client: str = DEFAULT_CLIENT
    outcome_log: str = "revisiones.log"
    ocr_lang: str = "spa"
    evidence_mode: str = "advisory"
    headless: bool = True
    recovery_delay_sec: float = 5.0
    log_level: str = "INFO"
    log_format: str = "text"
    timeouts: Timeouts = field(default_factory=Timeouts)
    credentials: Optional[Credentials] = None

    def __post_init__(self) -> None:
        if self.evidence_mode not in EVIDENCE_MODES:
            raise ConfigError(
                f"evidence_mode must be one of {', '.join(EVIDENCE_MODES)}; got {self.evidence_mode!r}"
            )

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "ReviewSettings":
        env = os.environ if env is None else env
        base = Timeouts()
        timeouts = Timeouts(
            task_row_ms=max(1, _env_int(env, "REVISOR_TASK_ROW_TIMEOUT_MS", base.task_row_ms)),
            reviewer_ms=max(1, _env_int(env, "REVISOR_REVIEWER_TIMEOUT_MS", base.reviewer_ms)),
            list_ready_ms=max(1, _env_int(env, "REVISOR_LIST_READY_TIMEOUT_MS", base.list_ready_ms)),
            evidence_container_ms=max(
                1, _env_int(env, "REVISOR_EVIDENCE_TIMEOUT_MS", base.evidence_container_ms)
            ),
            race_signal_ms=max(1, _env_int(env, "REVISOR_RACE_TIMEOUT_MS", base.race_signal_ms)),
            settle_ms=max(0, _env_int(env, "REVISOR_SETTLE_MS", base.settle_ms)),
        )
        username = (env.get("REVISOR_USERNAME") or "").strip()
        password = env.get("REVISOR_PASSWORD") or ""
        credentials = Credentials(username, password) if username and password else None
        return cls(
            list_url=_env_str(env, "REVISOR_LIST_URL", DEFAULT_LIST_URL),
            client=_env_str(env, "REVISOR_CLIENT", DEFAULT_CLIENT),
            outcome_log=_env_str(env, "REVISOR_OUTCOME_LOG", "revisiones.log"),
            ocr_lang=_env_str(env, "REVISOR_OCR_LANG", "spa"),
            evidence_mode=_env_str(env, "REVISOR_EVIDENCE_MODE", "advisory").lower(),
            headless=_env_truthy(env, "REVISOR_HEADLESS", True),
            recovery_delay_sec=max(0.0, _env_float(env, "REVISOR_RECOVERY_DELAY_SEC", 5.0)),
            log_level=_env_str(env, "REVISOR_LOG_LEVEL", "INFO").upper(),
            log_format=_env_str(env, "REVISOR_LOG_FORMAT", "text").lower(),
            timeouts=timeouts,
            credentials=credentials,
        )

    def require_credentials(self) -> Credentials:
        if self.credentials is None:
            raise ConfigError("REVISOR_USERNAME and REVISOR_PASSWORD must be set to log in")
        return self.credentials

    def with_overrides(self, **changes) -> "ReviewSettings":
        """Return a copy with every non-``None`` keyword applied."""

        return replace(self, **{k: v for k, v in changes.items() if v is not None})
