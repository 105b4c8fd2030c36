# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2024 Revisor contributors

"""Logging setup for the CLI entry points."""
from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

ROOT_LOGGER = "revisor"

__all__ = ["ROOT_LOGGER", "configure_logging", "log_event"]


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).replace(microsecond=0).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
        }
        event = getattr(record, "event", None)
        if event:
            payload["event"] = event
            payload.update(getattr(record, "payload", {}) or {})
        else:
            payload["message"] = record.getMessage()
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def configure_logging(level: str = "INFO", fmt: str = "text", stream=None) -> logging.Logger:
    """Attach a single stdout handler to the ``revisor`` logger.

    Calling this more than once replaces the formatter and level instead of
    stacking handlers.
    """

    logger = logging.getLogger(ROOT_LOGGER)
    if not logger.handlers:
        logger.addHandler(logging.StreamHandler(stream or sys.stdout))
    handler = logger.handlers[0]
    if fmt.strip().lower() == "json":
        handler.setFormatter(_JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    logger.setLevel(getattr(logging, level.strip().upper(), logging.INFO))
    logger.propagate = False
    return logger


def log_event(
    logger: logging.Logger,
    event: str,
    payload: Optional[Dict[str, Any]] = None,
    *,
    level: str = "info",
) -> None:
    """Emit ``event`` with a structured payload.

    The JSON formatter flattens the payload into the record; the text formatter
    renders it inline.
    """

    payload = dict(payload or {})
    fn = getattr(logger, level, logger.info)
    fn("%s %s", event, payload, extra={"event": event, "payload": payload})
