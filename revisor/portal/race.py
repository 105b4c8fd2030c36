# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2024 Revisor contributors

"""Detect approvals that another reviewer completed first.

After the approve click the portal may show one of several messages meaning
the task was already approved elsewhere. Signals are checked in order, each
with its own short timeout; the first visible one wins.
"""
from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

from ..errors import ElementTimeout
from .interfaces import Browser

logger = logging.getLogger(__name__)


class RaceSignal(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    locator: str
    detail: str
    timeout_ms: int = Field(3000, ge=1)


QUEST_FAILED = RaceSignal(
    name="quest_failed",
    locator='text="Quest Completion Failed"',
    detail="Ya aprobada por otro usuario (Quest Completion Failed)",
)
# The portal message reads "Se encontraron 1 tareas con taskid: ... aprobadas
# previamente - luego el correo de la persona que la aprobo". The pattern
# accepts any task count and stops before the approver email.
APPROVED_PREVIOUSLY = RaceSignal(
    name="approved_previously",
    locator=r"text=/Se encontraron \d+ tareas con taskid:.*aprobadas previamente/",
    detail="Ya aprobada previamente por otro usuario",
)
DEFAULT_SIGNALS = (QUEST_FAILED, APPROVED_PREVIOUSLY)


class RaceDetector:
    def __init__(self, signals: Sequence[RaceSignal] = DEFAULT_SIGNALS, timeout_ms: Optional[int] = None) -> None:
        if timeout_ms is not None:
            signals = [s.model_copy(update={"timeout_ms": timeout_ms}) for s in signals]
        self.signals: List[RaceSignal] = list(signals)

    def detect(self, browser: Browser) -> Optional[RaceSignal]:
        """Return the first signal that becomes visible, or ``None``."""

        for signal in self.signals:
            try:
                browser.wait_visible(signal.locator, signal.timeout_ms)
            except ElementTimeout:
                continue
            logger.info("race signal seen: %s", signal.name)
            return signal
        return None
