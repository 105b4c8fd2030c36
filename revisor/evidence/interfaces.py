# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2024 Revisor contributors

"""Interfaces for evidence pipeline components."""
from __future__ import annotations

from typing import ContextManager, List, Protocol

from .models import EvidenceImage, OcrResult


class OcrSession(Protocol):
    def recognize(self, image: EvidenceImage) -> OcrResult:
        ...


class OcrEngine(Protocol):
    def session(self, language: str) -> ContextManager[OcrSession]:
        ...


class EvidenceSource(Protocol):
    def capture(self) -> List[EvidenceImage]:
        ...
