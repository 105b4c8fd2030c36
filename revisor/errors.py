# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2024 Revisor contributors

"""Exception types shared across the review agent."""
from __future__ import annotations

__all__ = [
    "RevisorError",
    "ConfigError",
    "ElementTimeout",
    "NavigationError",
    "OcrEngineUnavailable",
    "EvidenceReadError",
]


class RevisorError(Exception):
    """Base class for every error raised by revisor."""


class ConfigError(RevisorError):
    """Required configuration is missing or malformed."""


class ElementTimeout(RevisorError):
    """A UI element did not become visible within its timeout."""

    def __init__(self, locator: str, timeout_ms: int) -> None:
        super().__init__(f"{locator!r} not visible after {timeout_ms} ms")
        self.locator = locator
        self.timeout_ms = timeout_ms


class NavigationError(RevisorError):
    """The portal could not be reached or navigated."""


class OcrEngineUnavailable(RevisorError):
    """The OCR engine or its language model cannot be used."""


class EvidenceReadError(RevisorError):
    """A single evidence image could not be read or recognised."""
