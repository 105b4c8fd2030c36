# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2024 Revisor contributors

"""Browser primitives the review agent depends on.

Locators are Playwright selector strings; chained selectors (``a >> b``)
scope a lookup inside another element. Every wait takes an explicit timeout
in milliseconds and raises :class:`~revisor.errors.ElementTimeout` when it
expires.
"""
from __future__ import annotations

from typing import Optional, Protocol


class Browser(Protocol):
    def goto(self, url: str) -> None:
        ...

    def reload(self) -> None:
        ...

    def wait_for_load(self, state: str = "domcontentloaded") -> None:
        ...

    def wait_visible(self, locator: str, timeout_ms: int) -> None:
        ...

    def pause(self, ms: int) -> None:
        ...

    def click(self, locator: str) -> None:
        ...

    def fill(self, locator: str, text: str) -> None:
        ...

    def press(self, locator: str, key: str) -> None:
        ...

    def text_content(self, locator: str) -> Optional[str]:
        ...

    def count(self, locator: str) -> int:
        ...

    def screenshot(self, locator: str) -> bytes:
        ...
