# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2024 Revisor contributors

"""Playwright-backed implementation of the :class:`Browser` protocol."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import Page
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError
from playwright.sync_api import sync_playwright

from ..errors import ElementTimeout, NavigationError
from .interfaces import Browser

logger = logging.getLogger(__name__)


class PlaywrightBrowser(Browser):
    """Adapt a synchronous Playwright ``Page`` to the agent's primitives."""

    def __init__(self, page: Page, action_timeout_ms: int = 15000) -> None:
        self.page = page
        self.page.set_default_timeout(action_timeout_ms)

    def goto(self, url: str) -> None:
        try:
            self.page.goto(url)
        except PlaywrightError as exc:
            raise NavigationError(f"cannot open {url}: {exc}") from exc

    def reload(self) -> None:
        try:
            self.page.reload()
        except PlaywrightError as exc:
            raise NavigationError(f"reload failed: {exc}") from exc

    def wait_for_load(self, state: str = "domcontentloaded") -> None:
        try:
            self.page.wait_for_load_state(state)
        except PlaywrightTimeoutError as exc:
            raise ElementTimeout(f"load state {state}", 0) from exc

    def wait_visible(self, locator: str, timeout_ms: int) -> None:
        try:
            self.page.locator(locator).first.wait_for(state="visible", timeout=timeout_ms)
        except PlaywrightTimeoutError as exc:
            raise ElementTimeout(locator, timeout_ms) from exc

    def pause(self, ms: int) -> None:
        if ms > 0:
            self.page.wait_for_timeout(ms)

    def click(self, locator: str) -> None:
        try:
            self.page.locator(locator).first.click()
        except PlaywrightTimeoutError as exc:
            raise ElementTimeout(locator, 0) from exc

    def fill(self, locator: str, text: str) -> None:
        try:
            self.page.locator(locator).first.fill(text)
        except PlaywrightTimeoutError as exc:
            raise ElementTimeout(locator, 0) from exc

    def press(self, locator: str, key: str) -> None:
        try:
            self.page.locator(locator).first.press(key)
        except PlaywrightTimeoutError as exc:
            raise ElementTimeout(locator, 0) from exc

    def text_content(self, locator: str) -> Optional[str]:
        try:
            return self.page.locator(locator).first.text_content()
        except PlaywrightTimeoutError as exc:
            raise ElementTimeout(locator, 0) from exc

    def count(self, locator: str) -> int:
        return self.page.locator(locator).count()

    def screenshot(self, locator: str) -> bytes:
        try:
            return self.page.locator(locator).first.screenshot()
        except PlaywrightTimeoutError as exc:
            raise ElementTimeout(locator, 0) from exc


@contextmanager
def open_browser(headless: bool = True, action_timeout_ms: int = 15000) -> Iterator[PlaywrightBrowser]:
    """Launch Chromium and yield a :class:`PlaywrightBrowser` on a fresh page."""

    with sync_playwright() as pw:
        browser = pw.chromium.launch(headless=headless)
        try:
            context = browser.new_context()
            page = context.new_page()
            logger.info("browser started (headless=%s)", headless)
            yield PlaywrightBrowser(page, action_timeout_ms=action_timeout_ms)
        finally:
            browser.close()
            logger.info("browser closed")
