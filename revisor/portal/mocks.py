"""Scriptable in-memory browser for tests."""
from __future__ import annotations

from typing import Callable, Dict, List, Optional, Set, Tuple

from ..errors import ElementTimeout, NavigationError
from .interfaces import Browser

Hook = Callable[["MockBrowser"], None]


class MockBrowser(Browser):
    """Browser double driven by plain dictionaries.

    * ``visible`` holds the locators ``wait_visible`` accepts; anything else
      times out.
    * ``texts``, ``counts`` and ``screenshots`` answer the matching queries.
    * ``on_click`` and ``on_goto`` run hooks so a test can change the page in
      response to an action (e.g. show a banner after approving).
    * ``goto_errors`` is consumed one entry per ``goto`` call; a non-``None``
      entry is raised as a navigation failure.
    """

    def __init__(
        self,
        visible: Optional[Set[str]] = None,
        texts: Optional[Dict[str, Optional[str]]] = None,
        counts: Optional[Dict[str, int]] = None,
        screenshots: Optional[Dict[str, bytes]] = None,
    ) -> None:
        self.visible: Set[str] = set(visible or ())
        self.texts: Dict[str, Optional[str]] = dict(texts or {})
        self.counts: Dict[str, int] = dict(counts or {})
        self.screenshots: Dict[str, bytes] = dict(screenshots or {})
        self.on_click: Dict[str, Hook] = {}
        self.on_goto: List[Hook] = []
        self.goto_errors: List[Optional[Exception]] = []
        self.calls: List[Tuple[str, ...]] = []

    def _record(self, *call: str) -> None:
        self.calls.append(call)

    def called(self, method: str) -> List[Tuple[str, ...]]:
        return [c for c in self.calls if c[0] == method]

    def goto(self, url: str) -> None:
        self._record("goto", url)
        if self.goto_errors:
            err = self.goto_errors.pop(0)
            if err is not None:
                raise NavigationError(str(err)) from err
        for hook in list(self.on_goto):
            hook(self)

    def reload(self) -> None:
        self._record("reload")

    def wait_for_load(self, state: str = "domcontentloaded") -> None:
        self._record("wait_for_load", state)

    def wait_visible(self, locator: str, timeout_ms: int) -> None:
        self._record("wait_visible", locator, str(timeout_ms))
        if locator not in self.visible:
            raise ElementTimeout(locator, timeout_ms)

    def pause(self, ms: int) -> None:
        self._record("pause", str(ms))

    def click(self, locator: str) -> None:
        self._record("click", locator)
        hook = self.on_click.get(locator)
        if hook is not None:
            hook(self)

    def fill(self, locator: str, text: str) -> None:
        self._record("fill", locator, text)

    def press(self, locator: str, key: str) -> None:
        self._record("press", locator, key)

    def text_content(self, locator: str) -> Optional[str]:
        self._record("text_content", locator)
        return self.texts.get(locator)

    def count(self, locator: str) -> int:
        self._record("count", locator)
        return self.counts.get(locator, 0)

    def screenshot(self, locator: str) -> bytes:
        self._record("screenshot", locator)
        try:
            return self.screenshots[locator]
        except KeyError:
            raise ElementTimeout(locator, 0) from None
