import pytest
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from revisor.errors import ElementTimeout, NavigationError
from revisor.portal.playwright_driver import PlaywrightBrowser


class FakeLocator:
    def __init__(self, page, selector):
        self.page = page
        self.selector = selector

    @property
    def first(self):
        return self

    def _act(self, name, *args, **kwargs):
        self.page.calls.append((name, self.selector, args, kwargs))
        error = self.page.errors.get((name, self.selector))
        if error is not None:
            raise error
        return self.page.results.get((name, self.selector))

    def wait_for(self, **kwargs):
        return self._act("wait_for", **kwargs)

    def click(self):
        return self._act("click")

    def fill(self, text):
        return self._act("fill", text)

    def text_content(self):
        return self._act("text_content")

    def screenshot(self):
        return self._act("screenshot")

    def count(self):
        return self._act("count")


class FakePage:
    def __init__(self):
        self.calls = []
        self.errors = {}
        self.results = {}
        self.default_timeout = None

    def set_default_timeout(self, ms):
        self.default_timeout = ms

    def locator(self, selector):
        return FakeLocator(self, selector)

    def goto(self, url):
        self.calls.append(("goto", url))
        error = self.errors.get(("goto", url))
        if error is not None:
            raise error

    def reload(self):
        error = self.errors.get(("reload", None))
        if error is not None:
            raise error

    def wait_for_load_state(self, state):
        error = self.errors.get(("wait_for_load_state", state))
        if error is not None:
            raise error

    def wait_for_timeout(self, ms):
        self.calls.append(("wait_for_timeout", ms))


def test_sets_default_action_timeout():
    page = FakePage()
    PlaywrightBrowser(page, action_timeout_ms=4200)

    assert page.default_timeout == 4200


def test_wait_visible_passes_state_and_timeout():
    page = FakePage()
    PlaywrightBrowser(page).wait_visible("div.row", 1234)

    assert page.calls == [("wait_for", "div.row", (), {"state": "visible", "timeout": 1234})]


def test_wait_visible_timeout_becomes_element_timeout():
    page = FakePage()
    page.errors[("wait_for", "div.row")] = PlaywrightTimeoutError("Timeout 1234ms exceeded.")

    with pytest.raises(ElementTimeout) as excinfo:
        PlaywrightBrowser(page).wait_visible("div.row", 1234)

    assert excinfo.value.locator == "div.row"
    assert excinfo.value.timeout_ms == 1234
    assert isinstance(excinfo.value.__cause__, PlaywrightTimeoutError)


@pytest.mark.parametrize(
    "method, args",
    [
        ("click", ("button.approve",)),
        ("fill", ("button.approve", "texto")),
        ("text_content", ("button.approve",)),
        ("screenshot", ("button.approve",)),
    ],
)
def test_action_timeouts_become_element_timeout(method, args):
    page = FakePage()
    page.errors[(method, "button.approve")] = PlaywrightTimeoutError("Timeout 15000ms exceeded.")

    with pytest.raises(ElementTimeout) as excinfo:
        getattr(PlaywrightBrowser(page), method)(*args)

    assert excinfo.value.locator == "button.approve"


def test_load_state_timeout_becomes_element_timeout():
    page = FakePage()
    page.errors[("wait_for_load_state", "domcontentloaded")] = PlaywrightTimeoutError("Timeout")

    with pytest.raises(ElementTimeout):
        PlaywrightBrowser(page).wait_for_load()


def test_goto_error_becomes_navigation_error():
    page = FakePage()
    page.errors[("goto", "https://portal.example/list")] = PlaywrightError("net::ERR_NAME_NOT_RESOLVED")

    with pytest.raises(NavigationError, match="ERR_NAME_NOT_RESOLVED"):
        PlaywrightBrowser(page).goto("https://portal.example/list")


def test_reload_error_becomes_navigation_error():
    page = FakePage()
    page.errors[("reload", None)] = PlaywrightError("Target page, context or browser has been closed")

    with pytest.raises(NavigationError, match="reload failed"):
        PlaywrightBrowser(page).reload()


def test_non_timeout_action_errors_propagate():
    page = FakePage()
    page.errors[("click", "button.approve")] = PlaywrightError("Element is not attached to the DOM")

    with pytest.raises(PlaywrightError):
        PlaywrightBrowser(page).click("button.approve")


def test_successful_reads_and_zero_pause():
    page = FakePage()
    page.results[("text_content", "span.id")] = "T-7"
    page.results[("count", "img.thumb")] = 3
    browser = PlaywrightBrowser(page)

    assert browser.text_content("span.id") == "T-7"
    assert browser.count("img.thumb") == 3
    browser.pause(0)
    browser.pause(500)
    assert [c for c in page.calls if c[0] == "wait_for_timeout"] == [("wait_for_timeout", 500)]
