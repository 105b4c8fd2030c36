"""Login and client-filter helpers for the submissions portal."""
from __future__ import annotations

import logging

from ..errors import ElementTimeout
from ..settings import Credentials
from .interfaces import Browser
from .locators import PortalLocators

logger = logging.getLogger(__name__)


def login(browser: Browser, credentials: Credentials, locators: PortalLocators = PortalLocators()) -> bool:
    """Fill the login form and submit it.

    Returns ``False`` (after logging) when the post-login page never settles;
    the caller's list navigation will surface a real failure.
    """

    logger.info("logging in as %s", credentials.username)
    browser.click(locators.username)
    browser.fill(locators.username, credentials.username)
    browser.click(locators.password)
    browser.fill(locators.password, credentials.password)
    browser.press(locators.password, "Enter")
    try:
        browser.wait_for_load("networkidle")
    except ElementTimeout as exc:
        logger.error("login did not settle: %s", exc)
        return False
    logger.info("login succeeded")
    return True


def apply_client_filter(browser: Browser, client: str, locators: PortalLocators = PortalLocators()) -> bool:
    """Type ``client`` into the brand filter and submit it."""

    logger.info("filtering by client: %s", client)
    try:
        browser.click(locators.client_filter)
        browser.fill(locators.client_filter, client)
        browser.press(locators.client_filter, "Enter")
    except ElementTimeout as exc:
        logger.error("could not apply client filter: %s", exc)
        return False
    logger.info("client filter applied")
    return True
