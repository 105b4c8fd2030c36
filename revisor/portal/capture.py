"""Capture evidence thumbnails from an open task page."""
from __future__ import annotations

import logging
from typing import List

from ..evidence.interfaces import EvidenceSource
from ..evidence.models import EvidenceImage
from .interfaces import Browser
from .locators import PortalLocators, nth

logger = logging.getLogger(__name__)


class ThumbnailEvidenceSource(EvidenceSource):
    """Screenshot every evidence thumbnail on the current task page, in order.

    Raises :class:`~revisor.errors.ElementTimeout` when the evidence container
    never appears; returns an empty list when it has no thumbnails.
    """

    def __init__(self, browser: Browser, locators: PortalLocators = PortalLocators(), timeout_ms: int = 10000) -> None:
        self.browser = browser
        self.locators = locators
        self.timeout_ms = timeout_ms

    def capture(self) -> List[EvidenceImage]:
        self.browser.wait_visible(self.locators.evidence_container, self.timeout_ms)
        thumbs = self.locators.thumbnails()
        total = self.browser.count(thumbs)
        logger.info("found %d evidence thumbnails", total)
        images = []
        for index in range(total):
            data = self.browser.screenshot(nth(thumbs, index))
            images.append(EvidenceImage.from_bytes(data, label=f"evidencia-{index + 1}"))
        return images
