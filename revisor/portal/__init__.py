"""Browser-facing collaborators for the submissions portal."""

from .capture import ThumbnailEvidenceSource
from .interfaces import Browser
from .locators import PortalLocators
from .mocks import MockBrowser
from .race import APPROVED_PREVIOUSLY, DEFAULT_SIGNALS, QUEST_FAILED, RaceDetector, RaceSignal
from .session import apply_client_filter, login

__all__ = [
    "APPROVED_PREVIOUSLY",
    "Browser",
    "DEFAULT_SIGNALS",
    "MockBrowser",
    "PortalLocators",
    "QUEST_FAILED",
    "RaceDetector",
    "RaceSignal",
    "ThumbnailEvidenceSource",
    "apply_client_filter",
    "login",
]
