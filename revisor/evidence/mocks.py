"""Mock implementations of evidence pipeline components for testing."""
from __future__ import annotations

from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional, Union

from ..errors import EvidenceReadError
from .interfaces import EvidenceSource, OcrEngine, OcrSession
from .models import EvidenceImage, OcrResult

ScriptedText = Union[str, Exception]


class MockOcrSession(OcrSession):
    def __init__(self, engine: "MockOcrEngine", language: str) -> None:
        self.engine = engine
        self.language = language

    def recognize(self, image: EvidenceImage) -> OcrResult:
        self.engine.calls.append(image.label)
        scripted = self.engine.texts.get(image.label, self.engine.default)
        if isinstance(scripted, Exception):
            raise scripted
        if scripted is None:
            raise EvidenceReadError(f"no scripted text for {image.label}")
        return OcrResult(text=scripted, source=image, language=self.language)


class MockOcrEngine(OcrEngine):
    """Return scripted text per image label.

    Values that are exceptions are raised from ``recognize`` so tests can
    simulate corrupt evidence.
    """

    def __init__(self, texts: Optional[Dict[str, ScriptedText]] = None, default: Optional[str] = "") -> None:
        self.texts: Dict[str, ScriptedText] = dict(texts or {})
        self.default = default
        self.calls: List[str] = []
        self.opened = 0
        self.closed = 0
        self.languages: List[str] = []

    @contextmanager
    def session(self, language: str = "spa") -> Iterator[MockOcrSession]:
        self.opened += 1
        self.languages.append(language)
        try:
            yield MockOcrSession(self, language)
        finally:
            self.closed += 1


class MockEvidenceSource(EvidenceSource):
    def __init__(self, images: List[EvidenceImage], error: Optional[Exception] = None) -> None:
        self.images = list(images)
        self.error = error
        self.captures = 0

    def capture(self) -> List[EvidenceImage]:
        self.captures += 1
        if self.error is not None:
            raise self.error
        return list(self.images)
