"""Evidence sources for batch/offline runs."""
from __future__ import annotations

from pathlib import Path
from typing import Iterable, List

from .interfaces import EvidenceSource
from .models import EvidenceImage


class FileEvidenceSource(EvidenceSource):
    """Emit one :class:`EvidenceImage` per file path, in the given order.

    Paths are not opened here; unreadable files surface later as OCR failures
    and are skipped by the classifier.
    """

    def __init__(self, paths: Iterable[str]) -> None:
        self.paths = [Path(p).as_posix() for p in paths]

    def capture(self) -> List[EvidenceImage]:
        return [EvidenceImage.from_path(p) for p in self.paths]
