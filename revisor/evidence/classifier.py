# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2024 Revisor contributors

"""Pick the receipt among evidence images by OCR text density."""
from __future__ import annotations

import logging
from contextlib import ExitStack
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .interfaces import OcrEngine, OcrSession
from .models import CandidateScore, ClassificationResult, EvidenceImage

logger = logging.getLogger(__name__)


@dataclass
class TextDensityClassifier:
    """Score each image by recognised character count and keep the densest.

    Ties keep the earliest image. An image whose OCR fails is skipped with a
    warning. When no image can be read the result has ``best=None``.
    """

    engine: OcrEngine
    language: str = "spa"

    def classify(
        self,
        images: Sequence[EvidenceImage],
        session: Optional[OcrSession] = None,
    ) -> ClassificationResult:
        if not images:
            raise ValueError("classify() needs at least one evidence image")

        with ExitStack() as stack:
            if session is None:
                session = stack.enter_context(self.engine.session(self.language))
            return self._score(images, session)

    def _score(self, images: Sequence[EvidenceImage], session: OcrSession) -> ClassificationResult:
        best: Optional[EvidenceImage] = None
        best_text = ""
        best_len = -1
        scores: List[CandidateScore] = []

        for index, image in enumerate(images, start=1):
            try:
                text = session.recognize(image).text
            except Exception as exc:
                logger.warning("skipping evidence #%d (%s): %s", index, image.label, exc)
                scores.append(CandidateScore(label=image.label, error=str(exc)))
                continue

            scores.append(CandidateScore(label=image.label, length=len(text)))
            logger.info("evidence #%d (%s): %d characters", index, image.label, len(text))
            if len(text) > best_len:
                if best is not None:
                    logger.info("new receipt candidate %s (previous max %d)", image.label, best_len)
                best, best_text, best_len = image, text, len(text)

        if best is not None:
            logger.info("receipt identified: %s", best.label)
        return ClassificationResult(best=best, text=best_text, scores=scores)
