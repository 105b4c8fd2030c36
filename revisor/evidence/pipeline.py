# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2024 Revisor contributors

"""Composable evidence pipeline: classify, then extract the address code."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

from .address import extract_address_code
from .classifier import TextDensityClassifier
from .interfaces import EvidenceSource, OcrEngine
from .models import (
    CandidateFoundNoAddress,
    EvidenceImage,
    ExtractionOutcome,
    ExtractionSuccess,
    NoCandidateFound,
    ProcessingError,
)

logger = logging.getLogger(__name__)

NO_IMAGES = "La lista de imágenes está vacía."
NO_TICKET = "No se pudo identificar un ticket válido entre las imágenes proporcionadas."


@dataclass
class EvidencePipeline:
    """Turn a set of evidence images into exactly one ``ExtractionOutcome``.

    One OCR session covers the whole pass. The scoring text of the winning
    image is reused unless ``rescan_winner`` is set, in which case the winner
    is recognised again before matching.
    """

    engine: OcrEngine
    language: str = "spa"
    rescan_winner: bool = False
    classifier: TextDensityClassifier = field(init=False)

    def __post_init__(self) -> None:
        self.classifier = TextDensityClassifier(engine=self.engine, language=self.language)

    def analyze(self, images: Sequence[EvidenceImage]) -> ExtractionOutcome:
        if not images:
            return ProcessingError(message=NO_IMAGES)
        try:
            with self.engine.session(self.language) as session:
                ranking = self.classifier.classify(images, session=session)
                if ranking.best is None:
                    return ProcessingError(message=NO_TICKET)

                ticket = ranking.best
                text = ranking.text
                if self.rescan_winner:
                    try:
                        text = session.recognize(ticket).text
                    except Exception as exc:
                        return ProcessingError(
                            message=f"Ocurrió un error al procesar el ticket seleccionado: {exc}"
                        )
        except Exception as exc:
            logger.error("evidence analysis failed: %s", exc)
            return ProcessingError(message=f"Error en el análisis de evidencias: {exc}")

        code = extract_address_code(text)
        if code is None:
            logger.info("ticket %s has no JMB- address", ticket.label)
            return CandidateFoundNoAddress(ticket_image=ticket)
        logger.info("address %s found on %s", code, ticket.label)
        return ExtractionSuccess(ticket_image=ticket, address_code=code)

    def analyze_source(self, source: EvidenceSource) -> ExtractionOutcome:
        """Capture images from ``source`` and analyse them.

        A source that captures nothing means the page showed no evidence, which
        is reported as ``NoCandidateFound``; capture failures are
        ``ProcessingError``.
        """

        try:
            images = source.capture()
        except Exception as exc:
            logger.error("evidence capture failed: %s", exc)
            return ProcessingError(message=f"No se pudieron capturar las evidencias: {exc}")
        if not images:
            return NoCandidateFound()
        return self.analyze(images)
