"""OCR engine backed by pytesseract.

Tesseract itself is a subprocess per call, so the "context" acquired here is
the validated configuration plus every Pillow image opened while it is live.
The session verifies once that the binary and the requested language pack
are present, then recognises each evidence image with the LSTM engine
(``--oem 3``). Images are closed when the session exits, on every exit path.
"""
from __future__ import annotations

import io
import logging
import os
from contextlib import contextmanager
from typing import Iterator, List

import pytesseract
from PIL import Image, UnidentifiedImageError

from ..errors import EvidenceReadError, OcrEngineUnavailable
from .interfaces import OcrEngine, OcrSession
from .models import EvidenceImage, OcrResult

logger = logging.getLogger(__name__)


def _pytesseract_allowed() -> bool:
    raw = os.environ.get("REVISOR_ALLOW_PYTESSERACT")
    if raw is None:
        return True
    return raw.strip().lower() not in {"0", "false", "no", "off"}


class TesseractSession(OcrSession):
    def __init__(self, lang: str, config: str) -> None:
        self.lang = lang
        self.config = config
        self._opened: List[Image.Image] = []

    def _open(self, image: EvidenceImage) -> Image.Image:
        try:
            if image.path is not None:
                img = Image.open(image.path)
            else:
                img = Image.open(io.BytesIO(image.data or b""))
            img.load()
        except (OSError, UnidentifiedImageError) as exc:
            raise EvidenceReadError(f"cannot read {image.label}: {exc}") from exc
        self._opened.append(img)
        return img

    def recognize(self, image: EvidenceImage) -> OcrResult:
        img = self._open(image)
        try:
            text = pytesseract.image_to_string(img, lang=self.lang, config=self.config)
        except pytesseract.TesseractError as exc:
            raise EvidenceReadError(f"tesseract failed on {image.label}: {exc}") from exc
        return OcrResult(text=text, source=image, language=self.lang)

    def close(self) -> None:
        while self._opened:
            self._opened.pop().close()


class TesseractOcrEngine(OcrEngine):
    """Recognise evidence images with Tesseract.

    Args:
        oem: OCR Engine Mode. ``3`` picks the LSTM engine when available.
        psm: Page segmentation mode. ``3`` lets Tesseract detect the layout,
            which suits phone photos of receipts.
        extra_config: Additional custom flags forwarded to pytesseract.
    """

    def __init__(self, oem: int = 3, psm: int = 3, extra_config: str = "") -> None:
        if not _pytesseract_allowed():
            raise OcrEngineUnavailable(
                "pytesseract is disabled by REVISOR_ALLOW_PYTESSERACT; set it to 1/true to enable"
            )
        base_config = f"--oem {oem} --psm {psm}"
        self.config = f"{base_config} {extra_config}".strip()

    def _check(self, language: str) -> None:
        try:
            pytesseract.get_tesseract_version()
            available = set(pytesseract.get_languages(config=""))
        except (pytesseract.TesseractNotFoundError, OSError) as exc:
            raise OcrEngineUnavailable(f"tesseract is not installed: {exc}") from exc
        missing = [part for part in language.split("+") if part not in available]
        if missing:
            raise OcrEngineUnavailable(
                f"tesseract language data missing: {', '.join(missing)} "
                f"(installed: {', '.join(sorted(available)) or 'none'})"
            )

    @contextmanager
    def session(self, language: str = "spa") -> Iterator[TesseractSession]:
        self._check(language)
        logger.debug("tesseract session opened lang=%s config=%s", language, self.config)
        sess = TesseractSession(language, self.config)
        try:
            yield sess
        finally:
            sess.close()
            logger.debug("tesseract session closed lang=%s", language)
