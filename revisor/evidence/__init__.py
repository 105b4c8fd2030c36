"""Evidence classification and address extraction."""

from .address import ADDRESS_PATTERN, extract_address_code
from .classifier import TextDensityClassifier
from .input_handler import FileEvidenceSource
from .interfaces import EvidenceSource, OcrEngine, OcrSession
from .mocks import MockEvidenceSource, MockOcrEngine
from .models import (
    CandidateFoundNoAddress,
    CandidateScore,
    ClassificationResult,
    EvidenceImage,
    ExtractionOutcome,
    ExtractionSuccess,
    NoCandidateFound,
    OcrResult,
    OutcomeKind,
    ProcessingError,
    describe_outcome,
)
from .pipeline import EvidencePipeline
from .tesseract import TesseractOcrEngine

__all__ = [
    "ADDRESS_PATTERN",
    "CandidateFoundNoAddress",
    "CandidateScore",
    "ClassificationResult",
    "EvidenceImage",
    "EvidencePipeline",
    "EvidenceSource",
    "ExtractionOutcome",
    "ExtractionSuccess",
    "FileEvidenceSource",
    "MockEvidenceSource",
    "MockOcrEngine",
    "NoCandidateFound",
    "OcrEngine",
    "OcrResult",
    "OcrSession",
    "OutcomeKind",
    "ProcessingError",
    "TesseractOcrEngine",
    "TextDensityClassifier",
    "describe_outcome",
    "extract_address_code",
]
