"""Data models for the evidence pipeline.

Inputs and outputs stay explicit across the classifier, extractor and
pipeline so OCR engines and image sources can be swapped without changing
the data exchanged between them. Pydantic validates the invariants (one
image source per evidence item, address codes that match the pattern).
"""
from __future__ import annotations

from enum import Enum
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .address import ADDRESS_CODE_RE


class EvidenceImage(BaseModel):
    """A screenshot or file that may depict the delivery receipt."""

    model_config = ConfigDict(frozen=True)

    label: str
    path: Optional[str] = None
    data: Optional[bytes] = Field(None, exclude=True, repr=False)

    @model_validator(mode="after")
    def _one_source(self) -> "EvidenceImage":
        if (self.path is None) == (self.data is None):
            raise ValueError("EvidenceImage requires exactly one of path or data")
        return self

    @classmethod
    def from_path(cls, path: str) -> "EvidenceImage":
        return cls(label=str(path), path=str(path))

    @classmethod
    def from_bytes(cls, data: bytes, label: str) -> "EvidenceImage":
        return cls(label=label, data=bytes(data))


class OcrResult(BaseModel):
    text: str
    source: EvidenceImage
    language: Optional[str] = None
    confidence: Optional[float] = Field(None, ge=0.0, le=1.0)


class CandidateScore(BaseModel):
    label: str
    length: Optional[int] = None
    error: Optional[str] = None


class ClassificationResult(BaseModel):
    best: Optional[EvidenceImage] = None
    text: str = ""
    scores: List[CandidateScore] = Field(default_factory=list)


class OutcomeKind(str, Enum):
    SUCCESS = "success"
    NO_CANDIDATE = "no_candidate"
    NO_ADDRESS = "no_address"
    ERROR = "error"


class ExtractionSuccess(BaseModel):
    kind: Literal[OutcomeKind.SUCCESS] = OutcomeKind.SUCCESS
    ticket_image: EvidenceImage
    address_code: str

    @field_validator("address_code")
    @classmethod
    def _matches_pattern(cls, value: str) -> str:
        if not ADDRESS_CODE_RE.fullmatch(value):
            raise ValueError(f"address code {value!r} does not look like JMB-<chars>")
        return value


class NoCandidateFound(BaseModel):
    kind: Literal[OutcomeKind.NO_CANDIDATE] = OutcomeKind.NO_CANDIDATE
    message: str = "No se encontraron imágenes de evidencia."


class CandidateFoundNoAddress(BaseModel):
    kind: Literal[OutcomeKind.NO_ADDRESS] = OutcomeKind.NO_ADDRESS
    ticket_image: EvidenceImage
    message: str = "Se identificó un ticket, pero no se encontró el domicilio 'JMB-'."


class ProcessingError(BaseModel):
    kind: Literal[OutcomeKind.ERROR] = OutcomeKind.ERROR
    message: str


ExtractionOutcome = Annotated[
    Union[ExtractionSuccess, NoCandidateFound, CandidateFoundNoAddress, ProcessingError],
    Field(discriminator="kind"),
]


def describe_outcome(outcome: ExtractionOutcome) -> str:
    """One-line human summary used in logs and the outcome record."""

    if isinstance(outcome, ExtractionSuccess):
        return f"Domicilio {outcome.address_code} en {outcome.ticket_image.label}"
    return outcome.message
