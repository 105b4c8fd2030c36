"""Task outcome records."""
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class TaskStatus(str, Enum):
    APPROVED = "approved"
    ALREADY_REVIEWED = "already_reviewed"
    ALREADY_APPROVED_RACE = "already_approved_race"
    ERROR = "error"


class ReviewState(str, Enum):
    SEARCHING = "searching"
    OPENING = "opening"
    VERIFYING = "verifying"
    ANALYZING = "analyzing"
    APPROVING = "approving"
    LOGGING_OUTCOME = "logging_outcome"
    RETURNING_TO_LIST = "returning_to_list"
    RECOVERING = "recovering"


APPROVED_DETAIL = "Aprobada"
NO_REVIEWER_DETAIL = "Error - No se encontró Reviewer"


class TaskRecord(BaseModel):
    """One processed task. Written once to the outcome log, never mutated."""

    model_config = ConfigDict(frozen=True)

    task_id: str
    status: TaskStatus
    detail: str
    timestamp: datetime = Field(default_factory=datetime.now)
    address_code: Optional[str] = None
