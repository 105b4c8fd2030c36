"""Task review loop and outcome log."""

from .machine import TaskReviewer
from .outcome_log import OutcomeLog, format_entry, parse_entry, print_history
from .records import APPROVED_DETAIL, NO_REVIEWER_DETAIL, ReviewState, TaskRecord, TaskStatus

__all__ = [
    "APPROVED_DETAIL",
    "NO_REVIEWER_DETAIL",
    "OutcomeLog",
    "ReviewState",
    "TaskRecord",
    "TaskReviewer",
    "TaskStatus",
    "format_entry",
    "parse_entry",
    "print_history",
]
