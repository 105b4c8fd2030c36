# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2024 Revisor contributors

"""Task review state machine.

One task at a time: find the next row in the filtered list, open it, check
whether someone already reviewed it, optionally analyse the evidence, approve,
watch for another reviewer winning the race, record the outcome and go back
to the list. Per-task failures become ``ERROR`` records; anything that
escapes an iteration triggers a full re-navigation and re-filter.
"""
from __future__ import annotations

import logging
import threading
from typing import Optional, Tuple

from ..errors import ElementTimeout
from ..evidence.models import ExtractionOutcome, ExtractionSuccess, describe_outcome
from ..evidence.pipeline import EvidencePipeline
from ..portal.capture import ThumbnailEvidenceSource
from ..portal.interfaces import Browser
from ..portal.locators import PortalLocators
from ..portal.race import RaceDetector
from ..portal.session import apply_client_filter
from ..settings import ReviewSettings
from .outcome_log import OutcomeLog
from .records import APPROVED_DETAIL, NO_REVIEWER_DETAIL, ReviewState, TaskRecord, TaskStatus

logger = logging.getLogger(__name__)

__all__ = ["TaskReviewer"]


class TaskReviewer:
    """Drive tasks through the review states until told to stop."""

    def __init__(
        self,
        browser: Browser,
        settings: ReviewSettings,
        outcome_log: OutcomeLog,
        race_detector: Optional[RaceDetector] = None,
        pipeline: Optional[EvidencePipeline] = None,
        locators: PortalLocators = PortalLocators(),
    ) -> None:
        self.browser = browser
        self.settings = settings
        self.timeouts = settings.timeouts
        self.outcome_log = outcome_log
        self.race_detector = race_detector or RaceDetector(timeout_ms=settings.timeouts.race_signal_ms)
        self.pipeline = pipeline
        self.locators = locators
        self.state = ReviewState.SEARCHING
        self.recorded = 0

    def _enter(self, state: ReviewState) -> None:
        logger.debug("state %s -> %s", self.state.value, state.value)
        self.state = state

    # -- Searching / Opening -------------------------------------------------

    def open_next_task(self) -> Optional[str]:
        """Open the first task row and return its id.

        Returns ``None`` when no row shows up in time (the list is reloaded)
        or when the row has no readable id.
        """

        self._enter(ReviewState.SEARCHING)
        logger.info("looking for the next task")
        try:
            self.browser.wait_visible(self.locators.task_row, self.timeouts.task_row_ms)
            raw_id = self.browser.text_content(self.locators.task_id())
            if not raw_id or not raw_id.strip():
                logger.info("could not read the task id, skipping")
                return None

            self._enter(ReviewState.OPENING)
            task_id = raw_id.strip()
            logger.info("opening task %s", task_id)
            self.browser.click(self.locators.task_view())
            return task_id
        except ElementTimeout:
            logger.info("no tasks visible, reloading the list")
            self.browser.reload()
            self.browser.wait_for_load("domcontentloaded")
            return None

    # -- Verifying -----------------------------------------------------------

    def reviewed_by(self, task_id: str) -> Optional[str]:
        """Return the reviewer already assigned to the open task, if any.

        Raises :class:`ElementTimeout` when the Reviewer field never renders.
        """

        self._enter(ReviewState.VERIFYING)
        logger.info("checking whether task %s was already reviewed", task_id)
        self.browser.wait_visible(self.locators.reviewer, self.timeouts.reviewer_ms)
        text = self.browser.text_content(self.locators.reviewer) or ""
        if "@" not in text:
            return None
        return text.replace("Reviewer:", "").strip()

    # -- Analyzing -----------------------------------------------------------

    def analyze_evidence(self, task_id: str) -> Optional[ExtractionOutcome]:
        if self.pipeline is None or self.settings.evidence_mode == "off":
            return None
        self._enter(ReviewState.ANALYZING)
        source = ThumbnailEvidenceSource(
            self.browser,
            locators=self.locators,
            timeout_ms=self.timeouts.evidence_container_ms,
        )
        outcome = self.pipeline.analyze_source(source)
        if isinstance(outcome, ExtractionSuccess):
            logger.info("task %s evidence: %s", task_id, describe_outcome(outcome))
        else:
            logger.warning("task %s evidence: %s", task_id, describe_outcome(outcome))
        return outcome

    # -- Approving / race check ----------------------------------------------

    def approve(self, task_id: str, address_code: Optional[str] = None) -> TaskRecord:
        self._enter(ReviewState.APPROVING)
        logger.info("approving task %s", task_id)
        self.browser.click(self.locators.approve_button)
        self.browser.pause(self.timeouts.settle_ms)

        signal = self.race_detector.detect(self.browser)
        if signal is not None:
            logger.info("task %s was approved by someone else first (%s)", task_id, signal.name)
            return TaskRecord(
                task_id=task_id,
                status=TaskStatus.ALREADY_APPROVED_RACE,
                detail=signal.detail,
                address_code=address_code,
            )
        logger.info("task %s approved", task_id)
        return TaskRecord(
            task_id=task_id,
            status=TaskStatus.APPROVED,
            detail=APPROVED_DETAIL,
            address_code=address_code,
        )

    def process_task(self, task_id: str) -> TaskRecord:
        """Run the open task from Verifying to a final record."""

        logger.info("processing task %s", task_id)
        self.browser.pause(self.timeouts.settle_ms)
        try:
            reviewer = self.reviewed_by(task_id)
        except ElementTimeout:
            logger.error("task %s: Reviewer field never appeared, skipping", task_id)
            return TaskRecord(task_id=task_id, status=TaskStatus.ERROR, detail=NO_REVIEWER_DETAIL)

        if reviewer:
            logger.info("task %s already reviewed by %s", task_id, reviewer)
            return TaskRecord(
                task_id=task_id,
                status=TaskStatus.ALREADY_REVIEWED,
                detail=f"Ya revisada por {reviewer}",
            )

        address_code, failure = self._evidence_gate(task_id)
        if failure is not None:
            return TaskRecord(task_id=task_id, status=TaskStatus.ERROR, detail=failure)

        try:
            return self.approve(task_id, address_code=address_code)
        except ElementTimeout as exc:
            logger.error("task %s: approve failed: %s", task_id, exc)
            return TaskRecord(
                task_id=task_id,
                status=TaskStatus.ERROR,
                detail="Error - No se pudo aprobar",
                address_code=address_code,
            )

    def _evidence_gate(self, task_id: str) -> Tuple[Optional[str], Optional[str]]:
        outcome = self.analyze_evidence(task_id)
        if outcome is None:
            return None, None
        if isinstance(outcome, ExtractionSuccess):
            return outcome.address_code, None
        if self.settings.evidence_mode == "required":
            logger.error("task %s not approved: %s", task_id, describe_outcome(outcome))
            return None, f"Error - {describe_outcome(outcome)}"
        return None, None

    # -- Logging / returning / recovering ------------------------------------

    def record(self, record: TaskRecord) -> None:
        self._enter(ReviewState.LOGGING_OUTCOME)
        self.outcome_log.append(record)
        self.recorded += 1

    def return_to_list(self) -> bool:
        self._enter(ReviewState.RETURNING_TO_LIST)
        logger.info("returning to the task list")
        self.browser.goto(self.settings.list_url)
        apply_client_filter(self.browser, self.settings.client, self.locators)
        self.browser.wait_for_load("domcontentloaded")
        try:
            self.browser.wait_visible(self.locators.list_ready, self.timeouts.list_ready_ms)
        except ElementTimeout:
            logger.warning("task list did not load as expected, will retry")
            return False
        return True

    def recover(self) -> None:
        self._enter(ReviewState.RECOVERING)
        logger.info("recovering: reopening the list and reapplying the client filter")
        self.browser.goto(self.settings.list_url)
        apply_client_filter(self.browser, self.settings.client, self.locators)
        self.browser.wait_for_load("domcontentloaded")

    # -- Loop ----------------------------------------------------------------

    def process_next(self) -> Optional[TaskRecord]:
        """One full iteration. Returns the record, or ``None`` when no task opened."""

        task_id = self.open_next_task()
        if task_id is None:
            return None
        try:
            record = self.process_task(task_id)
        except Exception as exc:
            self.record(TaskRecord(task_id=task_id, status=TaskStatus.ERROR, detail=f"Error - {exc}"))
            raise
        self.record(record)
        self.return_to_list()
        return record

    def run(self, stop_event: Optional[threading.Event] = None, max_iterations: Optional[int] = None) -> int:
        """Process tasks until ``stop_event`` is set or ``max_iterations`` pass.

        Returns the number of tasks that produced a record.
        """

        stop = stop_event or threading.Event()
        start = self.recorded
        iterations = 0
        while not stop.is_set():
            if max_iterations is not None and iterations >= max_iterations:
                break
            iterations += 1
            try:
                self.process_next()
            except Exception:
                logger.exception("unexpected error in review loop")
                try:
                    self.recover()
                except Exception as exc:
                    logger.error("recovery failed: %s", exc)
                    stop.wait(self.settings.recovery_delay_sec)
            self._enter(ReviewState.SEARCHING)
        processed = self.recorded - start
        logger.info("review loop stopped after %d iterations, %d tasks recorded", iterations, processed)
        return processed
