# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2024 Revisor contributors

"""Command-line entry for the review agent and its history."""
from __future__ import annotations

import argparse
import logging
import signal
import threading
from typing import Optional, Sequence

from ..errors import ConfigError, OcrEngineUnavailable
from ..evidence.pipeline import EvidencePipeline
from ..logging_utils import configure_logging, log_event
from ..portal.race import RaceDetector
from ..portal.session import apply_client_filter, login
from ..settings import EVIDENCE_MODES, ReviewSettings
from .machine import TaskReviewer
from .outcome_log import OutcomeLog, print_history

logger = logging.getLogger(__name__)


def _parse_review_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser("revisor review", description="Review and approve portal tasks")
    parser.add_argument("--client", help="Client name used to filter the task list")
    parser.add_argument("--list-url", help="URL of the task list")
    parser.add_argument("--log-file", help="Outcome log path (default: revisiones.log)")
    parser.add_argument("--evidence-mode", choices=EVIDENCE_MODES)
    parser.add_argument("--headed", action="store_true", help="Show the browser window")
    parser.add_argument("--max-tasks", type=int, default=None, help="Stop after this many loop iterations")
    parser.add_argument("--log-level", default=None)
    return parser.parse_args(list(argv) if argv is not None else None)


def build_reviewer(browser, settings: ReviewSettings, pipeline: Optional[EvidencePipeline] = None) -> TaskReviewer:
    return TaskReviewer(
        browser=browser,
        settings=settings,
        outcome_log=OutcomeLog(settings.outcome_log),
        race_detector=RaceDetector(timeout_ms=settings.timeouts.race_signal_ms),
        pipeline=pipeline,
    )


def _build_pipeline(settings: ReviewSettings) -> Optional[EvidencePipeline]:
    """OCR pipeline for the configured mode.

    Without a usable engine, ``advisory`` carries on without OCR while
    ``required`` refuses to start.
    """

    if settings.evidence_mode == "off":
        return None
    from ..evidence.tesseract import TesseractOcrEngine

    try:
        engine = TesseractOcrEngine()
    except OcrEngineUnavailable as exc:
        if settings.evidence_mode == "required":
            raise SystemExit(f"evidence_mode=required but OCR is unavailable: {exc}") from exc
        logger.warning("OCR unavailable, evidence analysis disabled: %s", exc)
        return None
    return EvidencePipeline(engine=engine, language=settings.ocr_lang)


def _install_stop_handlers(stop: threading.Event) -> None:
    def _handler(signum, frame):  # pragma: no cover - signal delivery
        logger.info("signal %s received, stopping after the current task", signum)
        stop.set()

    signal.signal(signal.SIGTERM, _handler)


def review_main(argv: Sequence[str] | None = None) -> int:
    args = _parse_review_args(argv)
    try:
        settings = ReviewSettings.from_env().with_overrides(
            client=args.client,
            list_url=args.list_url,
            outcome_log=args.log_file,
            evidence_mode=args.evidence_mode,
            headless=False if args.headed else None,
            log_level=args.log_level.upper() if args.log_level else None,
        )
        credentials = settings.require_credentials()
    except ConfigError as exc:
        raise SystemExit(str(exc)) from exc
    configure_logging(settings.log_level, settings.log_format)

    try:
        from ..portal.playwright_driver import open_browser
    except ImportError as exc:  # pragma: no cover
        raise SystemExit("playwright is not installed. Install with `pip install -e .`") from exc

    pipeline = _build_pipeline(settings)

    stop = threading.Event()
    _install_stop_handlers(stop)
    log_event(
        logger,
        "review.start",
        {"client": settings.client, "evidence_mode": settings.evidence_mode, "outcome_log": settings.outcome_log},
    )
    with open_browser(headless=settings.headless, action_timeout_ms=settings.timeouts.task_row_ms) as browser:
        browser.goto(settings.list_url)
        login(browser, credentials)
        apply_client_filter(browser, settings.client)
        browser.pause(settings.timeouts.settle_ms)
        reviewer = build_reviewer(browser, settings, pipeline)
        try:
            processed = reviewer.run(stop_event=stop, max_iterations=args.max_tasks)
        except KeyboardInterrupt:
            logger.info("interrupted")
            processed = reviewer.recorded
    log_event(logger, "review.stop", {"tasks": processed})
    return 0


def history_main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser("revisor history", description="Show the outcome log")
    parser.add_argument("--log-file", default=None, help="Outcome log path (default: revisiones.log)")
    parser.add_argument("--limit", type=int, default=None)
    args = parser.parse_args(list(argv) if argv is not None else None)

    path = args.log_file or ReviewSettings.from_env().outcome_log
    print_history(OutcomeLog(path).entries(), limit=args.limit)
    return 0
