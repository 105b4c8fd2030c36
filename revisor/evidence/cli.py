# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2024 Revisor contributors

"""Command-line entry for batch evidence analysis.

Runs the classify/extract pipeline over image files on disk, without a
browser, and emits the resulting outcome as JSON.
"""
from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Sequence

from pydantic import TypeAdapter

from ..logging_utils import configure_logging
from . import EvidencePipeline, ExtractionOutcome, FileEvidenceSource, MockOcrEngine, TesseractOcrEngine

_OUTCOME_ADAPTER = TypeAdapter(ExtractionOutcome)


def build_pipeline(*, lang: str = "spa", rescan: bool = False, use_mocks: bool = False) -> EvidencePipeline:
    engine = MockOcrEngine() if use_mocks else TesseractOcrEngine()
    return EvidencePipeline(engine=engine, language=lang, rescan_winner=rescan)


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser("revisor evidence", description="Find the receipt and its JMB- address")
    parser.add_argument("images", nargs="+", help="Evidence image files, in order")
    parser.add_argument("--lang", default="spa", help="Tesseract language model")
    parser.add_argument("--rescan", action="store_true", help="Run OCR again on the winning image")
    parser.add_argument("--out", default="-", help="Output file path or '-' for stdout")
    parser.add_argument("--log-level", default="WARNING")
    parser.add_argument(
        "--use-mocks",
        action="store_true",
        help="Use the mock OCR engine (no Tesseract needed) for smoke tests",
    )
    return parser.parse_args(list(argv) if argv is not None else None)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    configure_logging(args.log_level)

    pipeline = build_pipeline(lang=args.lang, rescan=args.rescan, use_mocks=args.use_mocks)
    outcome = pipeline.analyze_source(FileEvidenceSource(args.images))
    payload = json.dumps(_OUTCOME_ADAPTER.dump_python(outcome, mode="json"), ensure_ascii=False, indent=2)

    if args.out == "-":
        print(payload)
    else:
        Path(args.out).write_text(payload + "\n", encoding="utf-8")
    return 0 if outcome.kind == "success" else 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
