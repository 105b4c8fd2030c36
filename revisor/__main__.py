#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Unified CLI entry point for revisor."""
from __future__ import annotations

import sys
from textwrap import dedent

_DEFAULT_COMMAND = "review"


def _print_help() -> None:
    msg = dedent(
        """
        Usage:
          python -m revisor [command] [args...]

        Commands:
          review              Log in, filter by client and review tasks (default)
          evidence            Analyse evidence image files and print the outcome
          history             Print the outcome log
          help                Show this message

        Examples:
          REVISOR_USERNAME=... REVISOR_PASSWORD=... python -m revisor review --client "Liverpool Delivery Integracion"
          python -m revisor evidence ticket.png foto1.jpg --out outcome.json
          python -m revisor history --limit 20
        """
    ).strip()
    print(msg)


def _dispatch(cmd: str, argv: list[str]) -> int:
    if cmd == "evidence":
        from .evidence.cli import main as evidence_main

        return evidence_main(argv)
    if cmd == "history":
        from .review.cli import history_main

        return history_main(argv)
    from .review.cli import review_main

    return review_main(argv)


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    if not argv:
        return _dispatch(_DEFAULT_COMMAND, [])
    cmd = argv[0]
    if cmd in {"-h", "--help", "help"}:
        _print_help()
        return 0
    if cmd in {"review", "evidence", "history"}:
        return _dispatch(cmd, argv[1:])
    return _dispatch(_DEFAULT_COMMAND, argv)


if __name__ == "__main__":
    raise SystemExit(main())
