# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2024 Revisor contributors

"""Append-only audit trail of processed tasks.

Each line reads ``<timestamp> - ID: <task id> - Estado: <detail>``; tooling
downstream parses these labels, so the layout is fixed.
"""
from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import List, Optional, Union

from .records import TaskRecord

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%d/%m/%Y, %H:%M:%S"
_LINE_RE = re.compile(r"^(?P<ts>.*?) - ID: (?P<task_id>.*?) - Estado: (?P<detail>.*)$")

__all__ = ["OutcomeLog", "format_entry", "parse_entry", "print_history"]


def _one_line(value: str) -> str:
    return " ".join(value.split())


def format_entry(record: TaskRecord) -> str:
    """Render ``record`` as a single log line; embedded newlines are collapsed."""

    return (
        f"{record.timestamp.strftime(TIMESTAMP_FORMAT)} - ID: {_one_line(record.task_id)}"
        f" - Estado: {_one_line(record.detail)}"
    )


def parse_entry(line: str) -> Optional[dict]:
    match = _LINE_RE.match(line.rstrip("\n"))
    if match is None:
        return None
    return match.groupdict()


class OutcomeLog:
    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)

    def append(self, record: TaskRecord) -> bool:
        """Append one line for ``record``.

        Write failures are logged and reported as ``False``; they never stop
        the review loop.
        """

        line = format_entry(record) + "\n"
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "a", encoding="utf-8") as fw:
                fw.write(line)
        except OSError as exc:
            logger.error("cannot write outcome log %s: %s", self.path, exc)
            return False
        return True

    def entries(self) -> List[dict]:
        if not self.path.exists():
            return []
        records: List[dict] = []
        with open(self.path, "r", encoding="utf-8") as fr:
            for line in fr:
                if not line.strip():
                    continue
                parsed = parse_entry(line)
                if parsed is not None:
                    records.append(parsed)
        return records


def print_history(entries: List[dict], limit: Optional[int] = None) -> None:
    """Pretty-print the most recent outcome log entries to stdout."""

    if limit is not None and limit > 0:
        entries = entries[-limit:]
    if not entries:
        print("(no history)")
        return
    w_id = max(7, max(len(e["task_id"]) for e in entries))
    header = f"{'timestamp':<22}  {'task id':<{w_id}}  estado"
    print(header)
    print("-" * len(header))
    for entry in entries:
        print(f"{entry['ts']:<22}  {entry['task_id']:<{w_id}}  {entry['detail']}")
