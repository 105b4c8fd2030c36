"""Address-code extraction from receipt text."""
from __future__ import annotations

import re
from typing import Optional

# Compatibility contract: the label, optional whitespace, then JMB- up to the
# next whitespace character.
ADDRESS_PATTERN = r"Domicilio:\s*(JMB-[^\s]+)"
_ADDRESS_RE = re.compile(ADDRESS_PATTERN)
ADDRESS_CODE_RE = re.compile(r"JMB-[^\s]+")

__all__ = ["ADDRESS_PATTERN", "ADDRESS_CODE_RE", "extract_address_code"]


def extract_address_code(text: Optional[str]) -> Optional[str]:
    """Return the first ``JMB-`` code following ``Domicilio:``, or ``None``."""

    if not text:
        return None
    match = _ADDRESS_RE.search(text)
    if match is None:
        return None
    return match.group(1)
