"""Revisor: automated review of delivery-address submission tasks."""

from __future__ import annotations

from ._version import __version__

__all__ = ["__version__"]
