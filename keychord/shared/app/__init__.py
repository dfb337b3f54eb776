"""Application-level shared helpers."""

from __future__ import annotations

from .runtime import RuntimeConfig

__all__ = ["RuntimeConfig"]
