"""Base exception for setsync."""

from __future__ import annotations


class SetsyncError(Exception):
    """Base class for errors raised by setsync."""
