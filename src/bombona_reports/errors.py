"""Error types raised while composing reports."""

from __future__ import annotations


class ReportError(Exception):
    """Base class for report generation failures."""


class DataShapeError(ReportError, ValueError):
    """Aggregated input is missing required fields or holds malformed values."""


class DrawingSinkError(ReportError, RuntimeError):
    """The underlying drawing backend failed to accept a command."""
