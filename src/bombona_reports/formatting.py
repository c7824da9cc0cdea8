"""Portuguese labels and timestamp formatting."""

from __future__ import annotations

from datetime import datetime

from .config import MONTH_NAMES_EN_TO_PT, MONTH_NAMES_PT

INVALID_MONTH_LABEL = "Mês inválido"


def month_name(month: int) -> str:
    """Return the Portuguese name for a 1-12 month number."""
    if isinstance(month, bool) or not isinstance(month, int) or not 1 <= month <= 12:
        return INVALID_MONTH_LABEL
    return MONTH_NAMES_PT[month - 1]


def translate_month(name: str) -> str:
    """Translate an English month name to Portuguese; unknown names pass through."""
    stripped = name.strip()
    return MONTH_NAMES_EN_TO_PT.get(stripped, name)


def format_long_date(value: datetime) -> str:
    """Format as `19 de outubro de 2026`."""
    return f"{value.day:02d} de {MONTH_NAMES_PT[value.month - 1].lower()} de {value.year}"


def format_generated_at(value: datetime) -> str:
    """Footer timestamp line."""
    return f"Gerado em {format_long_date(value)} às {value:%H:%M}"
