"""Zebra-striped table renderer with mid-table page breaks."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from .config import Theme
from .drawing import FILL, DrawingPrimitives
from .geometry import column_offsets, format_number
from .profiles import DEFAULT_REPORT_PROFILE, ReportProfile

logger = logging.getLogger(__name__)

PLACEHOLDER = "-"
HEADER_HEIGHT = 10
ROW_HEIGHT = 8
CELL_INSET = 5
TRAILING_GAP = 5


@dataclass(frozen=True)
class TableColumn:
    """One column: header label, width in document units and the row key it reads."""

    header: str
    width: float
    key: str


@dataclass(frozen=True)
class TableSpec:
    columns: tuple[TableColumn, ...]
    rows: tuple[Mapping[str, Any], ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "columns", tuple(self.columns))
        object.__setattr__(self, "rows", tuple(self.rows))
        if not self.columns:
            msg = "a table needs at least one column."
            raise ValueError(msg)
        if any(column.width <= 0 for column in self.columns):
            msg = "column widths must be > 0."
            raise ValueError(msg)


def cell_text(row: Mapping[str, Any], key: str) -> str:
    """Return the display text for one cell, or the placeholder when absent."""
    value = row.get(key)
    if value is None or value == "":
        return PLACEHOLDER
    if isinstance(value, float):
        return format_number(value)
    return str(value)


def zebra_color(index: int, *, theme: type = Theme) -> Any:
    return theme.BACKGROUND if index % 2 == 0 else theme.BACKGROUND_CARD


def _draw_header_row(
    pdf: DrawingPrimitives,
    spec: TableSpec,
    offsets: Sequence[float],
    x: float,
    y: float,
    width: float,
    *,
    profile: ReportProfile,
    theme: type,
) -> float:
    pdf.set_fill_color(theme.PRIMARY)
    pdf.round_rect(x, y, width, HEADER_HEIGHT, 2, style=FILL)
    for column, column_x in zip(spec.columns, offsets, strict=True):
        pdf.text(
            column.header,
            column_x,
            y + 6,
            font=theme.FONT_BOLD,
            size=profile.typography.caption + 1,
            color=theme.WHITE,
        )
    return y + HEADER_HEIGHT


def draw_table(
    pdf: DrawingPrimitives,
    spec: TableSpec,
    x: float,
    y: float,
    width: float,
    *,
    repeat_header: bool = False,
    profile: ReportProfile = DEFAULT_REPORT_PROFILE,
    theme: type = Theme,
) -> float:
    """Draw the header bar and one striped row per record.

    After each row that ends below the break line a new page is started at the
    continuation margin. The header is redrawn there only with `repeat_header`.
    Returns the cursor after the last row plus a small gap.
    """
    offsets = column_offsets([column.width for column in spec.columns], x=x, inset=CELL_INSET)
    current_y = _draw_header_row(pdf, spec, offsets, x, y, width, profile=profile, theme=theme)

    for index, row in enumerate(spec.rows):
        pdf.set_fill_color(zebra_color(index, theme=theme))
        pdf.rect(x, current_y, width, ROW_HEIGHT, style=FILL)

        for column, column_x in zip(spec.columns, offsets, strict=True):
            pdf.text(
                cell_text(row, column.key),
                column_x,
                current_y + 5,
                font=theme.FONT_REGULAR,
                size=profile.typography.caption,
                color=theme.TEXT_PRIMARY,
            )

        current_y += ROW_HEIGHT
        if current_y > profile.page_break_y:
            pdf.add_page()
            current_y = profile.continuation_top
            logger.debug("Table continues on page %d after row %d.", pdf.page_count, index + 1)
            if repeat_header and index < len(spec.rows) - 1:
                current_y = _draw_header_row(
                    pdf, spec, offsets, x, current_y, width, profile=profile, theme=theme
                )

    return current_y + TRAILING_GAP
