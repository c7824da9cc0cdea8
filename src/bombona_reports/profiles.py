"""Page and typography profiles for report rendering."""

from __future__ import annotations

from dataclasses import dataclass, field

from .config import (
    CONTINUATION_TOP,
    FOOTER_Y,
    HEADER_HEIGHT,
    PAGE_BREAK_Y,
    PAGE_HEIGHT,
    PAGE_MARGIN,
    PAGE_WIDTH,
)


@dataclass(frozen=True)
class Typography:
    """Font sizes in points."""

    title: float = 20
    subtitle: float = 14
    heading: float = 12
    body: float = 9
    caption: float = 7
    small: float = 6
    line_height_factor: float = 1.15


@dataclass(frozen=True)
class ReportProfile:
    """Immutable page geometry shared by every primitive and composer."""

    page_width: float = PAGE_WIDTH
    page_height: float = PAGE_HEIGHT
    page_margin: float = PAGE_MARGIN
    header_height: float = HEADER_HEIGHT
    footer_y: float = FOOTER_Y
    page_break_y: float = PAGE_BREAK_Y
    continuation_top: float = CONTINUATION_TOP
    section_gap: float = 15
    card_gap: float = 10
    element_gap: float = 8
    small_gap: float = 5
    chart_radius: float = 30
    repeat_table_header: bool = False
    typography: Typography = field(default_factory=Typography)

    @property
    def content_width(self) -> float:
        return self.page_width - (2 * self.page_margin)

    @property
    def content_right(self) -> float:
        return self.page_width - self.page_margin

    @property
    def body_top(self) -> float:
        """First cursor position below the header banner."""
        return self.header_height + self.section_gap


DEFAULT_REPORT_PROFILE = ReportProfile()


def line_height(font_size: float, *, profile: ReportProfile = DEFAULT_REPORT_PROFILE) -> float:
    """Return the baseline-to-baseline distance in document units for a font size."""
    if font_size <= 0:
        msg = "font_size must be > 0."
        raise ValueError(msg)
    return font_size * profile.typography.line_height_factor * (25.4 / 72.0)
