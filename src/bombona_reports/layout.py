"""Layout primitives: banner, footer, section titles, cards and page breaks.

Every primitive takes the drawing surface and the current cursor `y` and,
where it occupies vertical space, returns the cursor below what it drew.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from .config import FOOTER_ATTRIBUTION, ICON_BOX, Theme
from .drawing import FILL, STROKE, DrawingPrimitives
from .errors import DrawingSinkError
from .formatting import format_generated_at
from .geometry import format_number
from .profiles import DEFAULT_REPORT_PROFILE, ReportProfile, line_height

logger = logging.getLogger(__name__)

IMAGE_FALLBACK_NOTICE = "Erro ao carregar gráficos. Tente gerar o relatório novamente."
NO_DATA_MESSAGE = "Nenhum dado disponível para o período selecionado"

CARD_RADIUS = 4
CARD_ACCENT_HEIGHT = 6
CARD_SHADOW_OFFSET = 1
CARD_SHADOW_OPACITY = 0.03


@dataclass(frozen=True)
class MetricCard:
    """A single headline number shown as a card."""

    label: str
    value: str | int | float
    icon: str = ICON_BOX
    accent_color: Any = None

    @property
    def display_value(self) -> str:
        if isinstance(self.value, str):
            return self.value
        return format_number(self.value)


def ensure_space(
    pdf: DrawingPrimitives,
    current_y: float,
    required_height: float,
    *,
    profile: ReportProfile = DEFAULT_REPORT_PROFILE,
) -> float:
    """Start a new page when a block of `required_height` would cross the break line.

    Returns the cursor for the block: the continuation top margin after a
    break, `current_y` otherwise. Nothing is drawn.
    """
    if required_height < 0:
        msg = "required_height must be >= 0."
        raise ValueError(msg)
    if current_y + required_height > profile.page_break_y:
        pdf.add_page()
        logger.debug(
            "Page break at y=%.1f for %.1f units; now on page %d.",
            current_y,
            required_height,
            pdf.page_count,
        )
        return profile.continuation_top
    return current_y


def draw_text_lines(
    pdf: DrawingPrimitives,
    lines: Sequence[str],
    x: float,
    y: float,
    *,
    font: str,
    size: float,
    color: Any,
    align: str = "left",
    profile: ReportProfile = DEFAULT_REPORT_PROFILE,
) -> float:
    """Draw pre-wrapped lines from baseline `y`; return the baseline after the last line."""
    step = line_height(size, profile=profile)
    for index, text_line in enumerate(lines):
        pdf.text(text_line, x, y + index * step, font=font, size=size, color=color, align=align)
    return y + len(lines) * step


def draw_header(
    pdf: DrawingPrimitives,
    title: str,
    subtitle: str,
    period: str,
    *,
    profile: ReportProfile = DEFAULT_REPORT_PROFILE,
    theme: type = Theme,
) -> float:
    """Draw the top banner on the current page and return the first body cursor."""
    width = profile.page_width
    height = profile.header_height
    center_x = width / 2
    typography = profile.typography

    pdf.set_fill_color(theme.PRIMARY)
    pdf.rect(0, 0, width, height, style=FILL)

    pdf.set_fill_color(theme.WHITE)
    pdf.set_opacity(0.05)
    pdf.rect(0, 0, width, height, style=FILL)
    pdf.set_opacity(0.15)
    pdf.circle(25, 30, 15, style=FILL)
    pdf.set_opacity(1.0)

    # Simplified container silhouette inside the badge.
    pdf.round_rect(21, 23, 8, 14, 2, style=FILL)

    pdf.text(
        title, center_x, 25, font=theme.FONT_BOLD, size=typography.title, color=theme.WHITE, align="center"
    )
    pdf.text(
        subtitle,
        center_x,
        35,
        font=theme.FONT_REGULAR,
        size=typography.subtitle,
        color=theme.WHITE,
        align="center",
    )
    pdf.text(
        period, center_x, 45, font=theme.FONT_BOLD, size=typography.body + 2, color=theme.WHITE, align="center"
    )

    pdf.set_stroke_color(theme.WHITE)
    pdf.set_line_width(0.5)
    pdf.line(50, 52, width - 50, 52)
    return profile.body_top


def draw_footer(
    pdf: DrawingPrimitives,
    generated_at: datetime,
    *,
    profile: ReportProfile = DEFAULT_REPORT_PROFILE,
    theme: type = Theme,
) -> None:
    """Draw the divider, generation timestamp and attribution near the bottom margin."""
    footer_y = profile.footer_y
    center_x = profile.page_width / 2
    caption = profile.typography.caption

    pdf.set_opacity(1.0)
    pdf.set_stroke_color(theme.BORDER)
    pdf.set_line_width(0.3)
    pdf.line(profile.page_margin, footer_y - 5, profile.content_right, footer_y - 5)

    pdf.text(
        format_generated_at(generated_at),
        center_x,
        footer_y,
        font=theme.FONT_REGULAR,
        size=caption,
        color=theme.TEXT_MUTED,
        align="center",
    )
    pdf.text(
        FOOTER_ATTRIBUTION,
        center_x,
        footer_y + 4,
        font=theme.FONT_BOLD,
        size=caption,
        color=theme.TEXT_MUTED,
        align="center",
    )


def draw_section_title(
    pdf: DrawingPrimitives,
    text: str,
    y: float,
    *,
    icon: str | None = None,
    profile: ReportProfile = DEFAULT_REPORT_PROFILE,
    theme: type = Theme,
) -> float:
    """Draw a bold section title with a two-tone rule underneath."""
    x = profile.page_margin
    if icon:
        pdf.text(icon, x, y + 5, font=theme.FONT_ICON, size=12, color=theme.PRIMARY)

    pdf.text(
        text,
        x + 8 if icon else x,
        y + 5,
        font=theme.FONT_BOLD,
        size=profile.typography.heading,
        color=theme.TEXT_PRIMARY,
    )

    rule_y = y + 8
    pdf.set_stroke_color(theme.PRIMARY)
    pdf.set_line_width(1.5)
    pdf.line(x, rule_y, x + 30, rule_y)

    pdf.set_stroke_color(theme.PRIMARY_LIGHT)
    pdf.set_line_width(0.5)
    pdf.line(x + 32, rule_y, profile.content_right, rule_y)
    return y + 12


def draw_metric_card(
    pdf: DrawingPrimitives,
    card: MetricCard,
    x: float,
    y: float,
    width: float,
    height: float,
    *,
    profile: ReportProfile = DEFAULT_REPORT_PROFILE,
    theme: type = Theme,
) -> None:
    """Draw one metric card; callers place rows of cards by advancing `x`."""
    if width <= 0 or height <= 0:
        msg = "card width and height must be > 0."
        raise ValueError(msg)
    accent = card.accent_color if card.accent_color is not None else theme.PRIMARY
    typography = profile.typography

    pdf.set_fill_color(theme.SHADOW)
    pdf.set_opacity(CARD_SHADOW_OPACITY)
    pdf.round_rect(
        x + CARD_SHADOW_OFFSET, y + CARD_SHADOW_OFFSET, width, height, CARD_RADIUS, style=FILL
    )
    pdf.set_opacity(1.0)

    pdf.set_fill_color(theme.BACKGROUND_CARD)
    pdf.round_rect(x, y, width, height, CARD_RADIUS, style=FILL)

    pdf.set_stroke_color(theme.BORDER_LIGHT)
    pdf.set_line_width(0.3)
    pdf.round_rect(x, y, width, height, CARD_RADIUS, style=STROKE)

    # Accent strip: rounded top corners, square bottom edge.
    pdf.set_fill_color(accent)
    pdf.round_rect(x, y, width, CARD_ACCENT_HEIGHT, CARD_RADIUS, style=FILL)
    pdf.set_fill_color(theme.BACKGROUND_CARD)
    pdf.rect(x, y + CARD_ACCENT_HEIGHT / 2, width, CARD_ACCENT_HEIGHT / 2, style=FILL)

    pdf.text(card.icon, x + 8, y + 20, font=theme.FONT_ICON, size=16, color=accent)

    pdf.text(
        card.display_value,
        x + width / 2,
        y + 22,
        font=theme.FONT_BOLD,
        size=typography.title - 2,
        color=theme.TEXT_PRIMARY,
        align="center",
    )

    label_lines = pdf.split_text(card.label, width - 8, theme.FONT_REGULAR, typography.caption)
    draw_text_lines(
        pdf,
        label_lines,
        x + width / 2,
        y + 30,
        font=theme.FONT_REGULAR,
        size=typography.caption,
        color=theme.TEXT_SECONDARY,
        align="center",
        profile=profile,
    )


def draw_card_row(
    pdf: DrawingPrimitives,
    cards: Sequence[MetricCard],
    x: float,
    y: float,
    *,
    width: float,
    height: float,
    gap: float,
    profile: ReportProfile = DEFAULT_REPORT_PROFILE,
    theme: type = Theme,
) -> float:
    """Draw cards left to right and return the cursor below the row."""
    for card in cards:
        draw_metric_card(pdf, card, x, y, width, height, profile=profile, theme=theme)
        x += width + gap
    return y + height


def draw_note_card(
    pdf: DrawingPrimitives,
    text: str,
    y: float,
    *,
    height: float = 30,
    profile: ReportProfile = DEFAULT_REPORT_PROFILE,
    theme: type = Theme,
) -> float:
    """Draw a tinted full-width card holding wrapped body text."""
    x = profile.page_margin
    width = profile.content_width
    size = profile.typography.body

    pdf.set_fill_color(theme.PRIMARY_ULTRA_LIGHT)
    pdf.round_rect(x, y, width, height, CARD_RADIUS, style=FILL)
    pdf.set_stroke_color(theme.PRIMARY_LIGHT)
    pdf.set_line_width(0.5)
    pdf.round_rect(x, y, width, height, CARD_RADIUS, style=STROKE)

    lines = pdf.split_text(text, width - 10, theme.FONT_REGULAR, size)
    draw_text_lines(
        pdf,
        lines,
        x + 5,
        y + 8,
        font=theme.FONT_REGULAR,
        size=size,
        color=theme.TEXT_PRIMARY,
        profile=profile,
    )
    return y + height + profile.small_gap


def draw_centered_message(
    pdf: DrawingPrimitives,
    message: str,
    y: float,
    *,
    profile: ReportProfile = DEFAULT_REPORT_PROFILE,
    theme: type = Theme,
) -> float:
    pdf.text(
        message,
        profile.page_width / 2,
        y,
        font=theme.FONT_REGULAR,
        size=profile.typography.heading,
        color=theme.TEXT_SECONDARY,
        align="center",
    )
    return y + profile.element_gap


def draw_image_or_notice(
    pdf: DrawingPrimitives,
    data: bytes,
    y: float,
    *,
    profile: ReportProfile = DEFAULT_REPORT_PROFILE,
    theme: type = Theme,
) -> float:
    """Embed a raster image across the content width.

    A backend failure is logged and replaced with a text notice; the rest of
    the report still renders.
    """
    try:
        drawn_height = pdf.image(data, profile.page_margin, y, profile.content_width)
    except DrawingSinkError as exc:
        logger.warning("Chart image could not be embedded: %s", exc)
        pdf.text(
            IMAGE_FALLBACK_NOTICE,
            profile.page_margin,
            y + 20,
            font=theme.FONT_REGULAR,
            size=profile.typography.body,
            color=theme.ERROR,
        )
        return y + 20 + profile.element_gap
    return y + drawn_height + profile.small_gap
