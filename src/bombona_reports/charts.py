"""Chart renderers drawn from vector primitives.

Renderers only draw inside the box they are given. Page breaks are the
caller's job: call `ensure_space` with the chart's height estimate first.
"""

from __future__ import annotations

import math
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import Any

from .config import Theme
from .drawing import FILL, STROKE, DrawingPrimitives
from .errors import DataShapeError
from .geometry import (
    Point,
    bar_rects,
    format_number,
    gridline_y_positions,
    line_chart_points,
    percentage_label,
    pie_slices,
    point_on_circle,
    slice_polygon,
)
from .profiles import DEFAULT_REPORT_PROFILE, ReportProfile, line_height

PIE_CHART_HEIGHT = 70
BAR_CHART_HEIGHT = 70
LINE_CHART_HEIGHT = 75

LEGEND_SWATCH_SIZE = 4
LEGEND_ROW_HEIGHT = 6
DONUT_HOLE_RATIO = 0.5
POINT_OUTER_RADIUS = 2.5
POINT_INNER_RADIUS = 1.8
BAR_GAP = 2
BAR_HIGHLIGHT_HEIGHT = 3
BAR_HIGHLIGHT_OPACITY = 0.2


@dataclass(frozen=True)
class ChartEntry:
    """One labelled value, optionally with its own color."""

    label: str
    value: float
    color: Any = None


@dataclass(frozen=True)
class ChartDataset:
    """Ordered chart entries with non-negative values."""

    entries: tuple[ChartEntry, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "entries", tuple(self.entries))
        for entry in self.entries:
            if isinstance(entry.value, bool) or not isinstance(entry.value, (int, float)):
                msg = f"chart value for '{entry.label}' must be a number."
                raise DataShapeError(msg)
            if not math.isfinite(entry.value):
                msg = f"chart value for '{entry.label}' must be a finite number."
                raise DataShapeError(msg)
            if entry.value < 0:
                msg = f"chart value for '{entry.label}' must be >= 0."
                raise DataShapeError(msg)

    def __iter__(self) -> Iterator[ChartEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def values(self) -> tuple[float, ...]:
        return tuple(entry.value for entry in self)

    @property
    def total(self) -> float:
        return sum(self.values)


def _entry_color(entry: ChartEntry, fallback: Any) -> Any:
    return entry.color if entry.color is not None else fallback


def draw_pie_chart(
    pdf: DrawingPrimitives,
    center_x: float,
    center_y: float,
    radius: float,
    dataset: ChartDataset,
    *,
    donut: bool = True,
    theme: type = Theme,
) -> None:
    """Draw consecutive slices clockwise from 12 o'clock.

    Nothing is drawn when the dataset total is zero.
    """
    if radius <= 0:
        msg = "radius must be > 0."
        raise ValueError(msg)
    if dataset.total <= 0:
        return

    center = Point(center_x, center_y)
    for entry, wedge in zip(dataset, pie_slices(dataset.values), strict=True):
        if wedge is None:
            continue
        pdf.set_fill_color(_entry_color(entry, theme.PRIMARY))
        pdf.path([point.as_tuple() for point in slice_polygon(center, radius, wedge)], style=FILL)

        pdf.set_stroke_color(theme.WHITE)
        pdf.set_line_width(0.8)
        for angle in (wedge.start, wedge.end):
            edge = point_on_circle(center, radius, angle)
            pdf.line(center.x, center.y, edge.x, edge.y)

    if donut:
        pdf.set_fill_color(theme.BACKGROUND_CARD)
        pdf.circle(center_x, center_y, radius * DONUT_HOLE_RATIO, style=FILL)


def legend_label(entry: ChartEntry, total: float) -> str:
    return f"{entry.label}: {format_number(entry.value)} ({percentage_label(entry.value, total)}%)"


def draw_legend(
    pdf: DrawingPrimitives,
    x: float,
    y: float,
    dataset: ChartDataset,
    total: float,
    *,
    profile: ReportProfile = DEFAULT_REPORT_PROFILE,
    theme: type = Theme,
) -> float:
    """Draw a swatch and `label: value (pct%)` line per entry; return the final cursor."""
    current_y = y
    size = profile.typography.caption + 1
    for entry in dataset:
        pdf.set_fill_color(_entry_color(entry, theme.PRIMARY))
        pdf.round_rect(x, current_y, LEGEND_SWATCH_SIZE, LEGEND_SWATCH_SIZE, 0.5, style=FILL)
        pdf.text(
            legend_label(entry, total),
            x + 7,
            current_y + 3,
            font=theme.FONT_REGULAR,
            size=size,
            color=theme.TEXT_SECONDARY,
        )
        current_y += LEGEND_ROW_HEIGHT
    return current_y


def draw_bar_chart(
    pdf: DrawingPrimitives,
    x: float,
    y: float,
    width: float,
    height: float,
    dataset: ChartDataset,
    *,
    color: Any = None,
    profile: ReportProfile = DEFAULT_REPORT_PROFILE,
    theme: type = Theme,
) -> None:
    """Draw vertical bars scaled to the largest value, labelled above and below."""
    if not dataset:
        return
    bar_color = color if color is not None else theme.PRIMARY
    typography = profile.typography

    bars = bar_rects(dataset.values, x=x, y=y, width=width, height=height, gap=BAR_GAP)
    label_step = line_height(typography.small, profile=profile)

    for entry, bar in zip(dataset, bars, strict=True):
        if bar.height > 0:
            pdf.set_fill_color(_entry_color(entry, bar_color))
            pdf.round_rect(bar.x, bar.y, bar.width, bar.height, 1, style=FILL)

            pdf.set_fill_color(theme.WHITE)
            pdf.set_opacity(BAR_HIGHLIGHT_OPACITY)
            pdf.round_rect(bar.x, bar.y, bar.width, min(bar.height, BAR_HIGHLIGHT_HEIGHT), 1, style=FILL)
            pdf.set_opacity(1.0)

        if entry.value > 0:
            pdf.text(
                format_number(entry.value),
                bar.center_x,
                bar.y - 2,
                font=theme.FONT_BOLD,
                size=typography.caption,
                color=theme.TEXT_PRIMARY,
                align="center",
            )

        label_lines = pdf.split_text(entry.label, bar.width, theme.FONT_REGULAR, typography.small)
        for index, label_line in enumerate(label_lines):
            pdf.text(
                label_line,
                bar.center_x,
                y + height + 4 + index * label_step,
                font=theme.FONT_REGULAR,
                size=typography.small,
                color=theme.TEXT_SECONDARY,
                align="center",
            )


def draw_line_chart(
    pdf: DrawingPrimitives,
    x: float,
    y: float,
    width: float,
    height: float,
    dataset: ChartDataset,
    *,
    color: Any = None,
    profile: ReportProfile = DEFAULT_REPORT_PROFILE,
    theme: type = Theme,
) -> None:
    """Draw axes, four gridlines, a polyline through the points and point markers."""
    if not dataset:
        return
    line_color = color if color is not None else theme.PRIMARY
    points = line_chart_points(dataset.values, x=x, y=y, width=width, height=height)

    pdf.set_stroke_color(theme.BORDER)
    pdf.set_line_width(0.5)
    pdf.line(x, y + height, x + width, y + height)
    pdf.line(x, y, x, y + height)

    pdf.set_stroke_color(theme.BORDER_LIGHT)
    pdf.set_line_width(0.2)
    for grid_y in gridline_y_positions(y=y, height=height):
        pdf.line(x, grid_y, x + width, grid_y)

    if len(points) > 1:
        pdf.set_stroke_color(line_color)
        pdf.set_line_width(1.5)
        pdf.path([point.as_tuple() for point in points], style=STROKE, closed=False)

    for entry, point in zip(dataset, points, strict=True):
        pdf.set_fill_color(theme.WHITE)
        pdf.circle(point.x, point.y, POINT_OUTER_RADIUS, style=FILL)
        pdf.set_fill_color(line_color)
        pdf.circle(point.x, point.y, POINT_INNER_RADIUS, style=FILL)

        pdf.text(
            entry.label,
            point.x,
            y + height + 5,
            font=theme.FONT_REGULAR,
            size=profile.typography.caption,
            color=theme.TEXT_SECONDARY,
            align="center",
        )


def status_dataset(
    values: Sequence[tuple[str, float, Any]],
) -> ChartDataset:
    """Build a dataset from `(label, value, color)` triples."""
    return ChartDataset(
        tuple(ChartEntry(label=label, value=value, color=color) for label, value, color in values)
    )
