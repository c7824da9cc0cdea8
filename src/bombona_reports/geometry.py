"""Pure geometry helpers for report charts and tables."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

PIE_START_ANGLE = -90.0
PIE_STEP_DEGREES = 5.0
MIN_ARC_STEPS = 2


@dataclass(frozen=True)
class Point:
    """2D point in document units."""

    x: float
    y: float

    def as_tuple(self) -> tuple[float, float]:
        return (self.x, self.y)


@dataclass(frozen=True)
class Rect:
    """Rectangle in document units, anchored at its top-left corner."""

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center_x(self) -> float:
        return self.x + (self.width / 2)


@dataclass(frozen=True)
class Slice:
    """One pie wedge expressed as a start angle and sweep, in degrees."""

    start: float
    sweep: float

    @property
    def end(self) -> float:
        return self.start + self.sweep


def format_number(value: float) -> str:
    """Format counts without a trailing `.0`."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def percentage_label(value: float, total: float) -> str:
    """Return `value/total` as a percentage with one decimal, or `0.0` for empty totals."""
    if total <= 0:
        return "0.0"
    return f"{(value / total) * 100:.1f}"


def slice_angles(values: Sequence[float]) -> tuple[float, ...]:
    """Return the central angle for every value; empty when the total is zero."""
    total = sum(values)
    if total <= 0:
        return ()
    return tuple((value / total) * 360.0 for value in values)


def pie_slices(values: Sequence[float], *, start_angle: float = PIE_START_ANGLE) -> tuple[Slice | None, ...]:
    """Lay out consecutive slices clockwise from `start_angle`.

    Zero values yield `None` and do not advance the angle.
    """
    angles = slice_angles(values)
    slices: list[Slice | None] = []
    current = start_angle
    for value, sweep in zip(values, angles, strict=True):
        if value <= 0:
            slices.append(None)
            continue
        slices.append(Slice(start=current, sweep=sweep))
        current += sweep
    return tuple(slices)


def arc_step_count(sweep: float, *, step_degrees: float = PIE_STEP_DEGREES) -> int:
    """Return the number of straight segments used to approximate an arc."""
    if step_degrees <= 0:
        msg = "step_degrees must be > 0."
        raise ValueError(msg)
    return max(MIN_ARC_STEPS, math.ceil(abs(sweep) / step_degrees))


def point_on_circle(center: Point, radius: float, angle_degrees: float) -> Point:
    radians = math.radians(angle_degrees)
    return Point(center.x + radius * math.cos(radians), center.y + radius * math.sin(radians))


def slice_polygon(center: Point, radius: float, wedge: Slice) -> tuple[Point, ...]:
    """Return a closed triangle-fan outline for one wedge: center, arc points, center."""
    if radius <= 0:
        msg = "radius must be > 0."
        raise ValueError(msg)
    steps = arc_step_count(wedge.sweep)
    arc = [
        point_on_circle(center, radius, wedge.start + wedge.sweep * (index / steps))
        for index in range(steps + 1)
    ]
    return (center, *arc, center)


def bar_rects(
    values: Sequence[float],
    *,
    x: float,
    y: float,
    width: float,
    height: float,
    gap: float = 2.0,
) -> tuple[Rect, ...]:
    """Return one bar per value, growing up from the baseline at `y + height`."""
    if not values:
        return ()
    max_value = max(values)
    bar_width = (width / len(values)) - gap
    if bar_width <= 0:
        msg = "chart width is too small for the number of bars."
        raise ValueError(msg)

    bars: list[Rect] = []
    for index, value in enumerate(values):
        bar_height = (value / max_value) * height if max_value > 0 else 0.0
        bar_x = x + index * (bar_width + gap)
        bars.append(Rect(x=bar_x, y=y + height - bar_height, width=bar_width, height=bar_height))
    return tuple(bars)


def line_chart_points(
    values: Sequence[float],
    *,
    x: float,
    y: float,
    width: float,
    height: float,
) -> tuple[Point, ...]:
    """Return plotted points spread evenly across `width`.

    The vertical scale uses `max(values, 1)` so all-zero series stay flat on the axis.
    """
    if not values:
        return ()
    max_value = max(max(values), 1)
    step_x = width / ((len(values) - 1) or 1)
    return tuple(
        Point(x + index * step_x, y + height - (value / max_value) * height)
        for index, value in enumerate(values)
    )


def gridline_y_positions(*, y: float, height: float, count: int = 4) -> tuple[float, ...]:
    """Return `count` evenly spaced horizontal gridlines, the last one on the baseline."""
    if count < 1:
        msg = "count must be >= 1."
        raise ValueError(msg)
    return tuple(y + (height / count) * index for index in range(1, count + 1))


def column_offsets(widths: Sequence[float], *, x: float, inset: float = 5.0) -> tuple[float, ...]:
    """Return the text x position of every column from cumulative widths."""
    offsets: list[float] = []
    current = x + inset
    for width in widths:
        offsets.append(current)
        current += width
    return tuple(offsets)
