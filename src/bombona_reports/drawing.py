"""Drawing primitives and backend adapters."""

from __future__ import annotations

import io
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol

from reportlab.lib import colors
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader, simpleSplit
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfgen import canvas

from .errors import DrawingSinkError
from .profiles import DEFAULT_REPORT_PROFILE, ReportProfile

logger = logging.getLogger(__name__)

FILL = "fill"
STROKE = "stroke"
FILL_STROKE = "fill_stroke"

_STYLE_FLAGS = {
    FILL: (1, 0),
    STROKE: (0, 1),
    FILL_STROKE: (1, 1),
}
_TEXT_ALIGNMENTS = ("left", "center", "right")


def style_flags(style: str) -> tuple[int, int]:
    """Return ReportLab-style `(fill, stroke)` flags for a paint style."""
    try:
        return _STYLE_FLAGS[style]
    except KeyError:
        valid = ", ".join(_STYLE_FLAGS)
        msg = f"unknown paint style '{style}'. Valid styles: {valid}."
        raise ValueError(msg) from None


class DrawingPrimitives(Protocol):
    """Backend-agnostic drawing surface used by layout code.

    Coordinates are document units on a top-left origin page with y growing
    downward. Off-page coordinates are never rejected.
    """

    @property
    def page_count(self) -> int: ...
    def set_fill_color(self, color: Any) -> None: ...
    def set_stroke_color(self, color: Any) -> None: ...
    def set_line_width(self, width: float) -> None: ...
    def set_opacity(self, alpha: float) -> None: ...
    def rect(self, x: float, y: float, width: float, height: float, *, style: str = FILL) -> None: ...
    def round_rect(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        radius: float,
        *,
        style: str = FILL,
    ) -> None: ...
    def circle(self, x: float, y: float, radius: float, *, style: str = FILL) -> None: ...
    def line(self, x1: float, y1: float, x2: float, y2: float) -> None: ...
    def path(
        self, points: Sequence[tuple[float, float]], *, style: str = FILL, closed: bool = True
    ) -> None: ...
    def text(
        self,
        content: str,
        x: float,
        y: float,
        *,
        font: str,
        size: float,
        color: Any,
        align: str = "left",
    ) -> None: ...
    def image(self, data: bytes, x: float, y: float, width: float, height: float | None = None) -> float: ...
    def string_width(self, text: str, font: str, size: float) -> float: ...
    def split_text(self, text: str, width: float, font: str, size: float) -> list[str]: ...
    def add_page(self) -> None: ...
    def serialize(self) -> bytes: ...


@dataclass(frozen=True)
class DrawCommand:
    """One recorded drawing call plus the paint state it was issued under."""

    op: str
    args: tuple[Any, ...] = ()
    options: dict[str, Any] = field(default_factory=dict)
    fill_color: Any = None
    stroke_color: Any = None
    opacity: float = 1.0


@dataclass
class Page:
    """Ordered draw commands for one page."""

    number: int
    commands: list[DrawCommand] = field(default_factory=list)

    def ops(self, *names: str) -> list[DrawCommand]:
        """Return commands whose op is one of `names` (all when empty)."""
        if not names:
            return list(self.commands)
        return [command for command in self.commands if command.op in names]


class ReportLabCanvas:
    """Replay target translating document units onto a ReportLab canvas."""

    def __init__(self, target: canvas.Canvas, *, page_height: float) -> None:
        self._target = target
        self._page_height = page_height

    def _y(self, y: float) -> float:
        return (self._page_height - y) * mm

    def set_fill_color(self, color: Any) -> None:
        self._target.setFillColor(color)

    def set_stroke_color(self, color: Any) -> None:
        self._target.setStrokeColor(color)

    def set_line_width(self, width: float) -> None:
        self._target.setLineWidth(width * mm)

    def set_opacity(self, alpha: float) -> None:
        self._target.setFillAlpha(alpha)
        self._target.setStrokeAlpha(alpha)

    def rect(self, x: float, y: float, width: float, height: float, *, style: str = FILL) -> None:
        fill, stroke = style_flags(style)
        self._target.rect(x * mm, self._y(y + height), width * mm, height * mm, fill=fill, stroke=stroke)

    def round_rect(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        radius: float,
        *,
        style: str = FILL,
    ) -> None:
        fill, stroke = style_flags(style)
        radius = max(0.0, min(radius, abs(width) / 2, abs(height) / 2))
        self._target.roundRect(
            x * mm,
            self._y(y + height),
            width * mm,
            height * mm,
            radius * mm,
            fill=fill,
            stroke=stroke,
        )

    def circle(self, x: float, y: float, radius: float, *, style: str = FILL) -> None:
        fill, stroke = style_flags(style)
        self._target.circle(x * mm, self._y(y), radius * mm, fill=fill, stroke=stroke)

    def line(self, x1: float, y1: float, x2: float, y2: float) -> None:
        self._target.line(x1 * mm, self._y(y1), x2 * mm, self._y(y2))

    def path(
        self, points: Sequence[tuple[float, float]], *, style: str = FILL, closed: bool = True
    ) -> None:
        fill, stroke = style_flags(style)
        outline = self._target.beginPath()
        first_x, first_y = points[0]
        outline.moveTo(first_x * mm, self._y(first_y))
        for point_x, point_y in points[1:]:
            outline.lineTo(point_x * mm, self._y(point_y))
        if closed:
            outline.close()
        self._target.drawPath(outline, fill=fill, stroke=stroke)

    def text(
        self,
        content: str,
        x: float,
        y: float,
        *,
        font: str,
        size: float,
        color: Any,
        align: str = "left",
    ) -> None:
        self._target.saveState()
        self._target.setFillColor(color)
        self._target.setFont(font, size)
        if align == "center":
            self._target.drawCentredString(x * mm, self._y(y), content)
        elif align == "right":
            self._target.drawRightString(x * mm, self._y(y), content)
        else:
            self._target.drawString(x * mm, self._y(y), content)
        self._target.restoreState()

    def image(self, reader: ImageReader, x: float, y: float, width: float, height: float) -> None:
        self._target.drawImage(
            reader, x * mm, self._y(y + height), width * mm, height * mm, mask="auto"
        )

    def show_page(self) -> None:
        self._target.showPage()

    def save(self) -> None:
        self._target.save()


class Document:
    """Builder that records draw commands per page and serializes them once.

    The document always holds at least one page. Drawing goes to the last page;
    earlier pages only receive commands through `finish_pages`.
    """

    def __init__(
        self,
        *,
        title: str = "",
        profile: ReportProfile = DEFAULT_REPORT_PROFILE,
    ) -> None:
        self.title = title
        self.profile = profile
        self._pages: list[Page] = [Page(number=1)]
        self._active = 0
        self._fill_color: Any = colors.black
        self._stroke_color: Any = colors.black
        self._line_width = 0.2
        self._opacity = 1.0
        self._serialized = False
        self._record_paint_state()

    @property
    def pages(self) -> tuple[Page, ...]:
        return tuple(self._pages)

    @property
    def page_count(self) -> int:
        return len(self._pages)

    @property
    def current_page(self) -> Page:
        return self._pages[self._active]

    def _record(self, op: str, *args: Any, **options: Any) -> None:
        if self._serialized:
            msg = "document was already serialized."
            raise DrawingSinkError(msg)
        self._pages[self._active].commands.append(
            DrawCommand(
                op=op,
                args=args,
                options=options,
                fill_color=self._fill_color,
                stroke_color=self._stroke_color,
                opacity=self._opacity,
            )
        )

    def _record_paint_state(self) -> None:
        self._record("set_fill_color", self._fill_color)
        self._record("set_stroke_color", self._stroke_color)
        self._record("set_line_width", self._line_width)
        self._record("set_opacity", self._opacity)

    def set_fill_color(self, color: Any) -> None:
        self._fill_color = color
        self._record("set_fill_color", color)

    def set_stroke_color(self, color: Any) -> None:
        self._stroke_color = color
        self._record("set_stroke_color", color)

    def set_line_width(self, width: float) -> None:
        if width < 0:
            msg = "line width must be >= 0."
            raise ValueError(msg)
        self._line_width = width
        self._record("set_line_width", width)

    def set_opacity(self, alpha: float) -> None:
        if not 0.0 <= alpha <= 1.0:
            msg = "opacity must be between 0 and 1."
            raise ValueError(msg)
        self._opacity = alpha
        self._record("set_opacity", alpha)

    def rect(self, x: float, y: float, width: float, height: float, *, style: str = FILL) -> None:
        style_flags(style)
        self._record("rect", x, y, width, height, style=style)

    def round_rect(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        radius: float,
        *,
        style: str = FILL,
    ) -> None:
        style_flags(style)
        self._record("round_rect", x, y, width, height, radius, style=style)

    def circle(self, x: float, y: float, radius: float, *, style: str = FILL) -> None:
        style_flags(style)
        self._record("circle", x, y, radius, style=style)

    def line(self, x1: float, y1: float, x2: float, y2: float) -> None:
        self._record("line", x1, y1, x2, y2)

    def path(
        self, points: Sequence[tuple[float, float]], *, style: str = FILL, closed: bool = True
    ) -> None:
        style_flags(style)
        if len(points) < 2:
            msg = "path needs at least two points."
            raise ValueError(msg)
        self._record("path", tuple((float(x), float(y)) for x, y in points), style=style, closed=closed)

    def text(
        self,
        content: str,
        x: float,
        y: float,
        *,
        font: str,
        size: float,
        color: Any,
        align: str = "left",
    ) -> None:
        if align not in _TEXT_ALIGNMENTS:
            msg = f"align must be one of: {', '.join(_TEXT_ALIGNMENTS)}."
            raise ValueError(msg)
        self._record("text", str(content), x, y, font=font, size=size, color=color, align=align)

    def image(self, data: bytes, x: float, y: float, width: float, height: float | None = None) -> float:
        """Embed a raster image and return its drawn height.

        When `height` is omitted the image keeps its aspect ratio. Pixel data
        is decoded here so a damaged body fails now rather than in `serialize`.
        """
        try:
            reader = ImageReader(io.BytesIO(data))
            pixel_width, pixel_height = reader.getSize()
            reader.getRGBData()
        except Exception as exc:  # noqa: BLE001
            msg = f"could not read image data: {exc}"
            raise DrawingSinkError(msg) from exc
        if pixel_width <= 0 or pixel_height <= 0:
            msg = "image has no pixels."
            raise DrawingSinkError(msg)
        drawn_height = height if height is not None else width * (pixel_height / pixel_width)
        self._record("image", reader, x, y, width, drawn_height)
        return drawn_height

    def string_width(self, text: str, font: str, size: float) -> float:
        return pdfmetrics.stringWidth(text, font, size) / mm

    def split_text(self, text: str, width: float, font: str, size: float) -> list[str]:
        """Wrap text into lines no wider than `width` document units."""
        return simpleSplit(str(text), font, size, max(width, 0.0) * mm) or [""]

    def add_page(self) -> None:
        if self._serialized:
            msg = "document was already serialized."
            raise DrawingSinkError(msg)
        self._pages.append(Page(number=len(self._pages) + 1))
        self._active = len(self._pages) - 1
        self._record_paint_state()

    def finish_pages(self, draw: Callable[[Document, Page], None]) -> None:
        """Run `draw` once on every existing page, in order."""
        last = len(self._pages) - 1
        try:
            for index, page in enumerate(self._pages):
                self._active = index
                draw(self, page)
        finally:
            self._active = last

    def serialize(self) -> bytes:
        """Replay every page onto a ReportLab canvas and return the PDF bytes."""
        buffer = io.BytesIO()
        target = canvas.Canvas(
            buffer,
            pagesize=(self.profile.page_width * mm, self.profile.page_height * mm),
        )
        if self.title:
            target.setTitle(self.title)
        replay = ReportLabCanvas(target, page_height=self.profile.page_height)

        try:
            for page in self._pages:
                for command in page.commands:
                    getattr(replay, command.op)(*command.args, **command.options)
                replay.show_page()
            replay.save()
        except DrawingSinkError:
            raise
        except Exception as exc:  # noqa: BLE001
            msg = f"failed to serialize document: {exc}"
            raise DrawingSinkError(msg) from exc

        self._serialized = True
        content = buffer.getvalue()
        logger.debug("Serialized %d page(s) into %d bytes.", len(self._pages), len(content))
        return content
