"""Freehand signature capture for the privacy & terms section.

The pad is a small state machine (idle -> drawing -> idle) fed with pointer
events from whatever surface the presentation layer uses. Strokes are kept as
line segments in surface (CSS pixel) coordinates and only rasterised, with
Pillow, when a stroke finishes or the surface is re-fitted.
"""

from __future__ import annotations

import base64
import io
from dataclasses import dataclass, field
from typing import Callable

from PIL import Image, ImageDraw

Point = tuple[float, float]
Segment = tuple[Point, Point]

LINE_WIDTH = 2
STROKE_COLOUR = (0, 0, 0, 255)
DATA_URL_PREFIX = "data:image/png;base64,"


@dataclass
class SurfaceBounds:
    """Bounding box of the drawing surface in CSS pixels."""

    left: float = 0.0
    top: float = 0.0
    width: float = 300.0
    height: float = 150.0


@dataclass
class PointerEvent:
    """A mouse or touch event. Touch events carry their touch points."""

    client_x: float = 0.0
    client_y: float = 0.0
    touches: list[Point] = field(default_factory=list)


def event_point(event: PointerEvent, bounds: SurfaceBounds) -> Point:
    """Surface-relative position of an event (first touch point wins)."""
    if event.touches:
        x, y = event.touches[0]
    else:
        x, y = event.client_x, event.client_y
    return (x - bounds.left, y - bounds.top)


def backing_size(bounds: SurfaceBounds, device_pixel_ratio: float) -> tuple[int, int]:
    ratio = device_pixel_ratio or 1.0
    return (
        max(1, round(bounds.width * ratio)),
        max(1, round(bounds.height * ratio)),
    )


class SignaturePad:
    """Collects strokes and reports the signature as a PNG data URL.

    ``on_change`` receives the data URL when a stroke with ink ends, and
    ``""`` when the pad is cleared.
    """

    def __init__(
        self,
        bounds: SurfaceBounds | None = None,
        device_pixel_ratio: float = 1.0,
        on_change: Callable[[str], None] | None = None,
    ):
        self.bounds = bounds or SurfaceBounds()
        self.device_pixel_ratio = device_pixel_ratio or 1.0
        self.size = backing_size(self.bounds, self.device_pixel_ratio)
        self.on_change = on_change
        self.segments: list[Segment] = []
        self.drawing = False
        self.has_ink = False
        self.last_point: Point | None = None

    # -- pointer events ---------------------------------------------------

    def pointer_down(self, event: PointerEvent) -> None:
        self.drawing = True
        self.last_point = event_point(event, self.bounds)

    def pointer_move(self, event: PointerEvent) -> None:
        if not self.drawing or self.last_point is None:
            return
        point = event_point(event, self.bounds)
        self.segments.append((self.last_point, point))
        self.last_point = point
        self.has_ink = True

    def pointer_up(self, event: PointerEvent | None = None) -> None:
        if not self.drawing:
            return
        self.drawing = False
        if self.has_ink:
            self._emit(self.to_data_url())

    # Leaving the surface ends the stroke the same way lifting the pointer does
    pointer_leave = pointer_up

    # -- surface ----------------------------------------------------------

    def fit(self, bounds: SurfaceBounds, device_pixel_ratio: float = 1.0) -> None:
        """Re-fit the backing store to a resized surface."""
        self.bounds = bounds
        self.device_pixel_ratio = device_pixel_ratio or 1.0
        self.size = backing_size(bounds, self.device_pixel_ratio)

    def clear(self) -> None:
        self.segments = []
        self.drawing = False
        self.has_ink = False
        self.last_point = None
        self._emit("")

    # -- rendering --------------------------------------------------------

    def render(self) -> Image.Image:
        """Rasterise the strokes at the current backing-store scale."""
        image = Image.new("RGBA", self.size, (255, 255, 255, 0))
        draw = ImageDraw.Draw(image)
        scale = self.device_pixel_ratio
        width = max(1, round(LINE_WIDTH * scale))
        radius = width / 2
        for (x0, y0), (x1, y1) in self.segments:
            start = (x0 * scale, y0 * scale)
            end = (x1 * scale, y1 * scale)
            draw.line([start, end], fill=STROKE_COLOUR, width=width)
            # Round caps
            for cx, cy in (start, end):
                draw.ellipse(
                    [cx - radius, cy - radius, cx + radius, cy + radius],
                    fill=STROKE_COLOUR,
                )
        return image

    def to_data_url(self) -> str:
        buffer = io.BytesIO()
        self.render().save(buffer, format="PNG")
        return DATA_URL_PREFIX + base64.b64encode(buffer.getvalue()).decode("ascii")

    def _emit(self, value: str) -> None:
        if self.on_change is not None:
            self.on_change(value)


def decode_data_url(data_url: str) -> Image.Image:
    """Load a PNG signature data URL back into an image."""
    if not data_url.startswith(DATA_URL_PREFIX):
        raise ValueError("Not a PNG data URL")
    raw = base64.b64decode(data_url[len(DATA_URL_PREFIX):])
    return Image.open(io.BytesIO(raw))
