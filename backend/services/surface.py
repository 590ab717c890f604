"""
Drawing surface for procedural scene composition.
Wraps a Pillow RGBA image with canvas-style paint primitives where every
paint is source-over composited, plus a backend that decodes, allocates and
encodes surfaces so the composer never touches image files directly.
"""

import base64
import binascii
import functools
import io
from contextlib import contextmanager
from typing import Iterable, Iterator, Optional, Sequence, Tuple

from PIL import Image, ImageColor, ImageDraw, ImageFilter, ImageFont, UnidentifiedImageError

RGBA = Tuple[int, int, int, int]
Point = Tuple[float, float]
ColorStop = Tuple[float, RGBA]
Circle = Tuple[float, float, float]

TRANSPARENT: RGBA = (0, 0, 0, 0)


class SurfaceDecodeError(ValueError):
    """Raised when sketch data cannot be decoded into a drawable surface."""


def rgba(r: int, g: int, b: int, alpha: float = 1.0) -> RGBA:
    """Build an RGBA tuple from 0-255 channels and a 0-1 alpha."""
    return (r, g, b, int(round(alpha * 255)))


def hex_color(value: str, alpha: float = 1.0) -> RGBA:
    """Convert a '#RRGGBB' string to an RGBA tuple."""
    r, g, b = ImageColor.getrgb(value)[:3]
    return rgba(r, g, b, alpha)


def interpolate_stops(stops: Sequence[ColorStop], t: float) -> RGBA:
    """
    Sample a gradient defined by (offset, color) stops at position t.
    Positions outside the first/last stop clamp to the end colors.
    """
    if t <= stops[0][0]:
        return stops[0][1]
    if t >= stops[-1][0]:
        return stops[-1][1]
    for (t0, c0), (t1, c1) in zip(stops, stops[1:]):
        if t <= t1:
            f = (t - t0) / (t1 - t0) if t1 > t0 else 1.0
            return tuple(int(round(a + (b - a) * f)) for a, b in zip(c0, c1))
    return stops[-1][1]


@functools.lru_cache(maxsize=16)
def load_font(size: int, bold: bool = False) -> ImageFont.ImageFont:
    """Load a sans-serif font, falling back to Pillow's built-in font."""
    candidates = ("DejaVuSans-Bold.ttf", "Arial Bold.ttf") if bold else ("DejaVuSans.ttf", "Arial.ttf")
    for name in candidates:
        try:
            return ImageFont.truetype(name, size)
        except OSError:
            continue
    return ImageFont.load_default()


class DrawSurface:
    """
    Mutable 2D canvas backed by a Pillow RGBA image.

    Each primitive paints onto a transparent layer which is then alpha
    composited over the surface, scaled by the current global alpha.
    """

    def __init__(self, image: Image.Image, format: str = "PNG"):
        self.image = image if image.mode == "RGBA" else image.convert("RGBA")
        self.format = format
        self._global_alpha = 1.0

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    @contextmanager
    def global_alpha(self, alpha: float) -> Iterator["DrawSurface"]:
        """Composite everything painted inside the block at the given opacity."""
        previous = self._global_alpha
        self._global_alpha = alpha
        try:
            yield self
        finally:
            self._global_alpha = previous

    def _new_layer(self) -> Image.Image:
        return Image.new("RGBA", self.image.size, TRANSPARENT)

    def _composite(self, layer: Image.Image) -> None:
        if self._global_alpha < 1.0:
            factor = self._global_alpha
            layer.putalpha(layer.getchannel("A").point(lambda a: int(round(a * factor))))
        self.image.alpha_composite(layer)

    def fill_rect(self, x: float, y: float, width: float, height: float, color: RGBA) -> None:
        layer = self._new_layer()
        ImageDraw.Draw(layer).rectangle(
            [round(x), round(y), round(x + width) - 1, round(y + height) - 1], fill=color
        )
        self._composite(layer)

    def fill_polygon(self, points: Sequence[Point], color: RGBA) -> None:
        layer = self._new_layer()
        ImageDraw.Draw(layer).polygon([(float(px), float(py)) for px, py in points], fill=color)
        self._composite(layer)

    def fill_circles(self, circles: Iterable[Circle], color: RGBA) -> None:
        """Fill the union of several circles as a single path."""
        layer = self._new_layer()
        draw = ImageDraw.Draw(layer)
        for cx, cy, radius in circles:
            draw.ellipse([cx - radius, cy - radius, cx + radius, cy + radius], fill=color)
        self._composite(layer)

    def fill_vertical_gradient(self, y0: float, y1: float, stops: Sequence[ColorStop]) -> None:
        """Fill the whole surface with a linear gradient running from y0 to y1."""
        span = y1 - y0
        column = Image.new("RGBA", (1, self.height))
        column.putdata([
            interpolate_stops(stops, (y + 0.5 - y0) / span if span else 0.0)
            for y in range(self.height)
        ])
        self._composite(column.resize(self.image.size, Image.Resampling.NEAREST))

    def fill_radial_gradient(
        self,
        cx: float,
        cy: float,
        radius: float,
        stops: Sequence[ColorStop],
        box: Tuple[float, float, float, float],
    ) -> None:
        """
        Fill a rectangle (x, y, width, height) with a radial gradient centred
        on (cx, cy). Concentric rings are painted from the outside in.
        """
        x, y, width, height = box
        layer = self._new_layer()
        draw = ImageDraw.Draw(layer)
        draw.rectangle(
            [round(x), round(y), round(x + width) - 1, round(y + height) - 1], fill=stops[-1][1]
        )
        steps = max(1, int(round(radius)))
        for i in range(steps, 0, -1):
            r = radius * i / steps
            ring_color = interpolate_stops(stops, (r - 0.5) / radius)
            draw.ellipse([cx - r, cy - r, cx + r, cy + r], fill=ring_color)
        # Clip to the fill rectangle
        mask = Image.new("L", self.image.size, 0)
        ImageDraw.Draw(mask).rectangle(
            [round(x), round(y), round(x + width) - 1, round(y + height) - 1], fill=255
        )
        clipped = self._new_layer()
        clipped.paste(layer, (0, 0), mask)
        self._composite(clipped)

    def draw_surface(self, other: "DrawSurface") -> None:
        """Draw another surface scaled to cover this one."""
        scaled = other.image.resize(self.image.size, Image.Resampling.LANCZOS)
        self._composite(scaled)

    def draw_text(
        self,
        x: float,
        baseline: float,
        text: str,
        size: int,
        color: RGBA,
        bold: bool = False,
        align: str = "left",
        shadow_color: Optional[RGBA] = None,
        shadow_blur: float = 0,
    ) -> None:
        """
        Draw a single line of text with its baseline at `baseline`.
        `align` is 'left' or 'right' relative to x. A blurred shadow is
        painted underneath when shadow_color is given.
        """
        font = load_font(size, bold)
        if isinstance(font, ImageFont.FreeTypeFont):
            position = (x, baseline)
            anchor = "rs" if align == "right" else "ls"
        else:
            # Bitmap fonts have no anchor support
            width = ImageDraw.Draw(Image.new("RGBA", (1, 1))).textlength(text, font=font)
            position = (x - width if align == "right" else x, baseline - size)
            anchor = None

        if shadow_color is not None:
            shadow = self._new_layer()
            ImageDraw.Draw(shadow).text(position, text, font=font, fill=shadow_color, anchor=anchor)
            if shadow_blur:
                shadow = shadow.filter(ImageFilter.GaussianBlur(shadow_blur / 2))
            self._composite(shadow)

        layer = self._new_layer()
        ImageDraw.Draw(layer).text(position, text, font=font, fill=color, anchor=anchor)
        self._composite(layer)


class PillowSurfaceBackend:
    """Decode, allocate and encode DrawSurfaces using Pillow."""

    def new_surface(self, width: int, height: int, format: str = "PNG") -> DrawSurface:
        return DrawSurface(Image.new("RGBA", (width, height), TRANSPARENT), format=format)

    def decode(self, data: bytes) -> DrawSurface:
        """
        Decode raster bytes into a surface.

        Raises:
            SurfaceDecodeError: If the bytes are not a readable image
        """
        try:
            image = Image.open(io.BytesIO(data))
            image.load()
        except (UnidentifiedImageError, OSError, ValueError) as e:
            raise SurfaceDecodeError(f"Cannot decode sketch image: {e}") from e
        return DrawSurface(image.convert("RGBA"), format=image.format or "PNG")

    def encode(self, surface: DrawSurface, format: Optional[str] = None) -> bytes:
        fmt = (format or surface.format or "PNG").upper()
        if fmt == "MPO":
            fmt = "JPEG"
        Image.init()
        if fmt not in Image.SAVE:
            fmt = "PNG"

        image = surface.image
        if fmt == "JPEG":
            image = image.convert("RGB")

        buffer = io.BytesIO()
        image.save(buffer, format=fmt)
        return buffer.getvalue()


def strip_data_uri(value: str) -> str:
    """Remove a 'data:<mime>;base64,' prefix if present."""
    return value.split(",", 1)[1] if "," in value else value


def data_uri_mime_type(value: str) -> Optional[str]:
    """Mime type declared by a 'data:<mime>;base64,' prefix, or None for bare base64."""
    if not value.startswith("data:") or "," not in value:
        return None
    header = value[len("data:"):value.index(",")]
    return header.split(";", 1)[0].strip().lower() or None


def decode_base64_image(value: str) -> bytes:
    """
    Decode a base64 sketch (bare or data URI) into raw bytes.

    Raises:
        SurfaceDecodeError: If the payload is not valid base64
    """
    payload = "".join(strip_data_uri(value).split())
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise SurfaceDecodeError(f"Sketch is not valid base64: {e}") from e


def encode_base64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def sniff_mime_type(data: bytes, default: Optional[str] = "image/png") -> Optional[str]:
    """Guess the mime type of raster bytes, returning `default` when unrecognised."""
    try:
        with Image.open(io.BytesIO(data)) as image:
            return Image.MIME.get(image.format or "", default)
    except (UnidentifiedImageError, OSError, ValueError):
        return default
