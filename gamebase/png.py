"""Loading and saving PNG images as rows of RGBA pixels."""

from __future__ import annotations

import enum
import struct
from typing import Iterable, Sequence

from PIL import Image

Pixel = tuple[int, int, int, int]


class OriginLocation(enum.Enum):
    """Which corner the first pixel of the data refers to."""

    LOWER_LEFT = "lower_left"
    UPPER_LEFT = "upper_left"


def load_png(filename: str, origin: OriginLocation) -> tuple[tuple[int, int], list[Pixel]]:
    """Load a PNG file as ``((width, height), pixels)`` with 8-bit RGBA pixels.

    Pixels are listed row by row, starting from the corner given by ``origin``.
    Raises :class:`RuntimeError` if the file cannot be opened or decoded.
    """
    try:
        handle = open(filename, "rb")
    except OSError as exc:
        raise RuntimeError(f"Failed to open PNG image file '{filename}'.") from exc

    with handle:
        try:
            with Image.open(handle) as image:
                if image.format != "PNG":
                    raise ValueError("not a PNG image")
                image.load()
                rgba = image.convert("RGBA")
        except (OSError, ValueError, SyntaxError, Image.DecompressionBombError) as exc:
            raise RuntimeError(f"Failed to read PNG image from '{filename}'.") from exc

    if origin is OriginLocation.LOWER_LEFT:
        rgba = rgba.transpose(Image.Transpose.FLIP_TOP_BOTTOM)
    pixels = list(struct.iter_unpack("4B", rgba.tobytes()))
    return rgba.size, pixels


def _pixel_bytes(data: bytes | Iterable[Sequence[int]]) -> bytes:
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    return b"".join(bytes(pixel) for pixel in data)


def save_png(
    filename: str,
    size: tuple[int, int],
    data: bytes | Iterable[Sequence[int]],
    origin: OriginLocation,
) -> None:
    """Write ``data`` (RGBA pixels, row by row from ``origin``) to a PNG file.

    ``data`` may be a sequence of 4-component pixels or packed RGBA bytes.
    """
    width, height = size
    raw = _pixel_bytes(data)
    if len(raw) != width * height * 4:
        raise ValueError(
            f"expected {width * height} RGBA pixels for a {width}x{height} image"
        )
    image = Image.frombytes("RGBA", (width, height), raw)
    if origin is OriginLocation.LOWER_LEFT:
        image = image.transpose(Image.Transpose.FLIP_TOP_BOTTOM)
    image.save(filename, format="PNG")