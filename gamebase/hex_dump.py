"""Human-readable hex dumps in the style of ``xxd``."""

from __future__ import annotations

_ROW_BYTES = 16
_GROUP_CHARS = 4


def _row_line(offset: int, row: bytes) -> str:
    hexed = row.hex().ljust(2 * _ROW_BYTES)
    hex_part = "".join(
        " " + hexed[start:start + _GROUP_CHARS]
        for start in range(0, len(hexed), _GROUP_CHARS)
    )
    text = "".join(chr(byte) if 32 <= byte <= 126 else "." for byte in row)
    return f"{offset & 0xFFFFFFFF:08x}:{hex_part}  {text.ljust(_ROW_BYTES)}\n"


def hex_dump(data) -> str:
    """Return a dump of ``data`` with an address, hex pairs and printable text per row.

    ``data`` may be any object supporting the buffer protocol; its raw bytes
    are dumped. A trailing (possibly blank) row is always emitted when the
    length is a multiple of the row size.
    """
    raw = memoryview(data).tobytes()
    return "".join(
        _row_line(offset, raw[offset:offset + _ROW_BYTES])
        for offset in range(0, len(raw) + 1, _ROW_BYTES)
    )