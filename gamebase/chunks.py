"""Reading and writing arrays of fixed-size records preceded by a small header.

Layout of a chunk::

    four byte magic | four byte native-endian size | size bytes of records
"""

from __future__ import annotations

import struct
from typing import BinaryIO, Iterable

_HEADER = struct.Struct("=4sI")


class ChunkError(RuntimeError):
    """Raised when a chunk cannot be read."""


def _magic_bytes(magic: str | bytes) -> bytes:
    return magic.encode("latin-1") if isinstance(magic, str) else bytes(magic)


def _element_struct(element_format: str) -> tuple[struct.Struct, bool]:
    element = struct.Struct(element_format)
    if element.size == 0:
        raise ValueError(f"element format {element_format!r} has zero size")
    single = len(element.unpack(bytes(element.size))) == 1
    return element, single


def read_chunk(stream: BinaryIO, magic: str | bytes, element_format: str = "B") -> list:
    """Read one chunk from ``stream`` and return its records.

    Each record is decoded with the :mod:`struct` format ``element_format``;
    formats with a single field yield plain values, others yield tuples.
    """
    element, single = _element_struct(element_format)

    header = stream.read(_HEADER.size)
    if len(header) != _HEADER.size:
        raise ChunkError("Failed to read chunk header")
    found_magic, size = _HEADER.unpack(header)
    if found_magic != _magic_bytes(magic):
        raise ChunkError("Unexpected magic number in chunk")
    if size % element.size != 0:
        raise ChunkError("Size of chunk not divisible by element size")

    payload = stream.read(size)
    if len(payload) != size:
        raise ChunkError("Failed to read chunk data.")

    records = element.iter_unpack(payload)
    if single:
        return [record[0] for record in records]
    return list(records)


def write_chunk(
    magic: str | bytes,
    items: Iterable,
    stream: BinaryIO,
    element_format: str = "B",
) -> None:
    """Write ``items`` to ``stream`` as a chunk readable by :func:`read_chunk`."""
    magic_bytes = _magic_bytes(magic)
    if len(magic_bytes) != 4:
        raise ValueError("chunk magic must be exactly four bytes")
    element, single = _element_struct(element_format)

    payload = b"".join(
        element.pack(item) if single else element.pack(*item) for item in items
    )
    stream.write(_HEADER.pack(magic_bytes, len(payload)))
    stream.write(payload)