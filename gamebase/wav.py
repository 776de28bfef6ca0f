"""Loading WAV files as 48kHz mono floating-point samples."""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass

AUDIO_RATE = 48000

_FORMAT_PCM = 1
_FORMAT_FLOAT = 3
_FORMAT_EXTENSIBLE = 0xFFFE

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Format:
    code: int
    channels: int
    rate: int
    block_align: int
    bits: int


def _chunks(raw: bytes):
    offset = 12
    while offset + 8 <= len(raw):
        chunk_id, size = struct.unpack_from("<4sI", raw, offset)
        body = raw[offset + 8:offset + 8 + size]
        yield chunk_id, body
        offset += 8 + size + (size & 1)


def _parse_format(body: bytes) -> _Format:
    if len(body) < 16:
        raise ValueError("format chunk too short")
    code, channels, rate, _, block_align, bits = struct.unpack_from("<HHIIHH", body)
    if code == _FORMAT_EXTENSIBLE:
        if len(body) < 26:
            raise ValueError("extensible format chunk too short")
        (code,) = struct.unpack_from("<H", body, 24)
    if channels == 0 or rate == 0 or block_align == 0:
        raise ValueError("invalid format parameters")
    return _Format(code, channels, rate, block_align, bits)


def _decode(fmt: _Format, data: bytes) -> list[float]:
    width = fmt.bits // 8
    count = (len(data) // fmt.block_align) * fmt.channels
    data = data[:count * width]
    if fmt.code == _FORMAT_FLOAT and fmt.bits in (32, 64):
        return list(struct.unpack(f"<{count}{'f' if fmt.bits == 32 else 'd'}", data))
    if fmt.code != _FORMAT_PCM:
        raise ValueError(f"unsupported sample format {fmt.code}")
    if fmt.bits == 8:
        return [(byte - 128) / 128.0 for byte in data]
    if fmt.bits == 16:
        return [v / 32768.0 for v in struct.unpack(f"<{count}h", data)]
    if fmt.bits == 24:
        return [
            int.from_bytes(data[pos:pos + 3], "little", signed=True) / 8388608.0
            for pos in range(0, len(data), 3)
        ]
    if fmt.bits == 32:
        return [v / 2147483648.0 for v in struct.unpack(f"<{count}i", data)]
    raise ValueError(f"unsupported bit depth {fmt.bits}")


def _downmix(samples: list[float], channels: int) -> list[float]:
    if channels == 1:
        return samples
    tracks = (samples[channel::channels] for channel in range(channels))
    return [sum(frame) / channels for frame in zip(*tracks)]


def _resample(samples: list[float], rate: int) -> list[float]:
    if rate == AUDIO_RATE or not samples:
        return samples
    last = len(samples) - 1
    length = round(len(samples) * AUDIO_RATE / rate)
    out = []
    for index in range(length):
        position = index * rate / AUDIO_RATE
        base = min(int(position), last)
        frac = position - base
        following = samples[min(base + 1, last)]
        out.append(samples[base] * (1.0 - frac) + following * frac)
    return out


def load_wav(filename: str) -> list[float]:
    """Load a WAV file as 48kHz mono floats, converting if necessary.

    Raises :class:`RuntimeError` if the file cannot be read or decoded.
    """
    try:
        with open(filename, "rb") as handle:
            raw = handle.read()
        if len(raw) < 12 or raw[:4] != b"RIFF" or raw[8:12] != b"WAVE":
            raise ValueError("not a RIFF/WAVE file")
        fmt = None
        payload = None
        for chunk_id, body in _chunks(raw):
            if chunk_id == b"fmt " and fmt is None:
                fmt = _parse_format(body)
            elif chunk_id == b"data" and payload is None:
                payload = body
        if fmt is None or payload is None:
            raise ValueError("missing format or data chunk")
        samples = _decode(fmt, payload)
    except (OSError, ValueError, struct.error) as exc:
        raise RuntimeError(f"Failed to load WAV file '{filename}'; {exc}") from exc

    needs_conversion = not (
        fmt.code == _FORMAT_FLOAT and fmt.bits == 32
        and fmt.channels == 1 and fmt.rate == AUDIO_RATE
    )
    if needs_conversion:
        log.info(
            "WAV file '%s' didn't load as %d Hz, float32, mono; converting.",
            filename, AUDIO_RATE,
        )
        samples = _resample(_downmix(samples, fmt.channels), fmt.rate)

    low = min([0.0, *samples])
    high = max([0.0, *samples])
    log.info("Range: %s, %s", low, high)
    return samples