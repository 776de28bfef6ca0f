"""Software mixer for mono samples with 2D panning and 3D listener-relative panning."""

from __future__ import annotations

import math
import threading
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from .wav import load_wav

AUDIO_RATE = 48000
MIX_SAMPLES = 1024
RAMP_STEP = MIX_SAMPLES / AUDIO_RATE
DEFAULT_RAMP = 1.0 / 60.0

Vec3 = tuple[float, float, float]
T = TypeVar("T")

_NAN = float("nan")
_NAN_VEC: Vec3 = (_NAN, _NAN, _NAN)


def _add(a: Vec3, b: Vec3) -> Vec3:
    return (a[0] + b[0], a[1] + b[1], a[2] + b[2])


def _sub(a: Vec3, b: Vec3) -> Vec3:
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])


def _scale(a: Vec3, s: float) -> Vec3:
    return (a[0] * s, a[1] * s, a[2] * s)


def _dot(a: Vec3, b: Vec3) -> float:
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def _cross(a: Vec3, b: Vec3) -> Vec3:
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )


def _length(a: Vec3) -> float:
    return math.sqrt(_dot(a, a))


def _normalize(a: Vec3) -> Vec3:
    return _scale(a, 1.0 / _length(a))


def _mix(a: Vec3, b: Vec3, t: float) -> Vec3:
    return _add(_scale(a, 1.0 - t), _scale(b, t))


@dataclass
class Ramp(Generic[T]):
    """A value smoothly interpolated towards ``target`` over ``ramp`` seconds."""

    value: T
    target: T | None = None
    ramp: float = 0.0

    def __post_init__(self) -> None:
        if self.target is None:
            self.target = self.value

    def set(self, value: T, ramp: float) -> None:
        """Move towards ``value`` over ``ramp`` seconds; jump there if ``ramp <= 0``."""
        if ramp <= 0.0:
            self.value = value
            self.target = value
            self.ramp = 0.0
        else:
            self.target = value
            self.ramp = ramp


@dataclass
class Sample:
    """Mono audio stored as 48kHz floating-point values."""

    data: list[float] = field(default_factory=list)


def load_sample(filename: str) -> Sample:
    """Load a sample from a ``.wav`` file."""
    if filename.endswith(".wav"):
        return Sample(load_wav(filename))
    raise RuntimeError(
        f"Sample '{filename}' doesn't end in \".wav\" -- unsure how to load."
    )


class PlayingSample:
    """Book-keeping for a sample that is currently playing.

    A sample plays in 2D mode (``pan`` is a number) or in 3D mode (``pan`` is
    NaN and ``position``/``half_volume_radius`` drive panning).
    """

    def __init__(
        self,
        data: list[float],
        volume: float,
        loop: bool,
        *,
        pan: float = _NAN,
        position: Vec3 = _NAN_VEC,
        half_volume_radius: float = _NAN,
        lock: threading.RLock | None = None,
    ) -> None:
        self.data = data
        self.i = 0
        self.loop = loop
        self.stopping = False
        self.stopped = False
        self.volume: Ramp[float] = Ramp(volume)
        self.pan: Ramp[float] = Ramp(pan)
        self.position: Ramp[Vec3] = Ramp(tuple(position))
        self.half_volume_radius: Ramp[float] = Ramp(half_volume_radius)
        self._lock = lock if lock is not None else threading.RLock()

    @property
    def is_3d(self) -> bool:
        return math.isnan(self.pan.value)

    def set_volume(self, new_volume: float, ramp: float = DEFAULT_RAMP) -> None:
        """Change volume over ``ramp`` seconds; ignored once stopping."""
        with self._lock:
            if not self.stopping:
                self.volume.set(new_volume, ramp)

    def set_pan(self, new_pan: float, ramp: float = DEFAULT_RAMP) -> None:
        """Change panning of a 2D sample; no effect in 3D mode."""
        if self.is_3d:
            return
        with self._lock:
            self.pan.set(new_pan, ramp)

    def set_position(self, new_position: Vec3, ramp: float = DEFAULT_RAMP) -> None:
        """Change position of a 3D sample; no effect in 2D mode."""
        if not self.is_3d:
            return
        with self._lock:
            self.position.set(tuple(new_position), ramp)

    def set_half_volume_radius(self, new_radius: float, ramp: float = DEFAULT_RAMP) -> None:
        """Change the half-volume radius of a 3D sample; no effect in 2D mode."""
        if not self.is_3d:
            return
        with self._lock:
            self.half_volume_radius.set(new_radius, ramp)

    def stop(self, ramp: float = DEFAULT_RAMP) -> None:
        """Fade out over ``ramp`` seconds, after which the sample is removed."""
        with self._lock:
            if not (self.stopping or self.stopped):
                self.stopping = True
                self.volume.target = 0.0
                self.volume.ramp = ramp
            else:
                self.volume.ramp = min(self.volume.ramp, ramp)


class Listener:
    """Position and right-pointing direction used to pan 3D samples."""

    def __init__(self, lock: threading.RLock | None = None) -> None:
        self.position: Ramp[Vec3] = Ramp((0.0, 0.0, 0.0))
        self.right: Ramp[Vec3] = Ramp((1.0, 0.0, 0.0))
        self._lock = lock if lock is not None else threading.RLock()

    def set_position_right(
        self, new_position: Vec3, new_right: Vec3, ramp: float = DEFAULT_RAMP
    ) -> None:
        """Move the listener; ``new_right`` is normalized (zero becomes +x)."""
        with self._lock:
            self.position.set(tuple(new_position), ramp)
            right = tuple(float(c) for c in new_right)
            if right == (0.0, 0.0, 0.0):
                self.right.set((1.0, 0.0, 0.0), ramp)
            else:
                self.right.set(_normalize(right), ramp)


def compute_pan_weights(pan: float) -> tuple[float, float]:
    """Equal-power (left, right) weights for ``pan`` in [-1, 1] (clamped)."""
    pan = max(-1.0, min(1.0, pan))
    angle = 0.5 * math.pi * (0.5 * (pan + 1.0))
    return math.cos(angle), math.sin(angle)


def compute_pan_from_listener_and_position(
    listener_position: Vec3,
    listener_right: Vec3,
    source_position: Vec3,
    source_half_radius: float,
) -> tuple[float, float]:
    """(left, right) weights for a source relative to a listener, with distance falloff."""
    to = _sub(source_position, listener_position)
    distance = _length(to)
    if distance == 0.0:
        both = math.sqrt(2.0)
        return both, both
    amount = _dot(listener_right, to) / distance
    angle = 0.5 * math.pi * (0.5 * (amount + 1.0))
    attenuation = 1.0 / (1.0 + distance / source_half_radius)
    return math.cos(angle) * attenuation, math.sin(angle) * attenuation


def step_value_ramp(ramp: Ramp[float]) -> None:
    """Advance a scalar ramp by one mix period."""
    if ramp.ramp < RAMP_STEP:
        ramp.value = ramp.target
        ramp.ramp = 0.0
    else:
        ramp.value += (RAMP_STEP / ramp.ramp) * (ramp.target - ramp.value)
        ramp.ramp -= RAMP_STEP


def step_position_ramp(ramp: Ramp[Vec3]) -> None:
    """Advance a position ramp by one mix period (linear interpolation)."""
    if ramp.ramp < RAMP_STEP:
        ramp.value = ramp.target
        ramp.ramp = 0.0
    else:
        ramp.value = _mix(ramp.value, ramp.target, RAMP_STEP / ramp.ramp)
        ramp.ramp -= RAMP_STEP


def step_direction_ramp(ramp: Ramp[Vec3]) -> None:
    """Advance a unit-direction ramp by one mix period (rotation towards target)."""
    if ramp.ramp < RAMP_STEP:
        ramp.value = ramp.target
        ramp.ramp = 0.0
        return
    target = ramp.target
    norm = _cross(ramp.value, target)
    if norm == (0.0, 0.0, 0.0):
        x, y, z = target
        if x <= y and x <= z:
            norm = (1.0, 0.0, 0.0)
        elif y <= z:
            norm = (0.0, 1.0, 0.0)
        else:
            norm = (0.0, 0.0, 1.0)
        norm = _sub(norm, _scale(target, _dot(target, norm)))
    norm = _normalize(norm)
    perp = _cross(norm, target)

    angle = math.acos(max(-1.0, min(1.0, _dot(ramp.value, target))))
    angle *= (ramp.ramp - RAMP_STEP) / ramp.ramp

    ramp.value = _add(_scale(target, math.cos(angle)), _scale(perp, math.sin(angle)))
    ramp.ramp -= RAMP_STEP


class Mixer:
    """Holds the playing samples, global volume and listener, and mixes output."""

    def __init__(self) -> None:
        self.lock = threading.RLock()
        self.volume: Ramp[float] = Ramp(1.0)
        self.listener = Listener(self.lock)
        self.playing_samples: list[PlayingSample] = []

    def _start(self, sample: Sample, volume: float, loop: bool, **placement) -> PlayingSample:
        if not sample.data:
            raise ValueError("cannot play a sample with no data")
        playing = PlayingSample(sample.data, volume, loop, lock=self.lock, **placement)
        with self.lock:
            self.playing_samples.append(playing)
        return playing

    def play(self, sample: Sample, volume: float = 1.0, pan: float = 0.0) -> PlayingSample:
        """Play ``sample`` once in 2D mode (-1 hard left, 1 hard right)."""
        return self._start(sample, volume, False, pan=pan)

    def play_3d(
        self,
        sample: Sample,
        volume: float,
        position: Vec3,
        half_volume_radius: float = math.inf,
    ) -> PlayingSample:
        """Play ``sample`` once, panned from the listener's point of view."""
        return self._start(
            sample, volume, False,
            position=tuple(position), half_volume_radius=half_volume_radius,
        )

    def loop(self, sample: Sample, volume: float = 1.0, pan: float = 0.0) -> PlayingSample:
        """Play ``sample`` repeatedly in 2D mode."""
        return self._start(sample, volume, True, pan=pan)

    def loop_3d(
        self,
        sample: Sample,
        volume: float,
        position: Vec3,
        half_volume_radius: float = math.inf,
    ) -> PlayingSample:
        """Play ``sample`` repeatedly in 3D mode."""
        return self._start(
            sample, volume, True,
            position=tuple(position), half_volume_radius=half_volume_radius,
        )

    def stop_all_samples(self) -> None:
        """Fade out every playing sample."""
        with self.lock:
            for playing in self.playing_samples:
                playing.stop()

    def set_volume(self, new_volume: float, ramp: float = DEFAULT_RAMP) -> None:
        """Set the global volume over ``ramp`` seconds."""
        with self.lock:
            self.volume.set(new_volume, ramp)

    def _weights(self, playing: PlayingSample, position: Vec3, right: Vec3) -> tuple[float, float]:
        if playing.is_3d:
            return compute_pan_from_listener_and_position(
                position, right, playing.position.value, playing.half_volume_radius.value
            )
        return compute_pan_weights(playing.pan.value)

    def mix(self) -> list[tuple[float, float]]:
        """Mix one period of ``MIX_SAMPLES`` stereo frames and advance all ramps."""
        with self.lock:
            left = [0.0] * MIX_SAMPLES
            right = [0.0] * MIX_SAMPLES

            start_volume = self.volume.value
            start_position = self.listener.position.value
            start_right = self.listener.right.value

            step_value_ramp(self.volume)
            step_position_ramp(self.listener.position)
            step_direction_ramp(self.listener.right)

            end_volume = self.volume.value
            end_position = self.listener.position.value
            end_right = self.listener.right.value

            still_playing = []
            for playing in self.playing_samples:
                start_l, start_r = self._weights(playing, start_position, start_right)
                if playing.is_3d:
                    step_position_ramp(playing.position)
                    step_value_ramp(playing.half_volume_radius)
                else:
                    step_value_ramp(playing.pan)
                gain = start_volume * playing.volume.value
                start_l, start_r = start_l * gain, start_r * gain

                step_value_ramp(playing.volume)

                end_l, end_r = self._weights(playing, end_position, end_right)
                gain = end_volume * playing.volume.value
                end_l, end_r = end_l * gain, end_r * gain

                pan_l, pan_r = start_l, start_r
                step_l = (end_l - start_l) / MIX_SAMPLES
                step_r = (end_r - start_r) / MIX_SAMPLES
                data = playing.data

                for frame in range(MIX_SAMPLES):
                    value = data[playing.i]
                    left[frame] += pan_l * value
                    right[frame] += pan_r * value
                    playing.i += 1
                    if playing.i == len(data):
                        if playing.loop:
                            playing.i = 0
                        else:
                            break
                    pan_l += step_l
                    pan_r += step_r

                finished = playing.i >= len(data) or (
                    playing.stopping and playing.volume.value == 0.0
                )
                if finished:
                    playing.stopped = True
                else:
                    still_playing.append(playing)
            self.playing_samples = still_playing

            return list(zip(left, right))