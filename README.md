# gamebase

Small building blocks for games written in Python.

## Modules

### `gamebase.hex_dump`

`hex_dump(data)` returns an `xxd`-style dump of any object that supports the buffer protocol. Each row holds 16 bytes and has three parts:

- an 8-digit hex offset and a colon;
- the bytes as hex, in groups of two;
- the printable ASCII characters, with `.` for anything else.

A final row is always added when the length is a multiple of 16. An empty input therefore gives one blank row.

### `gamebase.chunks`

This module reads and writes chunks. A chunk is laid out as:

1. a four-byte magic;
2. a native-endian 32-bit byte count;
3. packed records.

The functions are:

- `read_chunk(stream, magic, element_format="B")` returns a list of records.
- `write_chunk(magic, items, stream, element_format="B")` writes one chunk.

Records are described by a `struct` format string. A format with a single field yields plain values, and a format with several fields yields tuples.

`read_chunk` raises `ChunkError` in these cases:

- the header is short;
- the magic does not match;
- the size is not a multiple of the record size;
- the data is truncated.

`write_chunk` raises `ValueError` if the magic is not exactly four bytes.

### `gamebase.data_path`

`data_path(suffix)` returns the directory of the running program (taken from `sys.argv[0]`) joined with `"/" + suffix`. If there is no program name, it uses the current directory.

### `gamebase.png`

- `load_png(filename, origin)` returns `((width, height), pixels)`. The pixels are 8-bit RGBA tuples, listed row by row from the corner chosen by `origin`. If the file cannot be opened or decoded as PNG, it raises `RuntimeError`.
- `save_png(filename, size, data, origin)` writes RGBA pixels to a PNG file. `data` is either a sequence of 4-component pixels or packed RGBA bytes. If the amount of data does not match `size`, it raises `ValueError`.
- `OriginLocation.UPPER_LEFT` and `OriginLocation.LOWER_LEFT` choose whether the first row is the top or the bottom of the image.

### `gamebase.wav`

`load_wav(filename)` loads a WAV file as a list of 48 kHz mono floats.

- It reads 8-, 16-, 24- and 32-bit PCM, and 32- and 64-bit float data.
- Multi-channel audio is averaged down to mono.
- Other sample rates are resampled linearly.
- Unreadable or unsupported files raise `RuntimeError`.

### `gamebase.sound`

This module is a software mixer with a fixed block size of `MIX_SAMPLES = 1024` frames at `AUDIO_RATE = 48000`.

Samples:

- `Sample(data)` holds mono float samples.
- `load_sample(filename)` loads a `.wav` file. Other extensions raise `RuntimeError`.

`Mixer` has these playback methods:

- `play(sample, volume, pan)` and `loop(sample, volume, pan)` play in 2D, where pan runs from -1 (hard left) to 1 (hard right).
- `play_3d(sample, volume, position, half_volume_radius)` and `loop_3d(...)` pan relative to `mixer.listener`. Volume halves at `half_volume_radius`, which defaults to infinity.
- Playing an empty sample raises `ValueError`.
- Each of these methods returns a `PlayingSample`.

`PlayingSample` has these methods:

- `set_volume` changes the volume.
- `set_pan` changes the pan and only affects 2D samples.
- `set_position` and `set_half_volume_radius` only affect 3D samples.
- `stop` fades the sample out, after which it is removed.

Other controls:

- `Listener.set_position_right(position, right, ramp)` moves the listener. The right vector is normalized, and a zero vector is replaced by +x.
- `Mixer.set_volume(volume, ramp)` sets the global volume.
- `Mixer.stop_all_samples()` fades out every playing sample.

All changes glide over `ramp` seconds (default 1/60) through `Ramp` objects. A ramp of zero or less applies the change immediately.

`Mixer.mix()` returns the next 1024 `(left, right)` frames and advances every ramp by one block. Samples that have finished, or have faded out after `stop`, are dropped.

The panning helpers are public:

- `compute_pan_weights`
- `compute_pan_from_listener_and_position`
- `step_value_ramp`
- `step_position_ramp`
- `step_direction_ramp`

## What it does not do

- `Mixer.mix()` only computes frames. Sending them to a sound device is up to the caller.
- Only WAV audio can be loaded. There is no Opus or other compressed-audio support.
- There is no window, rendering, input handling or networking, and no command-line program.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Example

```python
from gamebase.sound import Mixer, Sample, load_sample

mixer = Mixer()
blip = Sample([0.0, 0.5, 1.0, 0.5] * 2000)
playing = mixer.play(blip, 1.0, -0.5)   # a little to the left
playing.set_pan(0.5, 0.25)              # glide right over a quarter second

frames = mixer.mix()                    # list of 1024 (left, right) pairs
music = mixer.loop(load_sample("music.wav"), 0.8, 0.0)
mixer.stop_all_samples()
```

```python
from gamebase.png import OriginLocation, load_png, save_png

size, pixels = load_png("sprite.png", OriginLocation.UPPER_LEFT)
save_png("copy.png", size, pixels, OriginLocation.UPPER_LEFT)
```

```python
import io
from gamebase.chunks import read_chunk, write_chunk

buffer = io.BytesIO()
write_chunk("pos0", [(1.0, 2.0, 3.0)], buffer, "3f")
buffer.seek(0)
assert read_chunk(buffer, "pos0", "3f") == [(1.0, 2.0, 3.0)]
```