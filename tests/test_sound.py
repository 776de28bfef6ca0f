import math
import struct
import wave

import pytest

from gamebase.sound import (
    MIX_SAMPLES,
    RAMP_STEP,
    Listener,
    Mixer,
    PlayingSample,
    Ramp,
    Sample,
    compute_pan_from_listener_and_position,
    compute_pan_weights,
    load_sample,
    step_direction_ramp,
    step_position_ramp,
    step_value_ramp,
)


def test_ramp_set_immediate():
    ramp = Ramp(1.0)
    ramp.set(3.0, 0.0)
    assert (ramp.value, ramp.target, ramp.ramp) == (3.0, 3.0, 0.0)


def test_ramp_set_gradual():
    ramp = Ramp(1.0)
    ramp.set(3.0, 0.5)
    assert (ramp.value, ramp.target, ramp.ramp) == (1.0, 3.0, 0.5)


def test_step_value_ramp_snaps_when_short():
    ramp = Ramp(0.0)
    ramp.set(1.0, RAMP_STEP / 2)
    step_value_ramp(ramp)
    assert ramp.value == 1.0 and ramp.ramp == 0.0


def test_step_value_ramp_moves_partway():
    ramp = Ramp(0.0)
    ramp.set(1.0, 1.0)
    step_value_ramp(ramp)
    assert 0.0 < ramp.value < 1.0
    assert ramp.ramp == pytest.approx(1.0 - RAMP_STEP)


def test_step_position_ramp_moves_towards_target():
    ramp = Ramp((0.0, 0.0, 0.0))
    ramp.set((10.0, 0.0, 0.0), 1.0)
    step_position_ramp(ramp)
    assert 0.0 < ramp.value[0] < 10.0
    assert ramp.value[1] == 0.0


def test_step_direction_ramp_keeps_unit_length():
    ramp = Ramp((1.0, 0.0, 0.0))
    ramp.set((0.0, 1.0, 0.0), 0.5)
    before = math.acos(ramp.value[1])
    step_direction_ramp(ramp)
    length = math.sqrt(sum(c * c for c in ramp.value))
    assert length == pytest.approx(1.0)
    assert math.acos(max(-1.0, min(1.0, ramp.value[1]))) < before


def test_step_direction_ramp_opposite_directions():
    ramp = Ramp((1.0, 0.0, 0.0))
    ramp.set((-1.0, 0.0, 0.0), 0.5)
    step_direction_ramp(ramp)
    length = math.sqrt(sum(c * c for c in ramp.value))
    assert length == pytest.approx(1.0)


def test_pan_weights_equal_power():
    for pan in (-1.0, -0.3, 0.0, 0.7, 1.0):
        left, right = compute_pan_weights(pan)
        assert left * left + right * right == pytest.approx(1.0)


def test_pan_weights_centre_and_clamp():
    left, right = compute_pan_weights(0.0)
    assert left == pytest.approx(right)
    assert compute_pan_weights(5.0) == compute_pan_weights(1.0)
    hard_left = compute_pan_weights(-1.0)
    assert hard_left[0] == pytest.approx(1.0)
    assert hard_left[1] == pytest.approx(0.0)


def test_pan_from_position_at_listener():
    left, right = compute_pan_from_listener_and_position(
        (0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, 0.0, 0.0), 1.0
    )
    assert left == right == pytest.approx(math.sqrt(2.0))


def test_pan_from_position_to_the_right():
    left, right = compute_pan_from_listener_and_position(
        (0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (3.0, 0.0, 0.0), math.inf
    )
    assert left == pytest.approx(0.0, abs=1e-9)
    assert right == pytest.approx(1.0)


def test_pan_from_position_half_volume_radius():
    left, right = compute_pan_from_listener_and_position(
        (0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, 2.0, 0.0), 2.0
    )
    assert math.hypot(left, right) == pytest.approx(0.5)
    assert left == pytest.approx(right)


def test_listener_zero_right_becomes_x_axis():
    listener = Listener()
    listener.set_position_right((1.0, 2.0, 3.0), (0.0, 0.0, 0.0), 0.0)
    assert listener.right.value == (1.0, 0.0, 0.0)
    assert listener.position.value == (1.0, 2.0, 3.0)


def test_listener_right_is_normalized():
    listener = Listener()
    listener.set_position_right((0.0, 0.0, 0.0), (0.0, 2.0, 0.0), 0.0)
    assert listener.right.value == pytest.approx((0.0, 1.0, 0.0))


def test_mix_centre_pan_is_balanced():
    mixer = Mixer()
    mixer.loop(Sample([0.5] * 100))
    frames = mixer.mix()
    assert len(frames) == MIX_SAMPLES
    assert all(left == pytest.approx(right) for left, right in frames)
    assert frames[0][0] == pytest.approx(0.5 * compute_pan_weights(0.0)[0])


def test_mix_removes_finished_sample():
    mixer = Mixer()
    playing = mixer.play(Sample([1.0] * 10))
    frames = mixer.mix()
    assert playing.stopped
    assert mixer.playing_samples == []
    assert all(frame == (0.0, 0.0) for frame in frames[10:])
    assert frames[0][0] > 0.0


def test_loop_keeps_playing():
    mixer = Mixer()
    playing = mixer.loop(Sample([1.0] * 10))
    mixer.mix()
    mixer.mix()
    assert not playing.stopped
    assert mixer.playing_samples == [playing]


def test_stop_fades_and_removes():
    mixer = Mixer()
    playing = mixer.loop(Sample([1.0] * 10))
    playing.stop()
    assert playing.stopping and playing.volume.target == 0.0
    frames = mixer.mix()
    assert playing.stopped
    assert mixer.playing_samples == []
    assert frames[-1][0] < frames[0][0]


def test_stop_all_samples():
    mixer = Mixer()
    first = mixer.loop(Sample([1.0] * 10))
    second = mixer.loop(Sample([1.0] * 10), pan=0.5)
    mixer.stop_all_samples()
    assert first.stopping and second.stopping


def test_set_volume_ignored_when_stopping():
    mixer = Mixer()
    playing = mixer.loop(Sample([1.0] * 10))
    playing.stop()
    playing.set_volume(1.0, 0.0)
    assert playing.volume.target == 0.0


def test_global_volume_zero_silences():
    mixer = Mixer()
    mixer.loop(Sample([1.0] * 10))
    mixer.set_volume(0.0, 0.0)
    assert all(frame == (0.0, 0.0) for frame in mixer.mix())


def test_3d_sample_to_the_right():
    mixer = Mixer()
    playing = mixer.loop_3d(Sample([1.0] * 10), 1.0, (5.0, 0.0, 0.0))
    frames = mixer.mix()
    assert playing.is_3d
    assert frames[0][1] > frames[0][0]


def test_mode_specific_setters_are_ignored():
    mixer = Mixer()
    flat = mixer.play(Sample([1.0] * 10), pan=0.25)
    spatial = mixer.play_3d(Sample([1.0] * 10), 1.0, (1.0, 0.0, 0.0), 4.0)
    flat.set_position((9.0, 9.0, 9.0), 0.0)
    flat.set_half_volume_radius(9.0, 0.0)
    spatial.set_pan(0.9, 0.0)
    assert all(math.isnan(c) for c in flat.position.value)
    assert math.isnan(flat.half_volume_radius.value)
    assert math.isnan(spatial.pan.value)
    spatial.set_position((2.0, 0.0, 0.0), 0.0)
    flat.set_pan(-0.5, 0.0)
    assert spatial.position.value == (2.0, 0.0, 0.0)
    assert flat.pan.value == -0.5


def test_empty_sample_rejected():
    with pytest.raises(ValueError):
        Mixer().play(Sample([]))


def test_playing_sample_defaults():
    playing = PlayingSample([0.0, 1.0], 0.5, False, pan=0.0)
    assert playing.i == 0
    assert playing.volume.value == 0.5
    assert not playing.is_3d


def test_load_sample_unknown_extension(tmp_path):
    with pytest.raises(RuntimeError):
        load_sample(str(tmp_path / "sound.txt"))


def test_load_sample_wav(tmp_path):
    path = tmp_path / "tone.wav"
    values = [0, 16384, -16384, 0] * 5
    with wave.open(str(path), "wb") as handle:
        handle.setnchannels(1)
        handle.setsampwidth(2)
        handle.setframerate(48000)
        handle.writeframes(struct.pack(f"<{len(values)}h", *values))
    sample = load_sample(str(path))
    assert len(sample.data) == len(values)
    assert sample.data[1] == pytest.approx(0.5)
    assert sample.data[2] == pytest.approx(-0.5)