"""
Sound effect synthesis.

Architecture:

1. Setup: parameter set -> derived per-sample quantities (``_Derived``)
2. Per output sample: repeat cycle, arpeggio, slide, vibrato, duty, envelope,
   phaser and high-pass sweeps
3. Per sub-sample (8x): oscillator -> low-pass -> high-pass -> phaser -> envelope

The loop is written with plain Python floats and local variables; numpy is only
used to hand back the finished buffer.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TypeAlias

import numpy as np
from numpy.typing import NDArray

from .params import SoundParams, WaveType, sanitize
from .rng import NOISE_TABLE_SIZE, NoiseSource

_LOGGER = logging.getLogger("retrosfx.synth")

FloatArray: TypeAlias = NDArray[np.float32]

# =============================================================================
# CONSTANTS
# =============================================================================

SAMPLE_RATE = 44100
MAX_SECONDS = 10
MAX_FRAMES = MAX_SECONDS * SAMPLE_RATE
SUPERSAMPLING = 8
OUTPUT_SCALE = 0.2
PHASER_SIZE = 1024
MIN_PERIOD = 8

_FREQ_EPSILON = 0.001
_ENVELOPE_SCALE = 100_000.0
_CYCLE_SCALE = 20_000
_CYCLE_OFFSET = 32

_SQUARE = int(WaveType.SQUARE)
_SAWTOOTH = int(WaveType.SAWTOOTH)
_SINE = int(WaveType.SINE)
_NOISE = int(WaveType.NOISE)


# =============================================================================
# SETUP
# =============================================================================


@dataclass(slots=True)
class _Derived:
    """Quantities reset at the start and on every repeat cycle."""

    period: float
    max_period: float
    slide: float
    delta_slide: float
    square_duty: float
    duty_slide: float
    arpeggio_modulation: float
    arpeggio_limit: int


def _period_for(frequency: float) -> float:
    return 100.0 / (frequency * frequency + _FREQ_EPSILON)


def _cycle_limit(speed: float) -> int:
    return int((1.0 - speed) ** 2 * _CYCLE_SCALE + _CYCLE_OFFSET)


def _derive(params: SoundParams) -> _Derived:
    if params.change_amount >= 0.0:
        modulation = 1.0 - params.change_amount**2 * 0.9
    else:
        modulation = 1.0 + params.change_amount**2 * 10.0
    # Exact float comparison: a speed of exactly 1.0 disables the arpeggio.
    arpeggio_limit = 0 if params.change_speed == 1.0 else _cycle_limit(params.change_speed)
    return _Derived(
        period=_period_for(params.start_frequency),
        max_period=_period_for(params.min_frequency),
        slide=1.0 - params.slide**3 * 0.01,
        delta_slide=-(params.delta_slide**3) * 0.000001,
        square_duty=0.5 - params.square_duty * 0.5,
        duty_slide=-params.duty_sweep * 0.00005,
        arpeggio_modulation=modulation,
        arpeggio_limit=arpeggio_limit,
    )


def _signed_square(value: float) -> float:
    squared = value * value
    return -squared if value < 0.0 else squared


def _progress(elapsed: int, length: int) -> float:
    # A zero-length stage counts as already complete.
    if length <= 0:
        return 1.0
    return elapsed / length


# =============================================================================
# GENERATION
# =============================================================================


def generate(params: SoundParams) -> FloatArray:
    """Render ``params`` to a mono float32 buffer at ``SAMPLE_RATE``.

    Deterministic for a non-zero ``rand_seed``. The buffer ends where the
    envelope finishes or the frequency falls below ``min_frequency``, and never
    exceeds ``MAX_FRAMES``.
    """

    p = sanitize(params)
    noise = NoiseSource(p.rand_seed)
    wave_type = int(p.wave_type)

    state = _derive(p)
    period_f = state.period
    max_period = state.max_period
    slide = state.slide
    delta_slide = state.delta_slide
    square_duty = state.square_duty
    duty_slide = state.duty_slide
    arpeggio_modulation = state.arpeggio_modulation
    arpeggio_limit = state.arpeggio_limit
    arpeggio_time = 0

    # Filters
    lpf_bypass = p.lpf_cutoff == 1.0
    lpf_w = p.lpf_cutoff**3 * 0.1
    lpf_w_sweep = 1.0 + p.lpf_cutoff_sweep * 0.0001
    lpf_damping = min(0.8, 5.0 / (1.0 + p.lpf_resonance**2 * 20.0) * (0.01 + lpf_w))
    lpf_pos = 0.0
    lpf_delta = 0.0
    hpf_w = p.hpf_cutoff**2 * 0.1
    hpf_w_sweep = 1.0 + p.hpf_cutoff_sweep * 0.0003
    hpf_pos = 0.0

    # Vibrato
    vibrato_phase = 0.0
    vibrato_speed = p.vibrato_speed**2 * 0.01
    vibrato_amplitude = p.vibrato_depth * 0.5

    # Envelope
    envelope_length = (
        int(p.attack_time * p.attack_time * _ENVELOPE_SCALE),
        int(p.sustain_time * p.sustain_time * _ENVELOPE_SCALE),
        int(p.decay_time * p.decay_time * _ENVELOPE_SCALE),
    )
    envelope_stage = 0
    envelope_time = 0
    envelope_volume = 0.0
    sustain_punch = p.sustain_punch

    # Phaser
    phaser_pos = _signed_square(p.phaser_offset) * 1020.0
    phaser_sweep = _signed_square(p.phaser_sweep)
    phaser_lag = abs(int(phaser_pos))
    phaser_buffer = [0.0] * PHASER_SIZE
    phaser_mask = PHASER_SIZE - 1
    phaser_index = 0

    noise_table = noise.table()

    repeat_limit = 0 if p.repeat_speed == 0.0 else _cycle_limit(p.repeat_speed)
    repeat_time = 0

    phase = 0
    period = int(period_f)
    output = np.zeros(MAX_FRAMES, dtype=np.float32)
    frame_count = 0
    finished = False

    for frame in range(MAX_FRAMES):
        if finished:
            break

        repeat_time += 1
        if repeat_limit != 0 and repeat_time >= repeat_limit:
            repeat_time = 0
            # Only the derived pitch/duty/arpeggio state resets; the seed does not.
            state = _derive(p)
            period_f = state.period
            max_period = state.max_period
            slide = state.slide
            delta_slide = state.delta_slide
            square_duty = state.square_duty
            duty_slide = state.duty_slide
            arpeggio_modulation = state.arpeggio_modulation
            arpeggio_limit = state.arpeggio_limit
            arpeggio_time = 0

        arpeggio_time += 1
        if arpeggio_limit != 0 and arpeggio_time >= arpeggio_limit:
            arpeggio_limit = 0
            period_f *= arpeggio_modulation

        slide += delta_slide
        period_f *= slide
        if period_f > max_period:
            period_f = max_period
            if p.min_frequency > 0.0:
                finished = True

        effective_period = period_f
        if vibrato_amplitude > 0.0:
            vibrato_phase += vibrato_speed
            effective_period = period_f * (1.0 + math.sin(vibrato_phase) * vibrato_amplitude)

        period = int(effective_period)
        if period < MIN_PERIOD:
            period = MIN_PERIOD

        square_duty += duty_slide
        if square_duty < 0.0:
            square_duty = 0.0
        elif square_duty > 0.5:
            square_duty = 0.5

        envelope_time += 1
        if envelope_time > envelope_length[envelope_stage]:
            envelope_time = 0
            envelope_stage += 1
            if envelope_stage == 3:
                finished = True

        if envelope_stage == 0:
            envelope_volume = _progress(envelope_time, envelope_length[0])
        elif envelope_stage == 1:
            envelope_volume = (
                1.0
                + (1.0 - _progress(envelope_time, envelope_length[1])) * 2.0 * sustain_punch
            )
        elif envelope_stage == 2:
            envelope_volume = 1.0 - _progress(envelope_time, envelope_length[2])

        phaser_pos += phaser_sweep
        phaser_lag = abs(int(phaser_pos))
        if phaser_lag > phaser_mask:
            phaser_lag = phaser_mask

        if hpf_w_sweep != 0.0:
            hpf_w *= hpf_w_sweep
            if hpf_w < 0.00001:
                hpf_w = 0.00001
            elif hpf_w > 0.1:
                hpf_w = 0.1

        accumulated = 0.0
        for _ in range(SUPERSAMPLING):
            phase += 1
            if phase >= period:
                phase %= period
                if wave_type == _NOISE:
                    noise.refill(noise_table)

            fraction = phase / period
            if wave_type == _SQUARE:
                sample = 0.5 if fraction < square_duty else -0.5
            elif wave_type == _SAWTOOTH:
                sample = 1.0 - fraction * 2.0
            elif wave_type == _SINE:
                sample = math.sin(fraction * 2.0 * math.pi)
            else:
                sample = noise_table[phase * NOISE_TABLE_SIZE // period]

            # Low-pass
            previous = lpf_pos
            lpf_w *= lpf_w_sweep
            if lpf_w < 0.0:
                lpf_w = 0.0
            elif lpf_w > 0.1:
                lpf_w = 0.1
            if lpf_bypass:
                lpf_pos = sample
                lpf_delta = 0.0
            else:
                lpf_delta += (sample - lpf_pos) * lpf_w
                lpf_delta -= lpf_delta * lpf_damping
            lpf_pos += lpf_delta

            # High-pass
            hpf_pos += lpf_pos - previous
            hpf_pos -= hpf_pos * hpf_w
            sample = hpf_pos

            # Phaser
            phaser_buffer[phaser_index] = sample
            sample += phaser_buffer[(phaser_index - phaser_lag) & phaser_mask]
            phaser_index = (phaser_index + 1) & phaser_mask

            accumulated += sample * envelope_volume

        value = accumulated / SUPERSAMPLING * OUTPUT_SCALE
        if value > 1.0:
            value = 1.0
        elif value < -1.0:
            value = -1.0
        output[frame] = value
        frame_count = frame + 1

    _LOGGER.debug(
        "Generated %d frames (%.3fs) seed=%d wave=%s",
        frame_count,
        frame_count / SAMPLE_RATE,
        p.rand_seed,
        p.wave_type.name.lower(),
    )
    return output[:frame_count].copy()
