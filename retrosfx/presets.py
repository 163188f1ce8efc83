"""Preset generators for common retro sound archetypes.

Every generator starts from ``reset_params`` and randomizes a subset of
fields within hand-tuned ranges. All randomness comes from the caller's
``DesignRandom``.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Callable, Mapping

from .errors import UnknownPresetError
from .params import SEED_MAX, SoundParams, WaveType, reset_params
from .rng import DesignRandom

_LOGGER = logging.getLogger("retrosfx.presets")

PresetFn = Callable[[DesignRandom], SoundParams]


def gen_pickup_coin(rng: DesignRandom) -> SoundParams:
    params = reset_params(rng)
    params.start_frequency = 0.4 + rng.frnd(0.5)
    params.attack_time = 0.0
    params.sustain_time = rng.frnd(0.1)
    params.decay_time = 0.1 + rng.frnd(0.4)
    params.sustain_punch = 0.3 + rng.frnd(0.3)

    if rng.coin():
        params.change_speed = 0.5 + rng.frnd(0.2)
        params.change_amount = 0.2 + rng.frnd(0.4)

    return params


def gen_laser_shoot(rng: DesignRandom) -> SoundParams:
    params = reset_params(rng)
    wave = rng.value(0, 2)
    if wave == WaveType.SINE and rng.coin():
        wave = rng.value(0, 1)
    params.wave_type = WaveType(wave)

    params.start_frequency = 0.5 + rng.frnd(0.5)
    params.min_frequency = max(0.2, params.start_frequency - 0.2 - rng.frnd(0.6))
    params.slide = -0.15 - rng.frnd(0.2)

    if rng.chance(3):
        params.start_frequency = 0.3 + rng.frnd(0.6)
        params.min_frequency = rng.frnd(0.1)
        params.slide = -0.35 - rng.frnd(0.3)

    if rng.coin():
        params.square_duty = rng.frnd(0.5)
        params.duty_sweep = rng.frnd(0.2)
    else:
        params.square_duty = 0.4 + rng.frnd(0.5)
        params.duty_sweep = -rng.frnd(0.7)

    params.attack_time = 0.0
    params.sustain_time = 0.1 + rng.frnd(0.2)
    params.decay_time = rng.frnd(0.4)

    if rng.coin():
        params.sustain_punch = rng.frnd(0.3)

    if rng.chance(3):
        params.phaser_offset = rng.frnd(0.2)
        params.phaser_sweep = -rng.frnd(0.2)

    if rng.coin():
        params.hpf_cutoff = rng.frnd(0.3)

    return params


def gen_explosion(rng: DesignRandom) -> SoundParams:
    params = reset_params(rng)
    params.wave_type = WaveType.NOISE

    if rng.coin():
        start = 0.1 + rng.frnd(0.4)
        params.slide = -0.1 + rng.frnd(0.4)
    else:
        start = 0.2 + rng.frnd(0.7)
        params.slide = -0.2 - rng.frnd(0.2)
    params.start_frequency = start * start

    if rng.chance(5):
        params.slide = 0.0
    if rng.chance(3):
        params.repeat_speed = 0.3 + rng.frnd(0.5)

    params.attack_time = 0.0
    params.sustain_time = 0.1 + rng.frnd(0.3)
    params.decay_time = rng.frnd(0.5)

    if rng.chance(2):
        params.phaser_offset = -0.3 + rng.frnd(0.9)
        params.phaser_sweep = -rng.frnd(0.3)

    params.sustain_punch = 0.2 + rng.frnd(0.6)

    if rng.coin():
        params.vibrato_depth = rng.frnd(0.7)
        params.vibrato_speed = rng.frnd(0.6)

    if rng.chance(3):
        params.change_speed = 0.6 + rng.frnd(0.3)
        params.change_amount = 0.8 - rng.frnd(1.6)

    return params


def gen_powerup(rng: DesignRandom) -> SoundParams:
    params = reset_params(rng)
    if rng.coin():
        params.wave_type = WaveType.SAWTOOTH
    else:
        params.square_duty = rng.frnd(0.6)

    params.start_frequency = 0.2 + rng.frnd(0.3)
    if rng.coin():
        params.slide = 0.1 + rng.frnd(0.4)
        params.repeat_speed = 0.4 + rng.frnd(0.4)
    else:
        params.slide = 0.05 + rng.frnd(0.2)
        if rng.coin():
            params.vibrato_depth = rng.frnd(0.7)
            params.vibrato_speed = rng.frnd(0.6)

    params.attack_time = 0.0
    params.sustain_time = rng.frnd(0.4)
    params.decay_time = 0.1 + rng.frnd(0.4)

    return params


def gen_hit_hurt(rng: DesignRandom) -> SoundParams:
    params = reset_params(rng)
    wave = WaveType(rng.value(0, 2))
    if wave == WaveType.SINE:
        wave = WaveType.NOISE
    params.wave_type = wave
    if wave == WaveType.SQUARE:
        params.square_duty = rng.frnd(0.6)

    params.start_frequency = 0.2 + rng.frnd(0.6)
    params.slide = -0.3 - rng.frnd(0.4)
    params.attack_time = 0.0
    params.sustain_time = rng.frnd(0.1)
    params.decay_time = 0.1 + rng.frnd(0.2)

    if rng.coin():
        params.hpf_cutoff = rng.frnd(0.3)

    return params


def gen_jump(rng: DesignRandom) -> SoundParams:
    params = reset_params(rng)
    params.wave_type = WaveType.SQUARE
    params.square_duty = rng.frnd(0.6)
    params.start_frequency = 0.3 + rng.frnd(0.3)
    params.slide = 0.1 + rng.frnd(0.2)
    params.attack_time = 0.0
    params.sustain_time = 0.1 + rng.frnd(0.3)
    params.decay_time = 0.1 + rng.frnd(0.2)

    if rng.coin():
        params.hpf_cutoff = rng.frnd(0.3)
    if rng.coin():
        params.lpf_cutoff = 1.0 - rng.frnd(0.6)

    return params


def gen_blip_select(rng: DesignRandom) -> SoundParams:
    params = reset_params(rng)
    params.wave_type = WaveType(rng.value(0, 1))
    if params.wave_type == WaveType.SQUARE:
        params.square_duty = rng.frnd(0.6)
    params.start_frequency = 0.2 + rng.frnd(0.4)
    params.attack_time = 0.0
    params.sustain_time = 0.1 + rng.frnd(0.1)
    params.decay_time = rng.frnd(0.2)
    params.hpf_cutoff = 0.1
    return params


def randomize(rng: DesignRandom) -> SoundParams:
    """Fully random parameter set, biased towards audible results."""

    params = reset_params(rng)
    params.rand_seed = rng.value(0, SEED_MAX)

    params.start_frequency = rng.signed() ** 2
    if rng.coin():
        params.start_frequency = rng.signed() ** 3 + 0.5
    params.min_frequency = 0.0

    params.slide = rng.signed() ** 5
    if params.start_frequency > 0.7 and params.slide > 0.2:
        params.slide = -params.slide
    if params.start_frequency < 0.2 and params.slide < -0.05:
        params.slide = -params.slide

    params.delta_slide = rng.signed() ** 3
    params.square_duty = rng.signed()
    params.duty_sweep = rng.signed() ** 3
    params.vibrato_depth = rng.signed() ** 3
    params.vibrato_speed = rng.signed()
    params.attack_time = rng.signed() ** 3
    params.sustain_time = rng.signed() ** 2
    params.decay_time = rng.signed()
    params.sustain_punch = rng.frnd(0.8) ** 2

    # Keep the sound from being near-silent.
    if params.attack_time + params.sustain_time + params.decay_time < 0.2:
        params.sustain_time += 0.2 + rng.frnd(0.3)
        params.decay_time += 0.2 + rng.frnd(0.3)

    params.lpf_resonance = rng.signed()
    params.lpf_cutoff = 1.0 - rng.frnd(1.0) ** 3
    params.lpf_cutoff_sweep = rng.signed() ** 3
    if params.lpf_cutoff < 0.1 and params.lpf_cutoff_sweep < -0.05:
        params.lpf_cutoff_sweep = -params.lpf_cutoff_sweep

    params.hpf_cutoff = rng.frnd(1.0) ** 5
    params.hpf_cutoff_sweep = rng.signed() ** 5
    params.phaser_offset = rng.signed() ** 3
    params.phaser_sweep = rng.signed() ** 3
    params.repeat_speed = rng.signed()
    params.change_speed = rng.signed()
    params.change_amount = rng.signed()

    return params


PRESETS: Mapping[str, PresetFn] = MappingProxyType(
    {
        "pickup_coin": gen_pickup_coin,
        "laser_shoot": gen_laser_shoot,
        "explosion": gen_explosion,
        "powerup": gen_powerup,
        "hit_hurt": gen_hit_hurt,
        "jump": gen_jump,
        "blip_select": gen_blip_select,
        "random": randomize,
    }
)

PRESET_NAMES: tuple[str, ...] = tuple(PRESETS)


def preset(name: str, rng: DesignRandom) -> SoundParams:
    try:
        generator = PRESETS[name]
    except KeyError as exc:
        raise UnknownPresetError(
            f"Unknown preset: {name!r}. Valid: {', '.join(PRESET_NAMES)}"
        ) from exc
    params = generator(rng)
    _LOGGER.debug("Built preset %s (seed=%d)", name, params.rand_seed)
    return params
