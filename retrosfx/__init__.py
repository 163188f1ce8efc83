from __future__ import annotations

from .audio import export_audio, export_code, export_raw, export_wav, format_wave
from .codec import decode_params, encode_params, load_params, save_params
from .errors import ExportFormatError, MalformedFileError, RetroSfxError, UnknownPresetError
from .logging_utils import configure_logging as _configure_logging
from .mutate import MUTABLE_FIELDS, mutate
from .params import PARAM_GROUPS, PARAM_ORDER, SoundParams, WaveType, reset_params, sanitize
from .presets import (
    PRESET_NAMES,
    PRESETS,
    gen_blip_select,
    gen_explosion,
    gen_hit_hurt,
    gen_jump,
    gen_laser_shoot,
    gen_pickup_coin,
    gen_powerup,
    preset,
    randomize,
)
from .rng import DesignRandom, NoiseSource
from .synth import MAX_FRAMES, SAMPLE_RATE, generate

__all__ = [
    "MAX_FRAMES",
    "MUTABLE_FIELDS",
    "PARAM_GROUPS",
    "PARAM_ORDER",
    "PRESETS",
    "PRESET_NAMES",
    "SAMPLE_RATE",
    "DesignRandom",
    "ExportFormatError",
    "MalformedFileError",
    "NoiseSource",
    "RetroSfxError",
    "SoundParams",
    "UnknownPresetError",
    "WaveType",
    "decode_params",
    "encode_params",
    "export_audio",
    "export_code",
    "export_raw",
    "export_wav",
    "format_wave",
    "gen_blip_select",
    "gen_explosion",
    "gen_hit_hurt",
    "gen_jump",
    "gen_laser_shoot",
    "gen_pickup_coin",
    "gen_powerup",
    "generate",
    "load_params",
    "mutate",
    "preset",
    "randomize",
    "reset_params",
    "sanitize",
    "save_params",
]

__version__ = "0.1.0"

_configure_logging()
del _configure_logging
