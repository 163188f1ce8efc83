from __future__ import annotations

import logging
from enum import IntEnum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Mapping

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

if TYPE_CHECKING:
    from .rng import DesignRandom

_LOGGER = logging.getLogger("retrosfx.params")

SEED_MIN = 0x1
SEED_MAX = 0xFFFE
_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1
_INTEGER_FIELDS = frozenset({"rand_seed", "wave_type"})
_FLOAT32_MAX = float(np.finfo(np.float32).max)


class WaveType(IntEnum):
    SQUARE = 0
    SAWTOOTH = 1
    SINE = 2
    NOISE = 3


class SoundParams(BaseModel):
    """Declarative description of one sound effect.

    Field order matches the binary .rfx payload. Floats are held at float32
    precision so a save/load cycle reproduces them exactly.
    """

    rand_seed: int = Field(default=0, ge=_INT32_MIN, le=_INT32_MAX)
    wave_type: WaveType = WaveType.SQUARE

    # Envelope
    attack_time: float = 0.0
    sustain_time: float = 0.3
    sustain_punch: float = 0.0
    decay_time: float = 0.4

    # Frequency
    start_frequency: float = 0.3
    min_frequency: float = 0.0
    slide: float = 0.0
    delta_slide: float = 0.0
    vibrato_depth: float = 0.0
    vibrato_speed: float = 0.0

    # Tone change
    change_amount: float = 0.0
    change_speed: float = 0.0

    # Square duty
    square_duty: float = 0.0
    duty_sweep: float = 0.0

    repeat_speed: float = 0.0

    # Phaser
    phaser_offset: float = 0.0
    phaser_sweep: float = 0.0

    # Filters
    lpf_cutoff: float = 1.0
    lpf_cutoff_sweep: float = 0.0
    lpf_resonance: float = 0.0
    hpf_cutoff: float = 0.0
    hpf_cutoff_sweep: float = 0.0

    model_config = ConfigDict(
        extra="forbid",
        validate_assignment=True,
        validate_default=True,
        allow_inf_nan=False,
    )

    @field_validator("*", mode="after")
    @classmethod
    def _to_float32(cls, value: Any, info: ValidationInfo) -> Any:
        if info.field_name in _INTEGER_FIELDS:
            return value
        if abs(value) > _FLOAT32_MAX:
            raise ValueError(f"{info.field_name} does not fit in float32: {value}")
        return float(np.float32(value))

    def group(self, name: str) -> dict[str, float]:
        """Values of one named sub-group (see ``PARAM_GROUPS``)."""
        try:
            fields = PARAM_GROUPS[name]
        except KeyError as exc:
            raise KeyError(f"Unknown parameter group: {name!r}") from exc
        return {field: getattr(self, field) for field in fields}

    def as_tuple(self) -> tuple[int | float, ...]:
        return tuple(
            int(value) if isinstance(value, IntEnum) else value
            for value in (getattr(self, field) for field in PARAM_ORDER)
        )


PARAM_ORDER: tuple[str, ...] = tuple(SoundParams.model_fields)

FLOAT_FIELDS: tuple[str, ...] = PARAM_ORDER[2:]

PARAM_GROUPS: Mapping[str, tuple[str, ...]] = MappingProxyType(
    {
        "envelope": ("attack_time", "sustain_time", "sustain_punch", "decay_time"),
        "frequency": (
            "start_frequency",
            "min_frequency",
            "slide",
            "delta_slide",
            "vibrato_depth",
            "vibrato_speed",
        ),
        "arpeggio": ("change_amount", "change_speed"),
        "duty": ("square_duty", "duty_sweep"),
        "repeat": ("repeat_speed",),
        "phaser": ("phaser_offset", "phaser_sweep"),
        "lpf": ("lpf_cutoff", "lpf_cutoff_sweep", "lpf_resonance"),
        "hpf": ("hpf_cutoff", "hpf_cutoff_sweep"),
    }
)


def reset_params(rng: DesignRandom) -> SoundParams:
    """Baseline parameter set with a fresh seed in ``[1, 0xFFFE]``."""
    return SoundParams(rand_seed=rng.value(SEED_MIN, SEED_MAX))


def sanitize(params: SoundParams) -> SoundParams:
    """Copy of ``params`` with the two degenerate-input clamps applied."""
    updates: dict[str, float] = {}
    if params.min_frequency > params.start_frequency:
        updates["min_frequency"] = params.start_frequency
    if params.slide < params.delta_slide:
        updates["slide"] = params.delta_slide
    if updates:
        _LOGGER.debug("Clamped degenerate parameters: %s", updates)
    return params.model_copy(update=updates)
