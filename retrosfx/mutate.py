from __future__ import annotations

import logging

from .params import SoundParams
from .rng import DesignRandom

_LOGGER = logging.getLogger("retrosfx.mutate")

MUTATION_SPAN = 0.1

# min_frequency is left alone: nudging it above the slide target cuts sounds short.
MUTABLE_FIELDS: tuple[str, ...] = (
    "start_frequency",
    "slide",
    "delta_slide",
    "square_duty",
    "duty_sweep",
    "vibrato_depth",
    "vibrato_speed",
    "attack_time",
    "sustain_time",
    "decay_time",
    "sustain_punch",
    "lpf_resonance",
    "lpf_cutoff",
    "lpf_cutoff_sweep",
    "hpf_cutoff",
    "hpf_cutoff_sweep",
    "phaser_offset",
    "phaser_sweep",
    "repeat_speed",
    "change_speed",
    "change_amount",
)


def mutate(params: SoundParams, rng: DesignRandom, *, reseed: bool = True) -> None:
    """Nudge a random subset of fields by up to +/-0.05, in place.

    ``rng`` is reseeded from the wall clock first so repeated mutations of the
    same sound keep diverging.
    """

    if reseed:
        rng.reseed()

    touched = 0
    for field in MUTABLE_FIELDS:
        if rng.coin():
            delta = rng.frnd(MUTATION_SPAN) - MUTATION_SPAN / 2
            setattr(params, field, getattr(params, field) + delta)
            touched += 1

    _LOGGER.debug("Mutated %d of %d fields", touched, len(MUTABLE_FIELDS))
