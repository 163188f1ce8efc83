from __future__ import annotations

import pytest

import retrosfx.rng as rng_module
from retrosfx.mutate import MUTABLE_FIELDS, mutate
from retrosfx.params import FLOAT_FIELDS, SoundParams, WaveType
from retrosfx.presets import gen_explosion
from retrosfx.rng import DesignRandom

# Float32 storage rounds by at most half an ulp for values below 2.
_TOLERANCE = 1e-7


def test_mutable_fields_exclude_seed_wave_and_min_frequency() -> None:
    assert len(MUTABLE_FIELDS) == 21
    assert set(MUTABLE_FIELDS) == set(FLOAT_FIELDS) - {"min_frequency"}


@pytest.mark.parametrize("seed", range(10))
def test_mutation_changes_each_field_by_at_most_005(seed: int) -> None:
    params = gen_explosion(DesignRandom(seed))
    before = params.model_dump()
    mutate(params, DesignRandom(seed), reseed=False)
    after = params.model_dump()

    assert after["rand_seed"] == before["rand_seed"]
    assert after["wave_type"] == before["wave_type"] == WaveType.NOISE
    assert after["min_frequency"] == before["min_frequency"]
    for field in MUTABLE_FIELDS:
        assert abs(after[field] - before[field]) <= 0.05 + _TOLERANCE


def test_mutation_touches_some_fields() -> None:
    params = SoundParams(rand_seed=3)
    before = params.model_dump()
    mutate(params, DesignRandom(3), reseed=False)
    changed = [field for field in MUTABLE_FIELDS if params.model_dump()[field] != before[field]]
    assert 0 < len(changed) < len(MUTABLE_FIELDS)


def test_mutation_reseeds_from_clock(monkeypatch) -> None:
    monkeypatch.setattr(rng_module, "_clock_seed", lambda: 987654321)
    first = SoundParams(rand_seed=1)
    second = SoundParams(rand_seed=1)
    mutate(first, DesignRandom(1))
    mutate(second, DesignRandom(2))
    assert first.model_dump() == second.model_dump()


def test_successive_mutations_keep_diverging(monkeypatch) -> None:
    ticks = iter(range(1, 100))
    monkeypatch.setattr(rng_module, "_clock_seed", lambda: next(ticks))
    params = SoundParams(rand_seed=1)
    rng = DesignRandom(0)
    snapshots = []
    for _ in range(3):
        mutate(params, rng)
        snapshots.append(params.model_dump())
    assert snapshots[0] != snapshots[1] != snapshots[2]
