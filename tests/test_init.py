from __future__ import annotations

import retrosfx as rs


def test_public_api_reexports() -> None:
    for name in rs.__all__:
        assert hasattr(rs, name), name
    assert callable(rs.generate)
    assert callable(rs.preset)
    assert rs.SAMPLE_RATE == 44_100


def test_public_round_trip() -> None:
    rng = rs.DesignRandom(21)
    params = rs.preset("pickup_coin", rng)
    rs.mutate(params, rng, reseed=False)
    restored = rs.decode_params(rs.encode_params(params))
    assert restored.model_dump() == params.model_dump()
    assert rs.generate(restored).tobytes() == rs.generate(params).tobytes()
