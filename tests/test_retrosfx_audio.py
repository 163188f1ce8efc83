from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest
import soundfile as sf  # type: ignore[import]

from retrosfx.audio import (
    ensure_audio_contract,
    export_audio,
    export_code,
    export_raw,
    export_wav,
    format_wave,
)
from retrosfx.errors import ExportFormatError


def _tone(frames: int = 4410) -> np.ndarray:
    t = np.arange(frames, dtype=np.float32) / 44_100
    return (0.5 * np.sin(2 * np.pi * 440.0 * t)).astype(np.float32)


def test_ensure_audio_contract_clips_and_flattens() -> None:
    out = ensure_audio_contract([[2.0], [-3.0], [0.25]])
    assert out.dtype == np.float32
    assert out.tolist() == [1.0, -1.0, 0.25]


def test_format_wave_sample_sizes() -> None:
    audio = np.array([-1.0, 0.0, 1.0], dtype=np.float32)
    assert format_wave(audio, sample_size=8)[:, 0].tolist() == [0, 128, 255]
    assert format_wave(audio, sample_size=16)[:, 0].tolist() == [-32767, 0, 32767]
    floats = format_wave(audio, sample_size=32)
    assert floats.dtype == np.dtype("<f4")
    assert floats[:, 0].tolist() == [-1.0, 0.0, 1.0]


def test_format_wave_stereo_and_resample() -> None:
    audio = _tone()
    stereo = format_wave(audio, channels=2)
    assert stereo.shape == (4410, 2)
    assert np.array_equal(stereo[:, 0], stereo[:, 1])

    half = format_wave(audio, sample_rate=22_050, sample_size=32)
    assert half.shape == (2205, 1)
    assert np.all(np.abs(half) <= 1.0)


@pytest.mark.parametrize(
    "kwargs",
    [{"sample_rate": 48_000}, {"sample_size": 24}, {"channels": 6}],
)
def test_format_wave_rejects_unsupported(kwargs) -> None:
    with pytest.raises(ExportFormatError):
        format_wave(_tone(), **kwargs)


@pytest.mark.parametrize(
    ("sample_size", "subtype"),
    [(8, "PCM_U8"), (16, "PCM_16"), (32, "FLOAT")],
)
def test_export_wav_formats(tmp_path: Path, sample_size: int, subtype: str) -> None:
    target = export_wav(
        tmp_path / "tone.wav", _tone(), sample_rate=22_050, sample_size=sample_size, channels=2
    )
    info = sf.info(str(target))
    assert info.samplerate == 22_050
    assert info.channels == 2
    assert info.subtype == subtype
    assert info.frames == 2205


def test_export_raw_size(tmp_path: Path) -> None:
    target = export_raw(tmp_path / "tone.raw", _tone(), sample_size=16, channels=2)
    assert target.stat().st_size == 4410 * 2 * 2


def test_export_code_header(tmp_path: Path) -> None:
    target = export_code(tmp_path / "jump-1.h", _tone(10), sample_size=8)
    text = target.read_text(encoding="utf-8")
    assert "#define JUMP_1_FRAME_COUNT    10" in text
    assert "#define JUMP_1_SAMPLE_SIZE    8" in text
    assert "static unsigned char JUMP_1_DATA[10] = {" in text
    assert text.rstrip().endswith("};")


def test_export_audio_dispatches_by_extension(tmp_path: Path) -> None:
    assert export_audio(tmp_path / "a.WAV", _tone()).exists()
    assert export_audio(tmp_path / "a.raw", _tone()).stat().st_size == 4410 * 2
    with pytest.raises(ExportFormatError):
        export_audio(tmp_path / "a.ogg", _tone())
