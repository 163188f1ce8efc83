from __future__ import annotations

import logging
import math
import re
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import numpy as np
import soundfile as sf  # type: ignore[import]
from numpy.typing import NDArray
from scipy.signal import resample_poly  # type: ignore[import]

from .errors import ExportFormatError
from .synth import SAMPLE_RATE

_LOGGER = logging.getLogger("retrosfx.audio")

FloatArray = NDArray[np.float32]
AudioNumbers = NDArray[np.floating[Any]] | Sequence[float] | FloatArray

SAMPLE_RATES = (22_050, 44_100)
SAMPLE_SIZES = (8, 16, 32)
CHANNEL_COUNTS = (1, 2)

_WAV_SUBTYPES = {8: "PCM_U8", 16: "PCM_16", 32: "FLOAT"}
_RAW_DTYPES = {8: np.dtype("u1"), 16: np.dtype("<i2"), 32: np.dtype("<f4")}
_CODE_BYTES_PER_LINE = 20


def ensure_audio_contract(audio: AudioNumbers) -> FloatArray:
    """Flatten to mono float32 and clip to [-1, 1]."""

    mono: FloatArray = np.asarray(audio, dtype=np.float32).reshape(-1)
    if mono.size == 0:
        return mono
    return np.clip(mono, -1.0, 1.0)


def check_format(sample_rate: int, sample_size: int, channels: int) -> None:
    if sample_rate not in SAMPLE_RATES:
        raise ExportFormatError(f"Unsupported sample rate: {sample_rate}")
    if sample_size not in SAMPLE_SIZES:
        raise ExportFormatError(f"Unsupported sample size: {sample_size}")
    if channels not in CHANNEL_COUNTS:
        raise ExportFormatError(f"Unsupported channel count: {channels}")


def _resample_and_spread(audio: AudioNumbers, sample_rate: int, channels: int) -> FloatArray:
    mono = ensure_audio_contract(audio)
    if sample_rate != SAMPLE_RATE and mono.size:
        divisor = math.gcd(sample_rate, SAMPLE_RATE)
        resampled = resample_poly(mono, sample_rate // divisor, SAMPLE_RATE // divisor)
        mono = ensure_audio_contract(resampled)
    return np.repeat(mono[:, np.newaxis], channels, axis=1)


def format_wave(
    audio: AudioNumbers,
    *,
    sample_rate: int = SAMPLE_RATE,
    sample_size: int = 16,
    channels: int = 1,
) -> NDArray[Any]:
    """Convert an engine buffer to ``(frames, channels)`` samples of the given format.

    8-bit output is unsigned, 16-bit is signed, 32-bit is float.
    """

    check_format(sample_rate, sample_size, channels)
    frames = _resample_and_spread(audio, sample_rate, channels)
    dtype = _RAW_DTYPES[sample_size]
    if sample_size == 8:
        return np.round((frames + 1.0) * 127.5).clip(0, 255).astype(dtype)
    if sample_size == 16:
        return np.round(frames * 32767.0).clip(-32768, 32767).astype(dtype)
    return frames.astype(dtype)


def export_wav(
    path: str | Path,
    audio: AudioNumbers,
    *,
    sample_rate: int = SAMPLE_RATE,
    sample_size: int = 16,
    channels: int = 1,
) -> Path:
    check_format(sample_rate, sample_size, channels)
    target = Path(path)
    frames = _resample_and_spread(audio, sample_rate, channels)
    sf.write(target, frames, sample_rate, subtype=_WAV_SUBTYPES[sample_size])
    _LOGGER.debug("Wrote %d frames to %s", len(frames), target)
    return target


def export_raw(
    path: str | Path,
    audio: AudioNumbers,
    *,
    sample_rate: int = SAMPLE_RATE,
    sample_size: int = 16,
    channels: int = 1,
) -> Path:
    """Write interleaved little-endian samples with no header."""

    target = Path(path)
    data = format_wave(audio, sample_rate=sample_rate, sample_size=sample_size, channels=channels)
    target.write_bytes(data.tobytes())
    return target


def _code_identifier(path: Path) -> str:
    name = re.sub(r"[^0-9A-Za-z]", "_", path.stem).upper()
    if not name or name[0].isdigit():
        name = f"WAVE_{name}"
    return name


def export_code(
    path: str | Path,
    audio: AudioNumbers,
    *,
    sample_rate: int = SAMPLE_RATE,
    sample_size: int = 16,
    channels: int = 1,
) -> Path:
    """Write the samples as a C header with a byte array and format defines."""

    target = Path(path)
    data = format_wave(audio, sample_rate=sample_rate, sample_size=sample_size, channels=channels)
    raw = data.tobytes()
    name = _code_identifier(target)

    lines = [
        "//////////////////////////////////////////////////////////////////////////////////",
        "// Wave data exported by retrosfx",
        "//////////////////////////////////////////////////////////////////////////////////",
        "",
        f"#define {name}_FRAME_COUNT    {data.shape[0]}",
        f"#define {name}_SAMPLE_RATE    {sample_rate}",
        f"#define {name}_SAMPLE_SIZE    {sample_size}",
        f"#define {name}_CHANNELS       {channels}",
        "",
        f"static unsigned char {name}_DATA[{len(raw)}] = {{",
    ]
    for start in range(0, len(raw), _CODE_BYTES_PER_LINE):
        chunk = raw[start : start + _CODE_BYTES_PER_LINE]
        lines.append("    " + ", ".join(f"0x{byte:02x}" for byte in chunk) + ",")
    lines.append("};")
    target.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return target


_EXPORTERS = {
    ".wav": export_wav,
    ".raw": export_raw,
    ".h": export_code,
}

EXPORT_EXTENSIONS: tuple[str, ...] = tuple(_EXPORTERS)


def export_audio(
    path: str | Path,
    audio: AudioNumbers,
    *,
    sample_rate: int = SAMPLE_RATE,
    sample_size: int = 16,
    channels: int = 1,
) -> Path:
    """Export by file extension (.wav, .raw or .h)."""

    target = Path(path)
    exporter = _EXPORTERS.get(target.suffix.lower())
    if exporter is None:
        raise ExportFormatError(
            f"Unsupported output extension: {target.suffix!r}. Valid: {', '.join(EXPORT_EXTENSIONS)}"
        )
    return exporter(
        target, audio, sample_rate=sample_rate, sample_size=sample_size, channels=channels
    )
