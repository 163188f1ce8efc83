"""Binary .rfx parameter files.

Layout (little-endian)::

    offset  size  field
    0       4     signature "rFX "
    4       2     version (200)
    6       2     payload length (96)
    8       96    parameter record, fields in ``PARAM_ORDER``
"""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
from pydantic import ValidationError

from .errors import MalformedFileError
from .params import FLOAT_FIELDS, PARAM_ORDER, SoundParams

_LOGGER = logging.getLogger("retrosfx.codec")

SIGNATURE = b"rFX "
VERSION = 200
FILE_EXTENSION = ".rfx"

HEADER_DTYPE = np.dtype([("signature", "S4"), ("version", "<u2"), ("length", "<u2")])
RECORD_DTYPE = np.dtype(
    [("rand_seed", "<i4"), ("wave_type", "<i4")] + [(name, "<f4") for name in FLOAT_FIELDS]
)
HEADER_SIZE = HEADER_DTYPE.itemsize
RECORD_SIZE = RECORD_DTYPE.itemsize


def encode_params(params: SoundParams) -> bytes:
    header = np.array([(SIGNATURE, VERSION, RECORD_SIZE)], dtype=HEADER_DTYPE)
    record = np.array([params.as_tuple()], dtype=RECORD_DTYPE)
    return header.tobytes() + record.tobytes()


def _parse(data: bytes) -> SoundParams:
    if len(data) < HEADER_SIZE:
        raise MalformedFileError(f"File too short for header ({len(data)} bytes)")
    header = np.frombuffer(data, dtype=HEADER_DTYPE, count=1)[0]
    if data[:4] != SIGNATURE:
        raise MalformedFileError(f"Bad signature: {data[:4]!r}")
    version = int(header["version"])
    if version != VERSION:
        raise MalformedFileError(f"Unsupported version: {version}")
    length = int(header["length"])
    if length != RECORD_SIZE:
        raise MalformedFileError(f"Wrong parameter record size: {length}")
    payload = data[HEADER_SIZE:]
    if len(payload) < RECORD_SIZE:
        raise MalformedFileError(f"Truncated payload ({len(payload)} of {RECORD_SIZE} bytes)")

    record = np.frombuffer(payload, dtype=RECORD_DTYPE, count=1)[0]
    values = {name: record[name].item() for name in PARAM_ORDER}
    try:
        return SoundParams.model_validate(values)
    except ValidationError as exc:
        raise MalformedFileError(f"Invalid parameter values: {exc}") from exc


def decode_params(data: bytes, *, strict: bool = False) -> SoundParams:
    """Decode an .rfx payload.

    Malformed input yields the default ``SoundParams()`` and a logged warning,
    or ``MalformedFileError`` when ``strict`` is set.
    """

    try:
        return _parse(data)
    except MalformedFileError as exc:
        if strict:
            raise
        _LOGGER.warning("Ignoring malformed rFX data: %s", exc)
        return SoundParams()


def save_params(params: SoundParams, path: str | Path) -> Path:
    target = Path(path)
    target.write_bytes(encode_params(params))
    _LOGGER.debug("Saved parameters to %s", target)
    return target


def load_params(path: str | Path) -> SoundParams:
    source = Path(path)
    params = decode_params(source.read_bytes())
    _LOGGER.debug("Loaded parameters from %s", source)
    return params
