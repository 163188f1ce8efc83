from __future__ import annotations


class RetroSfxError(Exception):
    """Base error for the retrosfx library."""


class MalformedFileError(RetroSfxError):
    """Raised when an .rfx payload has a bad signature, version or length."""


class UnknownPresetError(RetroSfxError):
    """Raised when a preset name is not registered."""


class ExportFormatError(RetroSfxError):
    """Raised when an export format or file extension is not supported."""
