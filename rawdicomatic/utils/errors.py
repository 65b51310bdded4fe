"""Exceptions raised while classifying, validating and extracting raw data.

Every failure the pipelines report derives from :class:`RawDataError` so the
CLI can translate the whole family into a single non-zero exit path.
"""

from __future__ import annotations

from pathlib import Path


class RawDataError(RuntimeError):
    """Base class for all unrecoverable raw-data problems."""


class RawIOError(RawDataError):
    """A file cannot be opened, read or written."""

    def __init__(self, message: str, path: Path | None = None):
        super().__init__(message)
        self.path = path


class DecodeError(RawDataError):
    """The container opens but required tag content cannot be decoded."""


class UnsupportedKindError(RawDataError):
    """Classification succeeded but no extractor handles the result."""


class MissingFieldError(RawDataError):
    """An expected header record or DICOM tag is absent."""

    def __init__(self, field: str, where: str = "Interfile header"):
        super().__init__(f"'{field}' not found in {where}")
        self.field = field


class SizeMismatchError(RawDataError):
    """Declared and actual payload lengths disagree with nothing to resolve it."""

    def __init__(self, message: str, expected: int, actual: int | None):
        super().__init__(message)
        self.expected = expected
        self.actual = actual


class AlreadyExistsError(RawDataError):
    """Refusal to overwrite an existing output file."""

    def __init__(self, path: Path):
        super().__init__(f"{path} already exists – refusing to over-write")
        self.path = path


__all__ = [
    "RawDataError",
    "RawIOError",
    "DecodeError",
    "UnsupportedKindError",
    "MissingFieldError",
    "SizeMismatchError",
    "AlreadyExistsError",
]
