"""File-system and DICOM access used by the pipelines."""

from .container import RawContainer  # noqa: F401

__all__: list[str] = ["RawContainer"]
