"""
Pydantic models that mirror the YAML configuration consumed by *rawdicomatic*.

Only settings that legitimately vary between sites live here.  Protocol
constants (record widths, fixed norm lengths, tag addresses) are part of the
raw-data format and stay in code.
"""

from __future__ import annotations

import codecs

from pydantic import BaseModel, Field, field_validator


class SidecarSettings(BaseModel):
    """Where external payload files are looked up.

    Attributes:
        extension: Extension that replaces the container's own extension when
            looking for a sidecar file (``scan.dcm`` → ``scan.bf``).
    """

    extension: str = Field(".bf", description="Sidecar file extension")

    @field_validator("extension")
    @classmethod
    def _leading_dot(cls, v: str) -> str:
        """Reject extensions that ``Path.with_suffix`` would not accept."""
        if not v.startswith(".") or len(v) < 2 or "/" in v:
            raise ValueError("sidecar extension must look like '.bf'")
        return v


class HeaderSettings(BaseModel):
    """Interfile header handling.

    Attributes:
        encoding: Codec used to read and write extracted headers.  The default
            ``latin-1`` maps every byte to one character and back.
        update: Rewrite the data-file reference after extraction.
    """

    encoding: str = "latin-1"
    update: bool = True

    @field_validator("encoding")
    @classmethod
    def _known_codec(cls, v: str) -> str:
        """Fail at load time instead of half-way through an extraction."""
        try:
            codecs.lookup(v)
        except LookupError as exc:
            raise ValueError(f"unknown header encoding {v!r}") from exc
        return v


class PtdSettings(BaseModel):
    """Settings for validating ``.ptd`` files (listmode + trailing DICOM).

    Attributes:
        search_window: Number of trailing bytes scanned for the DICOM magic.
    """

    search_window: int = Field(1024 * 1024, gt=132)


class ConfigSchema(BaseModel):
    """Root configuration object consumed by the rest of *rawdicomatic*.

    Attributes:
        version: Version string of the configuration schema.
        sidecar: Sidecar lookup rules.
        header: Interfile header handling.
        ptd: PTD validation settings.
    """

    version: str
    sidecar: SidecarSettings = Field(default_factory=SidecarSettings)
    header: HeaderSettings = Field(default_factory=HeaderSettings)
    ptd: PtdSettings = Field(default_factory=PtdSettings)
