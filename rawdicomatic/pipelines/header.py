"""Locate, extract and patch the Interfile header embedded in a container.

Interfile headers are line-oriented ``key:=value`` records.  Vendor headers
mix line-ending conventions inside a single file, so a record always ends at
the *first* ``\\n`` or ``\\r`` after its key, whichever comes first.

Typical use::

    header = InterfileHeader.locate(container)
    header.write(dst)                          # verbatim copy
    update_header_file(dst, payload, profile)  # point it at the new payload
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from rawdicomatic.io import files, tags
from rawdicomatic.io.container import RawContainer
from rawdicomatic.models import HeaderValue, TextValue
from rawdicomatic.pipelines.profiles import KindProfile
from rawdicomatic.utils.errors import MissingFieldError, RawIOError

log = logging.getLogger(__name__)

# SMS-MI VB20 (software 3.2) stores a CSA header in (0029,1010); the Interfile
# text then lives in (0029,1110).
ALT_HEADER_MARKER = "SV10"

DATA_FILE_KEY = "name of data file"
DATA_SET_KEY = "%data set [1]"

_DIGITS = re.compile(r"[0-9]+")
_LINE_BREAK = re.compile(r"\r\n|\r|\n")
_REPEATED_CR = re.compile(r"\r{2,}")


def normalize_line_endings(text: str) -> str:
    """Return *text* with doubled CRs collapsed and every line ending in CR+LF.

    The result always ends with CR+LF (unless *text* is empty) and the
    function is idempotent.
    """
    lines = _LINE_BREAK.split(_REPEATED_CR.sub("\r", text))
    if lines and lines[-1] == "":
        lines.pop()
    return "".join(line + "\r\n" for line in lines)


class InterfileHeader:
    """An Interfile header held as a single text blob.

    Args:
        text: Header text.
        source: Where the text came from, used in messages.
    """

    def __init__(self, text: str, source: str = "Interfile header"):
        self.text = text
        self.source = source

    # ------------------------------------------------------------------ #
    # Construction
    # ------------------------------------------------------------------ #
    @classmethod
    def locate(cls, container: RawContainer) -> "InterfileHeader":
        """Read the header text from *container*.

        Raises:
            MissingFieldError: When neither header element has content.
        """
        where = str(container.path)
        primary = container.get(tags.SIEMENS_HEADER)
        if primary is None:
            log.error("Unable to read header %s", tags.describe(tags.SIEMENS_HEADER))
            raise MissingFieldError(tags.describe(tags.SIEMENS_HEADER), where)

        if ALT_HEADER_MARKER in primary:
            log.info("%s marker found, reading header from %s",
                     ALT_HEADER_MARKER, tags.describe(tags.SIEMENS_HEADER_ALT))
            text = container.get(tags.SIEMENS_HEADER_ALT)
            if text is None:
                log.error("Unable to read header (%s)", ALT_HEADER_MARKER)
                raise MissingFieldError(tags.describe(tags.SIEMENS_HEADER_ALT), where)
        else:
            text = primary

        return cls(text, source=where)

    @classmethod
    def read(cls, path: Path, encoding: str = "latin-1") -> "InterfileHeader":
        """Load a header previously written to *path*.

        Raises:
            RawIOError: When *path* cannot be read.
        """
        try:
            data = path.read_bytes()
        except OSError as exc:
            raise RawIOError(f"Cannot read header {path}: {exc.strerror or exc}", path) from exc
        log.debug("Read %s", path)
        return cls(data.decode(encoding), source=str(path))

    # ------------------------------------------------------------------ #
    # Lookup
    # ------------------------------------------------------------------ #
    def find(self, key: str) -> tuple[int, int]:
        """Return the ``[start, end)`` span from *key* to the end of its line.

        Raises:
            MissingFieldError: When *key* does not occur.
        """
        start = self.text.find(key)
        if start < 0:
            raise MissingFieldError(key, self.source)
        ends = [i for i in (self.text.find("\n", start), self.text.find("\r", start)) if i >= 0]
        return start, min(ends) if ends else len(self.text)

    def line(self, key: str) -> str:
        """Return the record text from *key* up to its line ending."""
        start, end = self.find(key)
        return self.text[start:end]

    def value_of(self, key: str) -> str:
        """Return the text after ``:=`` on the record holding *key*.

        Raises:
            MissingFieldError: When *key* is absent or has no ``:=``.
        """
        _, sep, value = self.line(key).partition(":=")
        if not sep:
            raise MissingFieldError(f"{key}:=", self.source)
        return value.strip()

    def declared_count(self, label: str) -> int:
        """Return the first run of digits on the line holding *label*.

        Raises:
            MissingFieldError: When *label* is absent or its line has no digits.
        """
        match = _DIGITS.search(self.line(label))
        if match is None:
            log.info("No count found on the %r line", label)
            raise MissingFieldError(f"{label} (count)", self.source)
        return int(match.group())

    # ------------------------------------------------------------------ #
    # Mutation
    # ------------------------------------------------------------------ #
    def replace(self, key: str, value: HeaderValue) -> None:
        """Replace the record holding *key* with ``key:=value``.

        Raises:
            MissingFieldError: When *key* is absent.
        """
        start, end = self.find(key)
        new_line = f"{key}:={value.render()}"
        self.text = self.text[:start] + new_line + self.text[end:]
        log.debug("Header record rewritten: %s", new_line)

    def normalize(self) -> None:
        """Normalise line endings in place (see :func:`normalize_line_endings`)."""
        self.text = normalize_line_endings(self.text)

    def retargeted(self, data_file: Path, profile: KindProfile) -> "InterfileHeader":
        """Return a copy that references *data_file*; ``self`` is left untouched.

        Rewrites ``name of data file`` and, for kinds that carry one, the
        ``%data set [1]`` record.  Only the file name of *data_file* is used so
        the header stays valid when header and payload are moved together.

        Raises:
            MissingFieldError: When a record to rewrite is absent.
        """
        name = data_file.name
        header = InterfileHeader(self.text, source=self.source)
        header.replace(DATA_FILE_KEY, TextValue(value=name))
        if profile.data_set_record:
            header.replace(DATA_SET_KEY, TextValue(value=f"{{0,,{name}}}"))
        if profile.normalize_line_endings:
            header.normalize()
        return header

    # ------------------------------------------------------------------ #
    # Output
    # ------------------------------------------------------------------ #
    def encode(self, encoding: str = "latin-1") -> bytes:
        return self.text.encode(encoding)

    def write(self, dst: Path, encoding: str = "latin-1") -> None:
        """Write the header to a new file *dst*.

        Raises:
            AlreadyExistsError: When *dst* exists.
            RawIOError: When the write fails.
        """
        files.write_new(dst, self.encode(encoding))
        log.info("Successfully extracted raw header to %s", dst)

    def overwrite(self, path: Path, encoding: str = "latin-1") -> None:
        """Replace the contents of the existing header file *path*."""
        files.replace_existing(path, self.encode(encoding))

    def __str__(self) -> str:
        return self.text


def update_header_file(
    header_path: Path,
    data_file: Path,
    profile: KindProfile,
    *,
    encoding: str = "latin-1",
) -> InterfileHeader:
    """Point an already written header file at *data_file*.

    See :meth:`InterfileHeader.retargeted` for the records that change.

    Args:
        header_path: Header written by :meth:`InterfileHeader.write`.
        data_file: Extracted payload.
        profile: Capabilities of the container's kind.
        encoding: Header codec.

    Returns:
        The rewritten header.

    Raises:
        MissingFieldError: When a record to rewrite is absent.
        RawIOError: When the header cannot be read or written.
    """
    header = InterfileHeader.read(header_path, encoding).retargeted(data_file, profile)
    header.overwrite(header_path, encoding)
    log.info("Header %s now references %s", header_path, data_file.name)
    return header


__all__ = [
    "InterfileHeader",
    "normalize_line_endings",
    "update_header_file",
    "ALT_HEADER_MARKER",
    "DATA_FILE_KEY",
    "DATA_SET_KEY",
]
