"""Platform-neutral file helpers.

Everything that touches the file system on behalf of the pipelines goes
through this module:

* :func:`file_size` and :func:`find_in_tail` work on files larger than 4 GiB
  on every platform (Python integers and ``mmap`` offsets are 64-bit).
* :func:`write_new` and :func:`copy_new` never replace an existing file and
  never leave a truncated destination behind.  Data is written to a
  ``<dst>.part`` sibling first and renamed into place once complete.

The existence check and the final rename are not protected against other
processes modifying the directory concurrently.
"""

from __future__ import annotations

import logging
import mmap
import os
import shutil
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Iterator

from rawdicomatic.utils.errors import AlreadyExistsError, RawIOError

log = logging.getLogger(__name__)

_PART_SUFFIX = ".part"


def file_size(path: Path) -> int:
    """Return the size of *path* in bytes.

    Raises:
        RawIOError: When *path* cannot be opened.
    """
    try:
        with path.open("rb") as fh:
            fh.seek(0, os.SEEK_END)
            return fh.tell()
    except OSError as exc:
        raise RawIOError(f"Cannot open {path}: {exc.strerror or exc}", path) from exc


def find_in_tail(path: Path, needle: bytes, window: int) -> int:
    """Return the offset of the first *needle* within the trailing *window* bytes.

    Args:
        path: File to scan.
        needle: Byte pattern to search for.
        window: Number of trailing bytes to consider.

    Returns:
        Absolute offset of the match, or ``-1`` when not found.

    Raises:
        RawIOError: When *path* cannot be read.
    """
    try:
        with path.open("rb") as fh:
            size = os.fstat(fh.fileno()).st_size
            if size < len(needle):
                return -1
            with mmap.mmap(fh.fileno(), 0, access=mmap.ACCESS_READ) as mm:
                return mm.find(needle, max(0, size - window))
    except (OSError, ValueError) as exc:
        raise RawIOError(f"Cannot read {path}: {exc}", path) from exc


def read_from(path: Path, offset: int) -> bytes:
    """Return the bytes of *path* from *offset* to the end.

    Raises:
        RawIOError: When *path* cannot be read.
    """
    try:
        with path.open("rb") as fh:
            fh.seek(offset, os.SEEK_SET)
            return fh.read()
    except OSError as exc:
        raise RawIOError(f"Cannot read {path}: {exc.strerror or exc}", path) from exc


def ensure_absent(dst: Path) -> None:
    """Raise :class:`AlreadyExistsError` when *dst* is already present."""
    if dst.exists():
        log.error("%s already exists – refusing to over-write", dst)
        raise AlreadyExistsError(dst)


@contextmanager
def _staged(dst: Path) -> Iterator[BinaryIO]:
    """Yield a handle on ``<dst>.part`` and move it onto *dst* on success."""
    ensure_absent(dst)
    part = dst.with_name(dst.name + _PART_SUFFIX)
    try:
        fh = part.open("xb")
    except OSError as exc:
        raise RawIOError(f"Unable to write {dst}: {exc.strerror or exc}", dst) from exc
    try:
        with fh:
            yield fh
        ensure_absent(dst)
        os.replace(part, dst)
    except OSError as exc:
        part.unlink(missing_ok=True)
        raise RawIOError(f"Unable to write {dst}: {exc.strerror or exc}", dst) from exc
    except BaseException:
        part.unlink(missing_ok=True)
        raise


def write_new(dst: Path, data: bytes) -> int:
    """Write *data* to a new file *dst*.

    Returns:
        Number of bytes written.

    Raises:
        AlreadyExistsError: When *dst* exists.
        RawIOError: When the write fails.
    """
    with _staged(dst) as fh:
        fh.write(data)
    log.debug("Wrote %d bytes to %s", len(data), dst)
    return len(data)


def copy_new(src: Path, dst: Path) -> int:
    """Copy *src* to a new file *dst*.

    Returns:
        Number of bytes copied.

    Raises:
        AlreadyExistsError: When *dst* exists.
        RawIOError: When *src* cannot be read or *dst* cannot be written.
    """
    try:
        fsrc = src.open("rb")
    except OSError as exc:
        raise RawIOError(f"Cannot open {src}: {exc.strerror or exc}", src) from exc
    with fsrc, _staged(dst) as fdst:
        shutil.copyfileobj(fsrc, fdst, length=16 * 1024 * 1024)
        copied = fdst.tell()
    log.debug("Copied %d bytes from %s to %s", copied, src, dst)
    return copied


def replace_existing(dst: Path, data: bytes) -> None:
    """Atomically replace the contents of the existing file *dst*.

    Raises:
        RawIOError: When *dst* is missing or cannot be written.
    """
    if not dst.is_file():
        raise RawIOError(f"{dst} does not exist", dst)
    part = dst.with_name(dst.name + _PART_SUFFIX)
    try:
        part.write_bytes(data)
        os.replace(part, dst)
    except OSError as exc:
        part.unlink(missing_ok=True)
        raise RawIOError(f"Unable to update {dst}: {exc.strerror or exc}", dst) from exc


__all__ = [
    "file_size",
    "find_in_tail",
    "read_from",
    "ensure_absent",
    "write_new",
    "copy_new",
    "replace_existing",
]
