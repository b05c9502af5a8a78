from __future__ import annotations

import logging
import os
import shutil
import zipfile
import zlib
from pathlib import Path

from .errors import ArchiveOpenError, ExtractionError, PathTraversalError

LOGGER = logging.getLogger(__name__)

DEFAULT_DIR_MODE = 0o755
DEFAULT_FILE_MODE = 0o644
COPY_CHUNK_SIZE = 1024 * 1024


def _boundary(dest_dir: Path | str) -> str:
    return os.path.abspath(os.path.normpath(str(dest_dir))) + os.sep


def _member_mode(info: zipfile.ZipInfo) -> int:
    mode = (info.external_attr >> 16) & 0o777
    if mode:
        return mode
    return DEFAULT_DIR_MODE if info.is_dir() else DEFAULT_FILE_MODE


def _resolve_member(boundary: str, member_name: str) -> str:
    candidate = os.path.normpath(os.path.join(boundary, member_name))
    # The destination root itself ("./" entries) normalizes without the trailing separator.
    if candidate + os.sep == boundary:
        return candidate
    if not candidate.startswith(boundary):
        raise PathTraversalError(member_name, candidate)
    return candidate


def _extract_member(archive: zipfile.ZipFile, info: zipfile.ZipInfo, dest: str) -> None:
    mode = _member_mode(info)
    if info.is_dir():
        os.makedirs(dest, mode=mode, exist_ok=True)
        return

    os.makedirs(os.path.dirname(dest), exist_ok=True)
    with archive.open(info, "r") as source:
        fd = os.open(dest, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, mode)
        with os.fdopen(fd, "wb") as out:
            shutil.copyfileobj(source, out, COPY_CHUNK_SIZE)


def extract_zip(archive_path: Path | str, dest_dir: Path | str) -> list[Path]:
    """Extract every entry of ``archive_path`` below ``dest_dir``.

    Entries whose joined path escapes ``dest_dir`` abort the extraction with
    :class:`PathTraversalError` before anything is written for them. Entries
    that precede the offending one stay on disk. Any other failure aborts with
    :class:`ExtractionError`; there is no skip-and-continue.
    """
    boundary = _boundary(dest_dir)

    try:
        archive = zipfile.ZipFile(archive_path, "r")
    except (OSError, zipfile.BadZipFile) as exc:
        raise ArchiveOpenError(f"Cannot open archive {archive_path}: {exc}") from exc

    extracted: list[Path] = []
    with archive:
        try:
            os.makedirs(boundary, mode=DEFAULT_DIR_MODE, exist_ok=True)
        except OSError as exc:
            raise ExtractionError(f"Cannot create {boundary}: {exc}") from exc

        for info in archive.infolist():
            dest = _resolve_member(boundary, info.filename)
            try:
                _extract_member(archive, info, dest)
            except (OSError, zipfile.BadZipFile, zlib.error, EOFError) as exc:
                raise ExtractionError(f"Failed to extract {info.filename} from {archive_path}: {exc}") from exc
            extracted.append(Path(dest))

    LOGGER.info("Extracted %s entries from %s into %s", len(extracted), archive_path, boundary)
    return extracted
