from __future__ import annotations

import logging
import os
from pathlib import Path

import requests

from .errors import DownloadHTTPError, FetchError, FileCreateError
from .models import RemoteArtifact

LOGGER = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024


def download_artifact(
    session: requests.Session,
    artifact: RemoteArtifact,
    local_path: Path,
    *,
    timeout_sec: int,
) -> int:
    """Stream the artifact archive to ``local_path`` and return its size.

    The body lands in a ``.part`` sibling that is renamed into place only once
    the transfer completes, so ``local_path`` never holds a truncated archive.
    """
    if not artifact.archive_download_url:
        raise DownloadHTTPError(f"Artifact {artifact.id} has no download URL")

    temp_path = local_path.with_suffix(local_path.suffix + ".part")
    try:
        handle = temp_path.open("wb")
    except OSError as exc:
        raise FileCreateError(f"Cannot create {temp_path}: {exc}") from exc

    done = False
    try:
        try:
            with handle:
                with session.get(
                    artifact.archive_download_url,
                    stream=True,
                    timeout=timeout_sec,
                ) as resp:
                    resp.raise_for_status()
                    for chunk in resp.iter_content(chunk_size=CHUNK_SIZE):
                        if chunk:
                            handle.write(chunk)
        except requests.RequestException as exc:
            raise DownloadHTTPError(f"Downloading artifact {artifact.id} failed: {exc}") from exc
        except OSError as exc:
            # Also covers the flush on close of the output file.
            raise FetchError(f"Writing artifact {artifact.id} to {temp_path} failed: {exc}") from exc
        try:
            os.replace(temp_path, local_path)
        except OSError as exc:
            raise FileCreateError(f"Cannot move {temp_path} to {local_path}: {exc}") from exc
        done = True
    finally:
        if not done and temp_path.exists():
            temp_path.unlink()

    size = local_path.stat().st_size
    LOGGER.info("Downloaded artifact %s (%s bytes) to %s", artifact.id, size, local_path)
    return size
