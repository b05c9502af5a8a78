from __future__ import annotations

import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from .errors import FileSystemError
from .models import SyncConfig
from .utils import ensure_dir

ZIP_SUFFIX = ".zip"
TEMP_ZIP_PREFIX = "artifacts"


def artifact_zip_name(artifact_name: str, artifact_id: str) -> str:
    return f"{artifact_name}{artifact_id}{ZIP_SUFFIX}"


def artifact_zip_path(zip_dir: Path, artifact_name: str, artifact_id: str) -> Path:
    return zip_dir / artifact_zip_name(artifact_name, artifact_id)


def ensure_sync_layout(config: SyncConfig) -> None:
    targets = [config.extract_dir]
    if config.zip_dir is not None:
        targets.append(config.zip_dir)
    if config.state_file is not None:
        targets.append(config.state_file.parent)
    for path in targets:
        try:
            ensure_dir(path)
        except OSError as exc:
            raise FileSystemError(f"Cannot create directory {path}: {exc}") from exc


@contextmanager
def zip_workspace(zip_dir: Path | None) -> Iterator[Path]:
    # Without a configured zip dir, archives live in a temp dir removed on exit.
    if zip_dir is not None:
        yield zip_dir
        return
    try:
        tmp = tempfile.TemporaryDirectory(prefix=TEMP_ZIP_PREFIX)
    except OSError as exc:
        raise FileSystemError(f"Cannot create temporary download directory: {exc}") from exc
    with tmp as name:
        yield Path(name)


def find_zip_files(zip_dir: Path | None, artifact_name: str) -> list[Path]:
    if zip_dir is None or not zip_dir.exists():
        return []
    found = []
    for path in zip_dir.iterdir():
        name = path.name
        if not (name.startswith(artifact_name) and name.endswith(ZIP_SUFFIX)):
            continue
        # Only <artifactName><numeric id>.zip belongs to this artifact.
        if name[len(artifact_name) : -len(ZIP_SUFFIX)].isdigit():
            found.append(path)
    return sorted(found)
