from __future__ import annotations

import logging
from pathlib import Path

import requests
from tqdm import tqdm

from .downloader import download_artifact
from .github_api import build_session, list_artifacts
from .layout import artifact_zip_path, ensure_sync_layout, zip_workspace
from .models import RemoteArtifact, SyncConfig, SyncResult
from .state import ProcessedStore
from .unpack import extract_zip

LOGGER = logging.getLogger(__name__)

SKIP_NAME = "name"
SKIP_EXPIRED = "expired"
SKIP_PROCESSED = "processed"
SKIP_ZIP_PRESENT = "zip_present"


def skip_reason(
    artifact: RemoteArtifact,
    *,
    artifact_name: str,
    processed: set[str],
    zip_path: Path,
) -> str | None:
    if artifact.name != artifact_name:
        return SKIP_NAME
    if artifact.expired:
        return SKIP_EXPIRED
    if artifact.id in processed:
        return SKIP_PROCESSED
    if zip_path.exists():
        return SKIP_ZIP_PRESENT
    return None


def sync_artifacts(
    config: SyncConfig,
    session: requests.Session,
    *,
    store: ProcessedStore | None = None,
) -> SyncResult:
    """Download and extract every new artifact named ``config.artifact_name``.

    Any failure propagates and leaves the processed record untouched. On
    success the ids of every listed artifact are saved, skipped ones
    included, replacing the previous record.
    """
    if store is None and config.state_file is not None:
        store = ProcessedStore(config.state_file)

    ensure_sync_layout(config)
    result = SyncResult()

    artifacts = list_artifacts(
        session,
        api_url=config.api_url,
        owner=config.owner,
        repo=config.repo,
        timeout_sec=config.timeout_sec,
        per_page=config.per_page,
    )
    result.listed = [a.id for a in artifacts]
    processed = store.load() if store is not None else set()

    with zip_workspace(config.zip_dir) as zip_dir:
        to_fetch: list[tuple[RemoteArtifact, Path]] = []
        for artifact in artifacts:
            zip_path = artifact_zip_path(zip_dir, config.artifact_name, artifact.id)
            reason = skip_reason(
                artifact,
                artifact_name=config.artifact_name,
                processed=processed,
                zip_path=zip_path,
            )
            if reason is not None:
                if reason != SKIP_NAME:
                    LOGGER.debug("Skipping artifact %s (%s): %s", artifact.id, artifact.name, reason)
                result.skipped[artifact.id] = reason
                continue
            to_fetch.append((artifact, zip_path))

        for artifact, zip_path in tqdm(
            to_fetch,
            total=len(to_fetch),
            desc=config.artifact_name,
            disable=not config.progress,
        ):
            LOGGER.info("Downloading %s", zip_path)
            download_artifact(session, artifact, zip_path, timeout_sec=config.timeout_sec)
            extract_zip(zip_path, config.extract_dir)
            result.downloaded.append(artifact.id)

    result.processed = set(result.listed)
    if store is not None:
        store.save(result.processed)
    LOGGER.info(
        "Sync finished: listed=%s downloaded=%s skipped=%s",
        len(result.listed),
        len(result.downloaded),
        len(result.skipped),
    )
    return result


def run_sync(config: SyncConfig, token: str) -> SyncResult:
    with build_session(token, config.user_agent) as session:
        return sync_artifacts(config, session)
