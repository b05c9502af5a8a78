from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


@dataclass(slots=True, frozen=True)
class RemoteArtifact:
    id: str
    name: str
    expired: bool
    archive_download_url: str
    size_in_bytes: int | None = None
    created_at: str | None = None

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> "RemoteArtifact":
        size = payload.get("size_in_bytes")
        return cls(
            id=str(payload["id"]),
            name=str(payload.get("name") or ""),
            expired=bool(payload.get("expired", False)),
            archive_download_url=str(payload.get("archive_download_url") or ""),
            size_in_bytes=int(size) if size is not None else None,
            created_at=payload.get("created_at"),
        )


@dataclass(slots=True)
class SyncConfig:
    owner: str
    repo: str
    artifact_name: str
    extract_dir: Path
    zip_dir: Path | None = None
    state_file: Path | None = None
    api_url: str = "https://api.github.com"
    timeout_sec: int = 120
    user_agent: str = "artifact-sync/0.1.0"
    per_page: int = 100
    progress: bool = True


@dataclass(slots=True)
class SyncResult:
    listed: list[str] = field(default_factory=list)
    downloaded: list[str] = field(default_factory=list)
    skipped: dict[str, str] = field(default_factory=dict)
    processed: set[str] = field(default_factory=set)
