from __future__ import annotations

import io
import zipfile
from pathlib import Path
from typing import Any

import pytest
import requests

from artifact_sync.models import SyncConfig

API_URL = "https://api.github.com"


def zip_bytes(members: dict[str, bytes]) -> bytes:
    data = io.BytesIO()
    with zipfile.ZipFile(data, "w", zipfile.ZIP_DEFLATED) as archive:
        for name, payload in members.items():
            archive.writestr(name, payload)
    return data.getvalue()


def artifact_row(artifact_id: int, name: str = "APK", expired: bool = False) -> dict[str, Any]:
    return {
        "id": artifact_id,
        "name": name,
        "expired": expired,
        "size_in_bytes": 10,
        "created_at": "2024-01-01T00:00:00Z",
        "archive_download_url": f"{API_URL}/repos/o/r/actions/artifacts/{artifact_id}/zip",
    }


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, body: bytes = b"", url: str = "") -> None:
        self.status_code = status_code
        self.payload = payload
        self.body = body
        self.url = url
        self.closed = False

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error for url: {self.url}")

    def json(self) -> Any:
        if self.payload is None:
            raise ValueError("response is not JSON")
        return self.payload

    def iter_content(self, chunk_size: int = 1):
        for i in range(0, len(self.body), chunk_size):
            yield self.body[i : i + chunk_size]

    def close(self) -> None:
        self.closed = True

    def __enter__(self) -> "FakeResponse":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()


class FakeGitHub:
    """Stands in for requests.Session against the artifacts endpoints."""

    def __init__(self, rows: list[dict[str, Any]] | None = None, archives: dict[str, bytes] | None = None) -> None:
        self.rows = list(rows or [])
        self.archives = dict(archives or {})
        self.list_status = 200
        self.calls: list[tuple[str, dict[str, Any] | None]] = []
        self.responses: list[FakeResponse] = []

    def downloads(self) -> list[str]:
        return [url for url, _ in self.calls if url.endswith("/zip")]

    def get(self, url: str, params: dict[str, Any] | None = None, timeout: Any = None, stream: bool = False):
        self.calls.append((url, params))
        response = self._respond(url, params)
        self.responses.append(response)
        return response

    def _respond(self, url: str, params: dict[str, Any] | None) -> FakeResponse:
        if url.endswith("/actions/artifacts"):
            if self.list_status != 200:
                return FakeResponse(status_code=self.list_status, url=url)
            per_page = int((params or {}).get("per_page", 30))
            page = int((params or {}).get("page", 1))
            start = (page - 1) * per_page
            return FakeResponse(
                payload={"total_count": len(self.rows), "artifacts": self.rows[start : start + per_page]},
                url=url,
            )
        artifact_id = url.rstrip("/").split("/")[-2]
        if artifact_id in self.archives:
            return FakeResponse(body=self.archives[artifact_id], url=url)
        return FakeResponse(status_code=404, url=url)


@pytest.fixture
def make_config(tmp_path: Path):
    def _make(**overrides: Any) -> SyncConfig:
        values: dict[str, Any] = {
            "owner": "o",
            "repo": "r",
            "artifact_name": "APK",
            "extract_dir": tmp_path / "repo",
            "zip_dir": None,
            "state_file": tmp_path / "processed_artifacts.json",
            "api_url": API_URL,
            "progress": False,
        }
        values.update(overrides)
        return SyncConfig(**values)

    return _make
