from __future__ import annotations

import logging

import requests

from .errors import ListingError
from .models import RemoteArtifact

LOGGER = logging.getLogger(__name__)

GITHUB_API_VERSION = "2022-11-28"


def build_session(token: str, user_agent: str) -> requests.Session:
    session = requests.Session()
    session.headers.update(
        {
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": GITHUB_API_VERSION,
            "User-Agent": user_agent,
        }
    )
    return session


def artifacts_url(api_url: str, owner: str, repo: str) -> str:
    return f"{api_url.rstrip('/')}/repos/{owner}/{repo}/actions/artifacts"


def list_artifacts(
    session: requests.Session,
    *,
    api_url: str,
    owner: str,
    repo: str,
    timeout_sec: int,
    per_page: int = 100,
) -> list[RemoteArtifact]:
    """Return every artifact of ``owner/repo``, walking all listing pages."""
    url = artifacts_url(api_url, owner, repo)
    artifacts: list[RemoteArtifact] = []
    page = 1
    while True:
        try:
            response = session.get(
                url,
                params={"per_page": per_page, "page": page},
                timeout=timeout_sec,
            )
            response.raise_for_status()
            payload = response.json()
        except (requests.RequestException, ValueError) as exc:
            raise ListingError(f"Listing artifacts for {owner}/{repo} failed on page {page}: {exc}") from exc

        if not isinstance(payload, dict):
            raise ListingError(f"Unexpected listing payload for {owner}/{repo}: {type(payload).__name__}")
        rows = payload.get("artifacts") or []
        try:
            artifacts.extend(RemoteArtifact.from_api(row) for row in rows)
        except (KeyError, TypeError, ValueError) as exc:
            raise ListingError(f"Malformed artifact entry for {owner}/{repo}: {exc}") from exc

        total = int(payload.get("total_count") or 0)
        if not rows or len(artifacts) >= total:
            break
        page += 1

    LOGGER.info("Listed %s artifacts for %s/%s", len(artifacts), owner, repo)
    return artifacts
