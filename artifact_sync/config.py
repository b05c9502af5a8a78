from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Mapping

import yaml

from .errors import CredentialMissingError
from .models import SyncConfig

DEFAULT_CONFIG: dict[str, Any] = {
    "github": {
        "api_url": "https://api.github.com",
        "owner": "GitJournal",
        "repo": "GitJournal",
        "token_env": "GITHUB_TOKEN",
        "timeout_sec": 120,
        "per_page": 100,
        "user_agent": "artifact-sync/0.1.0",
    },
    "artifact": {
        "name": "APK",
    },
    "paths": {
        "extract_dir": "./repo",
        # null keeps downloaded zips in a temp dir that is removed after the run.
        "zip_dir": None,
        # null disables the processed-artifacts record; zip presence is the only signal.
        "state_file": "processed_artifacts.json",
    },
    "runtime": {
        "log_level": "INFO",
        "progress": True,
    },
}


def _deep_update(base: dict[str, Any], updates: dict[str, Any]) -> dict[str, Any]:
    for key, value in updates.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _deep_update(base[key], value)
        else:
            base[key] = value
    return base


def load_config(config_path: str | Path | None) -> dict[str, Any]:
    cfg = json.loads(json.dumps(DEFAULT_CONFIG))
    if not config_path:
        return cfg
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with path.open("r", encoding="utf-8") as handle:
        payload = yaml.safe_load(handle) or {}
    if not isinstance(payload, dict):
        raise ValueError("Config root must be a mapping")
    _deep_update(cfg, payload)
    return cfg


def apply_cli_overrides(cfg: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    def _drop_none(value: Any) -> Any:
        if isinstance(value, dict):
            return {k: _drop_none(v) for k, v in value.items() if v is not None}
        if isinstance(value, list):
            return [_drop_none(v) for v in value if v is not None]
        return value

    cleaned = _drop_none(overrides)
    _deep_update(cfg, cleaned)
    return cfg


def _optional_path(value: Any) -> Path | None:
    if value is None or str(value).strip() == "":
        return None
    return Path(str(value))


def _int_setting(section: dict[str, Any], key: str, default: int) -> int:
    value = section.get(key)
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"github.{key} must be an integer, got {value!r}") from exc


def sync_config_from_dict(cfg: dict[str, Any]) -> SyncConfig:
    github = cfg.get("github") or {}
    paths = cfg.get("paths") or {}
    runtime = cfg.get("runtime") or {}
    artifact_name = str((cfg.get("artifact") or {}).get("name") or "").strip()
    if not artifact_name:
        raise ValueError("artifact.name must be a non-empty string")
    for key in ("owner", "repo"):
        if not str(github.get(key) or "").strip():
            raise ValueError(f"github.{key} must be a non-empty string")
    extract_dir = _optional_path(paths.get("extract_dir"))
    if extract_dir is None:
        raise ValueError("paths.extract_dir is required")

    return SyncConfig(
        owner=str(github["owner"]).strip(),
        repo=str(github["repo"]).strip(),
        artifact_name=artifact_name,
        extract_dir=extract_dir,
        zip_dir=_optional_path(paths.get("zip_dir")),
        state_file=_optional_path(paths.get("state_file")),
        api_url=str(github.get("api_url") or DEFAULT_CONFIG["github"]["api_url"]),
        timeout_sec=_int_setting(github, "timeout_sec", 120),
        user_agent=str(github.get("user_agent") or DEFAULT_CONFIG["github"]["user_agent"]),
        per_page=_int_setting(github, "per_page", 100),
        progress=runtime.get("progress") is not False,
    )


def resolve_token(cli_token: str | None, cfg: dict[str, Any], environ: Mapping[str, str] | None = None) -> str:
    """Pick the access token: the CLI flag first, then the configured env variable."""
    if cli_token and cli_token.strip():
        return cli_token.strip()
    env = os.environ if environ is None else environ
    env_name = str((cfg.get("github") or {}).get("token_env") or "GITHUB_TOKEN")
    value = (env.get(env_name) or "").strip()
    if not value:
        raise CredentialMissingError(f"Missing GitHub access token: pass --token or set {env_name}")
    return value
