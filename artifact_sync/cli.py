from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any

import yaml

from . import __version__
from .config import apply_cli_overrides, load_config, resolve_token, sync_config_from_dict
from .errors import ArtifactSyncError
from .status import build_status_report, format_status_report
from .sync import run_sync
from .utils import setup_logging

LOGGER = logging.getLogger(__name__)


def _path_override(value: Path | None) -> str | None:
    return str(value) if value is not None else None


def _create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="artifact-sync")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="cmd", required=True)

    sync = sub.add_parser("sync", help="Download and extract new CI artifacts")
    sync.add_argument("--config", type=Path)
    sync.add_argument("--token", default=None, help="GitHub access token (defaults to $GITHUB_TOKEN)")
    sync.add_argument("--owner", default=None)
    sync.add_argument("--repo", default=None)
    sync.add_argument("--artifact-name", default=None)
    sync.add_argument("--extract-dir", type=Path)
    sync.add_argument("--zip-dir", type=Path, help="Keep downloaded archives here instead of a temp dir")
    sync.add_argument("--state-file", type=Path)
    sync.add_argument("--no-progress", action="store_true")

    status = sub.add_parser("status", help="Print processed artifacts and local tree summary")
    status.add_argument("--config", type=Path)
    status.add_argument("--owner", default=None)
    status.add_argument("--repo", default=None)
    status.add_argument("--artifact-name", default=None)
    status.add_argument("--extract-dir", type=Path)
    status.add_argument("--zip-dir", type=Path)
    status.add_argument("--state-file", type=Path)

    return parser


def _overrides_from_args(args: argparse.Namespace) -> dict[str, Any]:
    return {
        "github": {
            "owner": getattr(args, "owner", None),
            "repo": getattr(args, "repo", None),
        },
        "artifact": {"name": getattr(args, "artifact_name", None)},
        "paths": {
            "extract_dir": _path_override(getattr(args, "extract_dir", None)),
            "zip_dir": _path_override(getattr(args, "zip_dir", None)),
            "state_file": _path_override(getattr(args, "state_file", None)),
        },
        "runtime": {"progress": False if getattr(args, "no_progress", False) else None},
    }


def _command_sync(args: argparse.Namespace, cfg: dict[str, Any]) -> int:
    cfg = apply_cli_overrides(cfg, _overrides_from_args(args))
    config = sync_config_from_dict(cfg)
    token = resolve_token(args.token, cfg)
    result = run_sync(config, token)
    print(
        f"Downloaded {len(result.downloaded)} of {len(result.listed)} listed artifacts "
        f"into {config.extract_dir}"
    )
    return 0


def _command_status(args: argparse.Namespace, cfg: dict[str, Any]) -> int:
    cfg = apply_cli_overrides(cfg, _overrides_from_args(args))
    config = sync_config_from_dict(cfg)
    report = build_status_report(config)
    print(format_status_report(report), end="")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _create_parser()
    args = parser.parse_args(argv)

    try:
        cfg = load_config(getattr(args, "config", None))
    except (OSError, ValueError, yaml.YAMLError) as exc:
        parser.error(str(exc))
        return 2
    setup_logging((cfg.get("runtime") or {}).get("log_level") or "INFO")

    try:
        if args.cmd == "sync":
            return _command_sync(args, cfg)
        if args.cmd == "status":
            return _command_status(args, cfg)
    except ArtifactSyncError as exc:
        LOGGER.error("%s failed: %s", args.cmd, exc)
        return 1
    except ValueError as exc:
        parser.error(str(exc))
        return 2

    parser.error(f"Unhandled command: {args.cmd}")
    return 2


def _single_command_main(cmd: str) -> int:
    return main([cmd, *sys.argv[1:]])


def main_sync() -> int:
    return _single_command_main("sync")


def main_status() -> int:
    return _single_command_main("status")


if __name__ == "__main__":
    raise SystemExit(main())
