from __future__ import annotations

from typing import Any

from .layout import find_zip_files
from .models import SyncConfig
from .state import ProcessedStore
from .utils import count_files, now_utc_iso


def _id_sort_key(value: str) -> tuple[int, int, str]:
    if value.isdigit():
        return (0, int(value), value)
    return (1, 0, value)


def build_status_report(config: SyncConfig) -> dict[str, Any]:
    processed: list[str] = []
    if config.state_file is not None:
        processed = sorted(ProcessedStore(config.state_file).load(), key=_id_sort_key)
    return {
        "generated_at": now_utc_iso(),
        "repository": f"{config.owner}/{config.repo}",
        "artifact_name": config.artifact_name,
        "state_file": str(config.state_file) if config.state_file is not None else None,
        "processed_count": len(processed),
        "processed_ids": processed,
        "extract_dir": str(config.extract_dir),
        "extracted_files": count_files(config.extract_dir),
        "zip_files": [p.name for p in find_zip_files(config.zip_dir, config.artifact_name)],
    }


def format_status_report(report: dict[str, Any]) -> str:
    lines = []
    lines.append("Artifact Sync Status")
    lines.append("====================")
    lines.append(f"Repository: {report['repository']}  artifact={report['artifact_name']}")
    lines.append(f"Generated: {report['generated_at']}")

    lines.append("\nProcessed artifacts:")
    if report["state_file"] is None:
        lines.append("- record disabled")
    elif report["processed_ids"]:
        lines.append(f"- count: {report['processed_count']}")
        lines.append(f"- latest: {report['processed_ids'][-1]}")
    else:
        lines.append("- none")

    lines.append("\nExtracted tree:")
    lines.append(f"- {report['extract_dir']}: {report['extracted_files']} files")

    lines.append("\nKept archives:")
    if report["zip_files"]:
        for name in report["zip_files"]:
            lines.append(f"- {name}")
    else:
        lines.append("- none")

    return "\n".join(lines) + "\n"
