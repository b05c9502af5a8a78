from pathlib import Path

import pytest

from artifact_sync.layout import artifact_zip_path, ensure_sync_layout, find_zip_files, zip_workspace


def test_artifact_zip_path_is_deterministic(tmp_path: Path) -> None:
    first = artifact_zip_path(tmp_path, "APK", "123")
    second = artifact_zip_path(tmp_path, "APK", "123")
    assert first == second
    assert first.name == "APK123.zip"


def test_temporary_workspace_is_removed(tmp_path: Path) -> None:
    with zip_workspace(None) as workspace:
        (workspace / "APK1.zip").write_bytes(b"x")
        assert workspace.is_dir()
    assert not workspace.exists()


def test_temporary_workspace_is_removed_on_error() -> None:
    with pytest.raises(RuntimeError):
        with zip_workspace(None) as workspace:
            raise RuntimeError("boom")
    assert not workspace.exists()


def test_configured_workspace_is_kept(tmp_path: Path) -> None:
    zip_dir = tmp_path / "zips"
    zip_dir.mkdir()
    with zip_workspace(zip_dir) as workspace:
        assert workspace == zip_dir
    assert zip_dir.exists()


def test_ensure_sync_layout_creates_directories(make_config, tmp_path: Path) -> None:
    config = make_config(
        zip_dir=tmp_path / "zips",
        state_file=tmp_path / "state" / "processed.json",
    )
    ensure_sync_layout(config)
    assert config.extract_dir.is_dir()
    assert (tmp_path / "zips").is_dir()
    assert (tmp_path / "state").is_dir()


def test_find_zip_files_filters_by_artifact_name(tmp_path: Path) -> None:
    for name in ("APK1.zip", "APK2.zip", "LOG3.zip", "APK4.zip.part", "APK-debug5.zip", "APKs.zip"):
        (tmp_path / name).write_bytes(b"")
    assert [p.name for p in find_zip_files(tmp_path, "APK")] == ["APK1.zip", "APK2.zip"]
    assert find_zip_files(None, "APK") == []
