# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# tests/test_snapshot.py

"""Unit tests for building, writing and loading snapshots."""

import json
import subprocess
from datetime import datetime, timezone
from unittest.mock import patch

import pytest

from bundle_diff.errors import (
    ConfigError,
    FileSystemError,
    MalformedSnapshotError,
    NotADirectoryError,
)
from bundle_diff.snapshot import (
    SnapshotBuilder,
    build_snapshot,
    default_snapshot_filename,
    flatten_directories,
    get_git_reference,
    load_snapshot_file,
    read_project_name,
    write_snapshot_file,
)
from bundle_diff.types import CategoryTotal, DirectoryEntry, FileEntry, Snapshot
from tests.fixtures.build_fixture import make_snapshot

FIXED_NOW = datetime(2024, 5, 17, 13, 45, 30, 123456, tzinfo=timezone.utc)


def _builder(**kwargs):
    kwargs.setdefault("project_name", "my-app")
    kwargs.setdefault("git_ref_resolver", lambda: "main")
    kwargs.setdefault("clock", lambda: FIXED_NOW)
    return SnapshotBuilder(**kwargs)


class TestSnapshotBuilder:

    def test_metadata(self, build_tree):
        snapshot = _builder().build(build_tree.root, (3, 250_000_000), {})
        assert snapshot.project == "my-app"
        assert snapshot.git_ref == "main"
        assert snapshot.date == "2024-05-17T13:45:30.123Z"
        assert snapshot.build_time == (3, 250_000_000)

    def test_totals_use_categories(self, build_tree):
        snapshot = _builder().build(build_tree.root, None, {"js": r"\.js$"})
        assert set(snapshot.total) == {"all", "js", "other"}
        assert snapshot.total["js"].files == 2
        assert snapshot.total["all"].files == len(build_tree.files)

    def test_fs_entries_interleave_directories_and_files(self, build_tree):
        root_marker = build_tree.root.as_posix() + "/"
        snapshot = _builder().build(build_tree.root, None, {})
        paths = [e.path for e in snapshot.fs_entries]
        assert paths == [
            root_marker,
            root_marker + "app.js",
            root_marker + "index.html",
            root_marker + "legacy.js",
            root_marker + "styles.css",
            root_marker + "assets/",
            root_marker + "assets/logo.png",
            root_marker + "assets/fonts/",
            root_marker + "assets/fonts/main.woff2",
        ]

    def test_missing_git_ref_is_omitted(self, build_tree):
        snapshot = _builder(git_ref_resolver=lambda: None).build(build_tree.root)
        assert snapshot.git_ref is None
        assert "gitRef" not in snapshot.to_dict()

    def test_empty_project_name_defaults_to_unknown(self, build_tree):
        snapshot = _builder(project_name="").build(build_tree.root)
        assert snapshot.project == "unknown"

    @pytest.mark.parametrize("build_directory", [None, ""])
    def test_unset_build_directory(self, build_directory):
        with pytest.raises(ConfigError, match="Build path is not set"):
            _builder().build(build_directory)

    def test_build_directory_must_be_directory(self, tmp_path):
        target = tmp_path / "file.txt"
        target.write_text("x")
        with pytest.raises(NotADirectoryError):
            _builder().build(target)

    def test_build_snapshot_reads_project_name(self, build_tree, tmp_path, monkeypatch):
        (tmp_path / "package.json").write_text(json.dumps({"name": "from-package"}))
        monkeypatch.chdir(tmp_path)
        snapshot = build_snapshot(build_tree.root, git_ref_resolver=lambda: None)
        assert snapshot.project == "from-package"

    def test_build_snapshot_explicit_project_name(self, build_tree):
        snapshot = build_snapshot(
            build_tree.root, project_name="explicit", git_ref_resolver=lambda: "dev"
        )
        assert snapshot.project == "explicit"
        assert snapshot.git_ref == "dev"


class TestFlattenDirectories:

    def test_summary_precedes_files(self):
        directories = [
            DirectoryEntry.from_files("b/", [FileEntry("b/x", 1, 1)]),
            DirectoryEntry.from_files("b/c/", [FileEntry("b/c/y", 2, 2), FileEntry("b/c/z", 3, 3)]),
        ]
        assert flatten_directories(directories) == [
            FileEntry("b/", 1, 1),
            FileEntry("b/x", 1, 1),
            FileEntry("b/c/", 5, 5),
            FileEntry("b/c/y", 2, 2),
            FileEntry("b/c/z", 3, 3),
        ]


class TestGitReference:

    def _completed(self, stdout):
        return subprocess.CompletedProcess(args=[], returncode=0, stdout=stdout, stderr="")

    def test_prefers_branch(self):
        with patch("bundle_diff.snapshot.subprocess.run") as run:
            run.return_value = self._completed("feature/x\n")
            assert get_git_reference() == "feature/x"
        assert run.call_count == 1

    def test_detached_head_uses_short_hash(self):
        with patch("bundle_diff.snapshot.subprocess.run") as run:
            run.side_effect = [self._completed("\n"), self._completed("abcdef123456\n")]
            assert get_git_reference() == "abcdef"

    def test_not_a_repository(self):
        error = subprocess.CalledProcessError(128, ["git"], stderr="fatal: not a git repository")
        with patch("bundle_diff.snapshot.subprocess.run", side_effect=error):
            assert get_git_reference() is None

    def test_git_not_installed(self):
        with patch("bundle_diff.snapshot.subprocess.run", side_effect=FileNotFoundError("git")):
            assert get_git_reference() is None


class TestReadProjectName:

    def test_reads_name(self, tmp_path):
        (tmp_path / "package.json").write_text('{"name": "@scope/app"}')
        assert read_project_name(tmp_path) == "@scope/app"

    def test_missing_file(self, tmp_path):
        assert read_project_name(tmp_path) == "unknown"

    def test_invalid_json(self, tmp_path):
        (tmp_path / "package.json").write_text("{not json")
        assert read_project_name(tmp_path) == "unknown"

    def test_missing_name(self, tmp_path):
        (tmp_path / "package.json").write_text('{"version": "1.0.0"}')
        assert read_project_name(tmp_path) == "unknown"


class TestSnapshotFiles:

    def test_written_json_shape(self, tmp_path):
        path = write_snapshot_file(make_snapshot(), tmp_path / "snap.json")
        text = path.read_text(encoding="utf-8")
        data = json.loads(text)

        assert text.startswith('{\n  "project"')
        assert list(data) == ["project", "gitRef", "date", "buildTime", "total", "fsEntries"]
        assert data["buildTime"] == [0, 1_000_000_000]
        assert data["total"]["js"] == {"files": 5, "size": 600, "gzipSize": 300}
        assert data["fsEntries"][0] == {"path": "/build/", "size": 900, "gzipSize": 450}

    def test_null_build_time(self, tmp_path):
        path = write_snapshot_file(make_snapshot(build_time=None), tmp_path / "snap.json")
        assert json.loads(path.read_text())["buildTime"] is None

    def test_load_returns_equal_snapshot(self, tmp_path):
        original = make_snapshot(git_ref=None)
        loaded = load_snapshot_file(write_snapshot_file(original, tmp_path / "snap.json"))
        assert loaded == original

    def test_default_filename(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        path = write_snapshot_file(make_snapshot())
        assert path.name.startswith("bundle_snapshot_")
        assert (tmp_path / path).exists()

    def test_default_filename_format(self):
        assert default_snapshot_filename(FIXED_NOW) == "bundle_snapshot_20240517_134530.json"

    def test_write_into_missing_directory(self, tmp_path):
        with pytest.raises(FileSystemError):
            write_snapshot_file(make_snapshot(), tmp_path / "nope" / "snap.json")

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(FileSystemError):
            load_snapshot_file(tmp_path / "missing.json")

    def test_load_invalid_json(self, tmp_path):
        target = tmp_path / "broken.json"
        target.write_text("{ not json")
        with pytest.raises(MalformedSnapshotError) as excinfo:
            load_snapshot_file(target)
        assert isinstance(excinfo.value.__cause__, json.JSONDecodeError)

    @pytest.mark.parametrize("data", [
        [],
        {"project": "x", "date": "d", "total": {}},
        {"project": "x", "date": "d", "total": {}, "fsEntries": [{"path": "a"}]},
        {"project": "x", "date": "d", "total": {"all": {"files": "1", "size": 1, "gzipSize": 1}},
         "fsEntries": []},
        {"project": "x", "date": "d", "total": {}, "fsEntries": [], "buildTime": [1]},
    ])
    def test_load_wrong_shape(self, tmp_path, data):
        target = tmp_path / "shape.json"
        target.write_text(json.dumps(data))
        with pytest.raises(MalformedSnapshotError):
            load_snapshot_file(target)

    def test_from_dict_without_optional_fields(self):
        snapshot = Snapshot.from_dict({
            "project": "x",
            "date": "2024-01-01T00:00:00.000Z",
            "total": {"all": {"files": 1, "size": 2, "gzipSize": 3}},
            "fsEntries": [],
        })
        assert snapshot.git_ref is None
        assert snapshot.build_time is None
        assert snapshot.total["all"] == CategoryTotal(1, 2, 3)
