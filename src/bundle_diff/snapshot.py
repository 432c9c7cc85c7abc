# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# Copyright (C) 2026 HRDAG https://hrdag.org
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License along
# with this program; if not, see <https://www.gnu.org/licenses/>.
#
# ------
# bundle-diff/src/bundle_diff/snapshot.py

"""Build, write and load build snapshots."""

import json
import logging
import subprocess
from collections.abc import Callable, Iterable, Mapping
from datetime import datetime, timezone
from pathlib import Path

from .categorize import Pattern, categorize
from .errors import ConfigError, FileSystemError, MalformedSnapshotError
from .sizes import build_size_index
from .types import BuildTime, DirectoryEntry, FileEntry, Snapshot

logger = logging.getLogger(__name__)

UNKNOWN_PROJECT = "unknown"
GIT_HASH_LENGTH = 6


def get_git_reference(cwd: Path | str | None = None) -> str | None:
    """Return the current branch, or a short commit hash on a detached HEAD.

    Returns None when git is missing or cwd is not inside a repository.
    """
    try:
        branch = subprocess.run(
            ["git", "branch", "--show-current"],
            cwd=cwd, capture_output=True, check=True, text=True
        ).stdout.strip()
        if branch:
            return branch

        commit = subprocess.run(
            ["git", "rev-parse", "HEAD"],
            cwd=cwd, capture_output=True, check=True, text=True
        ).stdout.strip()
        return commit[:GIT_HASH_LENGTH] or None
    except (subprocess.CalledProcessError, OSError) as e:
        logger.debug("No git reference available: %s", e)
        return None


def read_project_name(directory: Path | str | None = None) -> str:
    """Read the project name from package.json, or return "unknown"."""
    package_json = Path(directory or Path.cwd()) / "package.json"
    try:
        data = json.loads(package_json.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return UNKNOWN_PROJECT
    name = data.get("name") if isinstance(data, dict) else None
    return name if isinstance(name, str) and name else UNKNOWN_PROJECT


def flatten_directories(directories: Iterable[DirectoryEntry]) -> list[FileEntry]:
    """Emit each directory's summary record followed by its files."""
    entries = []
    for directory in directories:
        entries.append(directory.summary())
        entries.extend(directory.files)
    return entries


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _isoformat(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace(
        "+00:00", "Z"
    )


class SnapshotBuilder:
    """Measure a build directory and wrap the result with metadata."""

    def __init__(
        self,
        project_name: str = UNKNOWN_PROJECT,
        git_ref_resolver: Callable[[], str | None] = get_git_reference,
        clock: Callable[[], datetime] = _utc_now,
    ):
        self.project_name = project_name or UNKNOWN_PROJECT
        self.git_ref_resolver = git_ref_resolver
        self.clock = clock

    def build(
        self,
        build_directory: Path | str | None,
        build_time: BuildTime | None = None,
        categories: Mapping[str, Pattern] | None = None,
    ) -> Snapshot:
        if not build_directory:
            raise ConfigError(
                'Build path is not set. Check config file or set path using option "--path"'
            )

        directories = build_size_index(build_directory)
        total = categorize(directories, categories or {})
        git_ref = self.git_ref_resolver()

        snapshot = Snapshot(
            project=self.project_name,
            git_ref=git_ref,
            date=_isoformat(self.clock()),
            build_time=tuple(build_time) if build_time else None,
            total=total,
            fs_entries=tuple(flatten_directories(directories)),
        )
        logger.debug(
            "Snapshot of %s: %d entries, git ref %s",
            build_directory, len(snapshot.fs_entries), git_ref
        )
        return snapshot


def build_snapshot(
    build_directory: Path | str | None,
    build_time: BuildTime | None = None,
    categories: Mapping[str, Pattern] | None = None,
    *,
    project_name: str | None = None,
    git_ref_resolver: Callable[[], str | None] = get_git_reference,
) -> Snapshot:
    """Convenience wrapper around SnapshotBuilder."""
    builder = SnapshotBuilder(
        project_name=project_name if project_name is not None else read_project_name(),
        git_ref_resolver=git_ref_resolver,
    )
    return builder.build(build_directory, build_time, categories)


def default_snapshot_filename(moment: datetime | None = None) -> str:
    moment = (moment or _utc_now()).astimezone(timezone.utc)
    return f"bundle_snapshot_{moment:%Y%m%d}_{moment:%H%M%S}.json"


def write_snapshot_file(snapshot: Snapshot, output_path: Path | str | None = None) -> Path:
    """Write the snapshot as pretty-printed JSON and return its path."""
    path = Path(output_path) if output_path else Path(default_snapshot_filename())
    output = json.dumps(snapshot.to_dict(), indent=2, ensure_ascii=False)
    try:
        path.write_text(output, encoding="utf-8")
    except OSError as e:
        raise FileSystemError(f"Cannot write snapshot {path}: {e}") from e
    logger.debug("Wrote %s (%d bytes)", path, len(output))
    return path


def load_snapshot_file(path: Path | str) -> Snapshot:
    """Read a snapshot written by write_snapshot_file."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise FileSystemError(f"Cannot read snapshot {path}: {e}") from e
    except UnicodeDecodeError as e:
        raise MalformedSnapshotError(f"{path} is not UTF-8 text: {e}") from e
    return parse_snapshot(text, source=str(path))


def parse_snapshot(text: str, source: str = "<string>") -> Snapshot:
    try:
        data = json.loads(text)
    except ValueError as e:
        raise MalformedSnapshotError(f"{source} is not valid JSON: {e}") from e
    try:
        return Snapshot.from_dict(data)
    except MalformedSnapshotError as e:
        raise MalformedSnapshotError(f"{source}: {e}") from e
