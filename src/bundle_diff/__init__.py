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
# bundle-diff/src/bundle_diff/__init__.py

"""Build size snapshots and snapshot diffs for frontend projects."""

__version__ = "0.1.0"

from .categorize import categorize
from .diff import diff_build_time, diff_categories, diff_file_tree
from .errors import (
    BuildFailedError,
    BundleDiffError,
    ConfigError,
    FileSystemError,
    MalformedSnapshotError,
    NotADirectoryError,
)
from .sizes import build_size_index, gzip_size
from .snapshot import (
    SnapshotBuilder,
    build_snapshot,
    load_snapshot_file,
    write_snapshot_file,
)
from .types import (
    BuildTimeDiff,
    CategoryDiff,
    CategoryTotal,
    DiffRow,
    DirectoryEntry,
    FileDiffEntry,
    FileEntry,
    FileTreeDiff,
    Snapshot,
)

__all__ = [
    "BuildFailedError",
    "BuildTimeDiff",
    "BundleDiffError",
    "CategoryDiff",
    "CategoryTotal",
    "ConfigError",
    "DiffRow",
    "DirectoryEntry",
    "FileDiffEntry",
    "FileEntry",
    "FileSystemError",
    "FileTreeDiff",
    "MalformedSnapshotError",
    "NotADirectoryError",
    "Snapshot",
    "SnapshotBuilder",
    "build_size_index",
    "build_snapshot",
    "categorize",
    "diff_build_time",
    "diff_categories",
    "diff_file_tree",
    "gzip_size",
    "load_snapshot_file",
    "write_snapshot_file",
]
