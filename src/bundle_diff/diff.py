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
# bundle-diff/src/bundle_diff/diff.py

"""Compare two snapshots: file tree, category totals and build time."""

import logging
import math
from collections.abc import Mapping, Sequence

from .types import (
    ALL_CATEGORY,
    OTHER_CATEGORY,
    BuildTime,
    BuildTimeDiff,
    CategoryDiff,
    CategoryTotal,
    DiffRow,
    FileDiffEntry,
    FileEntry,
    FileTreeDiff,
)

logger = logging.getLogger(__name__)


def _index_by_path(entries: Sequence[FileEntry]) -> dict[str, FileEntry]:
    """Map path to entry; the first occurrence of a duplicate path wins."""
    index: dict[str, FileEntry] = {}
    for entry in entries:
        index.setdefault(entry.path, entry)
    return index


def diff_file_tree(left: Sequence[FileEntry], right: Sequence[FileEntry]) -> FileTreeDiff:
    """Classify every path as added, removed or modified.

    Directory summary records are compared like files. A path counts as
    modified only when its raw size changed; gzip-only changes are not
    reported. Entries come back grouped as added, removed, then modified.
    """
    if list(left) == list(right):
        return FileTreeDiff(identical=True)

    left_index = _index_by_path(left)
    right_index = _index_by_path(right)

    # the indexes keep first occurrences in input order, so each path is
    # reported at most once
    added = [
        FileDiffEntry("added", e.path, e.size, e.gzip_size)
        for e in right_index.values() if e.path not in left_index
    ]
    removed = [
        FileDiffEntry("removed", e.path, e.size, e.gzip_size)
        for e in left_index.values() if e.path not in right_index
    ]

    modified = []
    for entry in right_index.values():
        if entry.path not in left_index:
            continue
        left_entry = left_index[entry.path]
        size_delta = entry.size - left_entry.size
        if size_delta != 0:
            modified.append(FileDiffEntry(
                "modified", entry.path, size_delta,
                entry.gzip_size - left_entry.gzip_size
            ))

    logger.debug(
        "File tree diff: %d added, %d removed, %d modified",
        len(added), len(removed), len(modified)
    )
    return FileTreeDiff(items=tuple(added + removed + modified))


def _diff_row(name: str, left: CategoryTotal, right: CategoryTotal) -> DiffRow:
    return DiffRow(
        name=name,
        left_total=left,
        right_total=right,
        size_delta=right.size - left.size,
        gzip_delta=right.gzip_size - left.gzip_size,
        files_delta=right.files - left.files,
    )


def diff_categories(
    left: Mapping[str, CategoryTotal], right: Mapping[str, CategoryTotal]
) -> CategoryDiff:
    """Compare category totals present on both sides.

    Rows follow the left snapshot's category order, then ``other``, then
    ``all``. Categories found on one side only are skipped.
    """
    if dict(left) == dict(right):
        return CategoryDiff(identical=True)

    rows = []
    for name, left_total in left.items():
        if name in (ALL_CATEGORY, OTHER_CATEGORY):
            continue
        if name not in right:
            logger.debug("Category '%s' missing from right snapshot, skipped", name)
            continue
        rows.append(_diff_row(name, left_total, right[name]))

    for name in right:
        if name not in left:
            logger.debug("Category '%s' missing from left snapshot, skipped", name)

    for name in (OTHER_CATEGORY, ALL_CATEGORY):
        if name in left and name in right:
            rows.append(_diff_row(name, left[name], right[name]))

    return CategoryDiff(items=tuple(rows))


def convert_build_time(build_time: BuildTime) -> float:
    """Return a [seconds, nanoseconds] pair as fractional seconds."""
    seconds, nanoseconds = build_time
    return seconds + nanoseconds / 1e9


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def diff_build_time(left: BuildTime | None, right: BuildTime | None) -> BuildTimeDiff:
    """Compare build durations after rounding each to whole seconds."""
    if not left or not right:
        return BuildTimeDiff(status="missing")

    left_seconds = _round_half_up(convert_build_time(left))
    right_seconds = _round_half_up(convert_build_time(right))
    delta = right_seconds - left_seconds

    if delta == 0:
        status = "equal"
    elif delta < 0:
        status = "faster"
    else:
        status = "slower"

    return BuildTimeDiff(
        status=status,
        left_seconds=left_seconds,
        right_seconds=right_seconds,
        delta_seconds=abs(delta),
    )
