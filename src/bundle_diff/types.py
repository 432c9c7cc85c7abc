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
# bundle-diff/src/bundle_diff/types.py

"""Type definitions for build snapshots and their diffs."""

from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Final, Literal

from .errors import MalformedSnapshotError


DiffType = Literal["added", "removed", "modified"]
BuildTimeStatus = Literal["missing", "equal", "faster", "slower"]
BuildTime = tuple[int, int]

ALL_CATEGORY: Final = "all"
OTHER_CATEGORY: Final = "other"
RESERVED_CATEGORIES: Final = frozenset({ALL_CATEGORY, OTHER_CATEGORY})


@dataclass(frozen=True)
class FileEntry:
    """A sized path; also used for directory summary records."""
    path: str
    size: int
    gzip_size: int

    def to_dict(self) -> dict[str, Any]:
        return {"path": self.path, "size": self.size, "gzipSize": self.gzip_size}

    @classmethod
    def from_dict(cls, data: Any) -> "FileEntry":
        if not isinstance(data, Mapping):
            raise MalformedSnapshotError(f"Expected an fs entry object, got {data!r}")
        return cls(
            path=_require(data, "path", str),
            size=_require(data, "size", int),
            gzip_size=_require(data, "gzipSize", int),
        )


@dataclass(frozen=True)
class DirectoryEntry:
    """A directory and the files physically inside it."""
    path: str
    size: int
    gzip_size: int
    files: tuple[FileEntry, ...] = ()

    @classmethod
    def from_files(cls, path: str, files: Sequence[FileEntry]) -> "DirectoryEntry":
        return cls(
            path=path,
            size=sum(f.size for f in files),
            gzip_size=sum(f.gzip_size for f in files),
            files=tuple(files),
        )

    def summary(self) -> FileEntry:
        return FileEntry(self.path, self.size, self.gzip_size)


@dataclass(frozen=True)
class CategoryTotal:
    """Aggregate counters for one category."""
    files: int = 0
    size: int = 0
    gzip_size: int = 0

    def __add__(self, other: "CategoryTotal") -> "CategoryTotal":
        return CategoryTotal(
            self.files + other.files,
            self.size + other.size,
            self.gzip_size + other.gzip_size,
        )

    def __sub__(self, other: "CategoryTotal") -> "CategoryTotal":
        return CategoryTotal(
            self.files - other.files,
            self.size - other.size,
            self.gzip_size - other.gzip_size,
        )

    def to_dict(self) -> dict[str, int]:
        return {"files": self.files, "size": self.size, "gzipSize": self.gzip_size}

    @classmethod
    def from_dict(cls, data: Any) -> "CategoryTotal":
        if not isinstance(data, Mapping):
            raise MalformedSnapshotError(f"Expected a category total object, got {data!r}")
        return cls(
            files=_require(data, "files", int),
            size=_require(data, "size", int),
            gzip_size=_require(data, "gzipSize", int),
        )


@dataclass(frozen=True)
class Snapshot:
    """A single measurement of a build output directory."""
    project: str
    date: str
    total: dict[str, CategoryTotal]
    fs_entries: tuple[FileEntry, ...]
    build_time: BuildTime | None = None
    git_ref: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON shape, omitting gitRef when it is unknown."""
        data: dict[str, Any] = {"project": self.project}
        if self.git_ref:
            data["gitRef"] = self.git_ref
        data["date"] = self.date
        data["buildTime"] = list(self.build_time) if self.build_time else None
        data["total"] = {name: t.to_dict() for name, t in self.total.items()}
        data["fsEntries"] = [e.to_dict() for e in self.fs_entries]
        return data

    @classmethod
    def from_dict(cls, data: Any) -> "Snapshot":
        if not isinstance(data, Mapping):
            raise MalformedSnapshotError("Snapshot must be a JSON object")

        total = _require(data, "total", Mapping)
        fs_entries = _require(data, "fsEntries", list)
        git_ref = data.get("gitRef")
        if git_ref is not None and not isinstance(git_ref, str):
            raise MalformedSnapshotError(f"Field 'gitRef' must be a string, got {git_ref!r}")

        return cls(
            project=_require(data, "project", str),
            date=_require(data, "date", str),
            total={str(k): CategoryTotal.from_dict(v) for k, v in total.items()},
            fs_entries=tuple(FileEntry.from_dict(e) for e in fs_entries),
            build_time=_parse_build_time(data.get("buildTime")),
            git_ref=git_ref,
        )


@dataclass(frozen=True)
class FileDiffEntry:
    """One added, removed or resized path."""
    type: DiffType
    path: str
    size_delta: int
    gzip_delta: int


@dataclass(frozen=True)
class DiffRow:
    """Before/after comparison of one category."""
    name: str
    left_total: CategoryTotal
    right_total: CategoryTotal
    size_delta: int
    gzip_delta: int
    files_delta: int

    @property
    def has_changes(self) -> bool:
        return any((self.size_delta, self.gzip_delta, self.files_delta))


@dataclass(frozen=True)
class _DiffResult:
    """Sequence-like diff container.

    ``identical`` is only set when both inputs were equal as a whole, which
    tells an empty short-circuit result apart from a full comparison that
    happened to find nothing.
    """
    items: tuple = ()
    identical: bool = False

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator:
        return iter(self.items)

    def __getitem__(self, index):
        return self.items[index]


@dataclass(frozen=True)
class FileTreeDiff(_DiffResult):
    items: tuple[FileDiffEntry, ...] = ()

    def of_type(self, diff_type: DiffType) -> list[FileDiffEntry]:
        return [e for e in self.items if e.type == diff_type]


@dataclass(frozen=True)
class CategoryDiff(_DiffResult):
    items: tuple[DiffRow, ...] = ()

    def row(self, name: str) -> DiffRow | None:
        return next((r for r in self.items if r.name == name), None)


@dataclass(frozen=True)
class BuildTimeDiff:
    """Build durations rounded to whole seconds and their difference."""
    status: BuildTimeStatus
    left_seconds: int = 0
    right_seconds: int = 0
    delta_seconds: int = 0


def _require(data: Mapping, key: str, kind: type) -> Any:
    """Fetch a required field and check its type."""
    if key not in data:
        raise MalformedSnapshotError(f"Missing field '{key}'")
    value = data[key]
    # bool is an int subclass; sizes and counts never are
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise MalformedSnapshotError(
            f"Field '{key}' has unexpected type {type(value).__name__}"
        )
    return value


def _parse_build_time(value: Any) -> BuildTime | None:
    if value is None:
        return None
    if (
        not isinstance(value, list)
        or len(value) != 2
        or not all(isinstance(v, int) and not isinstance(v, bool) for v in value)
    ):
        raise MalformedSnapshotError(
            f"Field 'buildTime' must be [seconds, nanoseconds], got {value!r}"
        )
    return (value[0], value[1])
