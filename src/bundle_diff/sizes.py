# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# bundle-diff/src/bundle_diff/sizes.py

"""Walk a build directory and measure raw and gzip sizes."""

import gzip
import logging
import os
from pathlib import Path

from .errors import FileSystemError, NotADirectoryError
from .types import DirectoryEntry, FileEntry

logger = logging.getLogger(__name__)

GZIP_LEVEL = 9


def gzip_size(path: Path | str) -> int:
    """Return the size in bytes of the file's gzip-compressed content."""
    try:
        data = Path(path).read_bytes()
    except OSError as e:
        raise FileSystemError(f"Cannot read {path}: {e}") from e
    # mtime is fixed so the header, and therefore the size, is reproducible
    return len(gzip.compress(data, compresslevel=GZIP_LEVEL, mtime=0))


def build_size_index(root_dir: Path | str) -> list[DirectoryEntry]:
    """Measure every directory under root_dir, root included.

    Directories come back in top-down, depth-first order with siblings
    sorted by name. Each entry only accounts for the files physically
    inside it; subdirectories are separate entries. Entries whose name
    starts with a dot are skipped.
    """
    root = Path(root_dir)
    if not root.is_dir():
        raise NotADirectoryError(f"'{root_dir}' is not a directory")

    root_marker = root.as_posix().rstrip("/") + "/"
    directories = []

    def onerror(e: OSError) -> None:
        raise FileSystemError(f"Cannot list {e.filename}: {e}") from e

    for dirpath, dirnames, filenames in os.walk(root, onerror=onerror):
        # prune in place so os.walk honours the order and the filter
        dirnames[:] = sorted(d for d in dirnames if not d.startswith("."))

        relative = Path(dirpath).relative_to(root).as_posix()
        marker = root_marker if relative == "." else f"{root_marker}{relative}/"

        files = [
            _measure_file(Path(dirpath) / name, marker + name)
            for name in sorted(filenames)
            if not name.startswith(".")
        ]
        directories.append(DirectoryEntry.from_files(marker, files))

    logger.debug(
        "Indexed %d directories, %d files under %s",
        len(directories), sum(len(d.files) for d in directories), root_marker
    )
    return directories


def _measure_file(path: Path, display_path: str) -> FileEntry:
    try:
        size = path.stat().st_size
    except OSError as e:
        raise FileSystemError(f"Cannot stat {path}: {e}") from e
    return FileEntry(path=display_path, size=size, gzip_size=gzip_size(path))
