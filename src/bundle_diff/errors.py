# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# bundle-diff/src/bundle_diff/errors.py

"""Exceptions raised by bundle-diff."""

import builtins


class BundleDiffError(Exception):
    """Base class for every error the CLI reports to the user."""


class ConfigError(BundleDiffError):
    """Missing or invalid build path, build command, or config file."""


class NotADirectoryError(BundleDiffError, builtins.NotADirectoryError):
    """Build output path does not exist or is not a directory."""


class BuildFailedError(BundleDiffError):
    """Build command exited with a non-zero status or failed to spawn."""

    def __init__(self, message: str, returncode: int | None = None):
        super().__init__(message)
        self.returncode = returncode


class MalformedSnapshotError(BundleDiffError):
    """Snapshot file is not valid JSON or does not have the snapshot shape."""


class FileSystemError(BundleDiffError):
    """I/O failure while walking, compressing, reading or writing files."""
