# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# bundle-diff/src/bundle_diff/categorize.py

"""Aggregate directory sizes into user-defined categories."""

import logging
import re
from collections.abc import Iterable, Mapping, Sequence

from .errors import ConfigError
from .types import (
    ALL_CATEGORY,
    OTHER_CATEGORY,
    RESERVED_CATEGORIES,
    CategoryTotal,
    DirectoryEntry,
)

logger = logging.getLogger(__name__)

Pattern = re.Pattern | str


def compile_categories(categories: Mapping[str, Pattern]) -> dict[str, re.Pattern]:
    """Compile string patterns and reject reserved category names."""
    compiled = {}
    for name, pattern in categories.items():
        if name in RESERVED_CATEGORIES:
            raise ConfigError(f"Category name '{name}' is reserved")
        if isinstance(pattern, re.Pattern):
            compiled[name] = pattern
            continue
        try:
            compiled[name] = re.compile(pattern)
        except (re.error, TypeError) as e:
            raise ConfigError(f"Invalid pattern for category '{name}': {e}") from e
    return compiled


def filter_directories(
    directories: Iterable[DirectoryEntry], pattern: re.Pattern
) -> list[DirectoryEntry]:
    """Rebuild each directory with only its matching files.

    Directories left without a matching file are dropped.
    """
    filtered = []
    for directory in directories:
        files = [f for f in directory.files if pattern.search(f.path)]
        if files:
            filtered.append(DirectoryEntry.from_files(directory.path, files))
    return filtered


def calculate_total(directories: Iterable[DirectoryEntry]) -> CategoryTotal:
    files = size = gzip_size = 0
    for directory in directories:
        files += len(directory.files)
        size += directory.size
        gzip_size += directory.gzip_size
    return CategoryTotal(files=files, size=size, gzip_size=gzip_size)


def calculate_other(total: Mapping[str, CategoryTotal]) -> CategoryTotal:
    """Subtract every explicit category from ``all``.

    Categories may overlap, so the result can go negative.
    """
    explicit = CategoryTotal()
    for name, category_total in total.items():
        if name in RESERVED_CATEGORIES:
            continue
        explicit += category_total
    return total[ALL_CATEGORY] - explicit


def categorize(
    directories: Sequence[DirectoryEntry], categories: Mapping[str, Pattern]
) -> dict[str, CategoryTotal]:
    """Compute ``all``, one total per category, and ``other``."""
    compiled = compile_categories(categories)

    total = {ALL_CATEGORY: calculate_total(directories)}
    for name, pattern in compiled.items():
        total[name] = calculate_total(filter_directories(directories, pattern))

    if compiled:
        other = calculate_other(total)
        if other.files < 0 or other.size < 0 or other.gzip_size < 0:
            logger.warning(
                "Categories overlap: 'other' total is negative (%d files, %d bytes)",
                other.files, other.size
            )
        total[OTHER_CATEGORY] = other

    logger.debug("Category totals: %s", total)
    return total
