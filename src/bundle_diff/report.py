# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# bundle-diff/src/bundle_diff/report.py

"""Render snapshot diffs on a rich console."""

import math
from datetime import datetime

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .diff import diff_build_time, diff_categories, diff_file_tree
from .types import (
    ALL_CATEGORY,
    OTHER_CATEGORY,
    BuildTimeDiff,
    CategoryDiff,
    CategoryTotal,
    DiffRow,
    FileTreeDiff,
    Snapshot,
)

BYTE_UNITS = ["B", "kB", "MB", "GB", "TB", "PB"]
ROW_LABELS = {OTHER_CATEGORY: "Other", ALL_CATEGORY: "Total"}
NO_CHANGES = "No changes"


def format_bytes(number: int, signed: bool = False) -> str:
    """Human readable size with decimal units, e.g. "1.5 kB" or "+300 B"."""
    if number == 0:
        return " 0 B" if signed else "0 B"

    prefix = "-" if number < 0 else ("+" if signed else "")
    number = abs(number)
    exponent = min(int(math.log10(number) // 3), len(BYTE_UNITS) - 1)
    value = float(f"{number / 1000 ** exponent:.3g}")
    return f"{prefix}{value:g} {BYTE_UNITS[exponent]}"


def get_plural(number: int, one: str, many: str) -> str:
    return one if abs(number) == 1 else many


def format_seconds(seconds: int) -> str:
    return f"{seconds} {get_plural(seconds, 'second', 'seconds')}"


def print_snapshot_info(console: Console, snapshot: Snapshot, label: str) -> None:
    try:
        date = datetime.fromisoformat(snapshot.date.replace("Z", "+00:00")).astimezone()
        when = f"{date:%Y-%m-%d %H:%M:%S}"
    except ValueError:
        when = snapshot.date
    parts = [f" {label}:", when, "•", escape(snapshot.project)]
    if snapshot.git_ref:
        parts += ["•", escape(snapshot.git_ref)]
    console.print(" ".join(parts))


def print_build_time(console: Console, result: BuildTimeDiff) -> None:
    if result.status == "missing":
        console.print(" Build time is not provided")
        return
    if result.status == "equal":
        console.print(f" {NO_CHANGES} ({format_seconds(result.left_seconds)})")
        return

    color = "red" if result.status == "slower" else "green"
    console.print(
        f" [{color}]{format_seconds(result.delta_seconds)} {result.status} "
        f"(Left: {format_seconds(result.left_seconds)}, "
        f"Right: {format_seconds(result.right_seconds)})[/{color}]"
    )


def _pretty_sizes(total: CategoryTotal) -> str:
    if total.size == total.gzip_size:
        return format_bytes(total.size)
    return f"{format_bytes(total.size)} ({format_bytes(total.gzip_size)})"


def _changes_cell(row: DiffRow) -> str:
    if not row.has_changes:
        return f"[dim]{NO_CHANGES}[/dim]"

    result = f"{format_bytes(row.size_delta, signed=True)} ({format_bytes(row.gzip_delta, signed=True)})"
    if row.files_delta:
        sign = "+" if row.files_delta > 0 else ""
        result += f", {sign}{row.files_delta} {get_plural(row.files_delta, 'item', 'items')}"
    color = "red" if row.size_delta > 0 or row.gzip_delta > 0 else "green"
    return f"[{color}]{result}[/{color}]"


def print_diff_total(
    console: Console, result: CategoryDiff, left_caption: str, right_caption: str
) -> None:
    if result.identical:
        console.print(f" {NO_CHANGES}")
        return

    table = Table(box=box.SIMPLE_HEAD, show_edge=False, header_style="dim")
    table.add_column("")
    table.add_column(escape(left_caption))
    table.add_column(escape(right_caption))
    table.add_column("Changes")

    for row in result:
        table.add_row(
            f"[dim]{escape(ROW_LABELS.get(row.name, row.name))}[/dim]",
            _pretty_sizes(row.left_total),
            _pretty_sizes(row.right_total),
            _changes_cell(row),
            end_section=row.name == OTHER_CATEGORY,
        )
    console.print(table)


def print_diff_file_tree(console: Console, result: FileTreeDiff) -> None:
    if result.identical:
        console.print(f" {NO_CHANGES}")
        return

    markers = {"added": ("+", "green"), "removed": ("-", "red"), "modified": ("m", None)}
    for entry in sorted(result, key=lambda e: e.path):
        marker, color = markers[entry.type]
        signed = entry.type == "modified"
        line = (
            f"{marker} {escape(entry.path)}: "
            f"{format_bytes(entry.size_delta, signed=signed)} "
            f"({format_bytes(entry.gzip_delta, signed=signed)})"
        )
        console.print(f" [{color}]{line}[/{color}]" if color else f" {line}")


def print_report(
    console: Console,
    left: Snapshot,
    right: Snapshot,
    left_caption: str = "Left",
    right_caption: str = "Right",
) -> None:
    """Print the full diff report for two snapshots."""
    console.print()
    console.print("[cyan]Snapshots:[/cyan]")
    print_snapshot_info(console, left, "Left")
    print_snapshot_info(console, right, "Right")
    console.print()

    console.print("[cyan]Build time:[/cyan]")
    print_build_time(console, diff_build_time(left.build_time, right.build_time))
    console.print()

    console.print("[cyan]Diff by category:[/cyan]")
    print_diff_total(console, diff_categories(left.total, right.total), left_caption, right_caption)
    console.print()

    console.print("[cyan]Diff by files:[/cyan]")
    print_diff_file_tree(console, diff_file_tree(left.fs_entries, right.fs_entries))
    console.print()
