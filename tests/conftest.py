# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# tests/conftest.py
"""Pytest configuration for bundle-diff tests."""

import pytest

from tests.fixtures.build_fixture import create_build_tree


def pytest_addoption(parser):
    """Add custom command-line options."""
    parser.addoption(
        "--run-build-tests",
        action="store_true",
        default=False,
        help="Run tests that spawn real build commands through a shell",
    )


def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers",
        "build_required: mark test as spawning real processes via the build runner",
    )


def pytest_collection_modifyitems(config, items):
    """Skip build tests unless --run-build-tests is passed."""
    if not config.getoption("--run-build-tests"):
        skip_build = pytest.mark.skip(reason="need --run-build-tests option to run")
        for item in items:
            if "build_required" in item.keywords:
                item.add_marker(skip_build)


@pytest.fixture
def build_tree(tmp_path):
    """A small build output with nested directories."""
    return create_build_tree(tmp_path, {
        "index.html": "<html><body>hello</body></html>",
        "app.js": "console.log('app');" * 20,
        "legacy.js": "var x = 1;",
        "styles.css": "body { color: red; }",
        "assets/logo.png": b"\x89PNG" + b"\x00" * 64,
        "assets/fonts/main.woff2": b"wOF2" + b"\x01" * 32,
    })
