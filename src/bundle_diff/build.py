# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# bundle-diff/src/bundle_diff/build.py

"""Run the project's build command and time it."""

import logging
import os
import shlex
import signal
import subprocess
import sys
import threading
import time
from collections.abc import Iterator, Mapping
from contextlib import contextmanager

from .errors import BuildFailedError, ConfigError
from .types import BuildTime

logger = logging.getLogger(__name__)

IS_WINDOWS = sys.platform == "win32"
NANOSECONDS = 1_000_000_000
KILL_TIMEOUT = 5
TERMINATING_SIGNALS = tuple(
    getattr(signal, name) for name in ("SIGTERM", "SIGHUP") if hasattr(signal, name)
)


def _kill_process_tree(process: subprocess.Popen) -> None:
    """Best-effort termination of the build and everything it spawned."""
    if process.poll() is not None:
        return
    try:
        if IS_WINDOWS:
            subprocess.run(
                ["taskkill", "/PID", str(process.pid), "/T", "/F"],
                capture_output=True
            )
        else:
            # the child leads its own session, so its pid is the group id
            os.killpg(process.pid, signal.SIGTERM)
    except OSError as e:
        logger.warning("Could not stop build process %d: %s", process.pid, e)

    try:
        process.wait(timeout=KILL_TIMEOUT)
    except subprocess.TimeoutExpired:
        logger.warning("Build process %d ignored SIGTERM, killing it", process.pid)
        try:
            if IS_WINDOWS:
                process.kill()
            else:
                os.killpg(process.pid, signal.SIGKILL)
            process.wait(timeout=KILL_TIMEOUT)
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.warning("Could not reap build process %d: %s", process.pid, e)


def _raise_exit(signum, frame) -> None:
    raise SystemExit(128 + signum)


@contextmanager
def _exit_on_termination() -> Iterator[None]:
    """Turn SIGTERM and SIGHUP into SystemExit while the build runs.

    Handlers can only be set from the main thread; elsewhere the block
    runs unchanged.
    """
    if threading.current_thread() is not threading.main_thread():
        yield
        return

    previous = {signum: signal.signal(signum, _raise_exit) for signum in TERMINATING_SIGNALS}
    try:
        yield
    finally:
        for signum, handler in previous.items():
            signal.signal(signum, handler)


def run_build(command: str | None, env: Mapping[str, str] | None = None) -> None:
    """Run command to completion, raising BuildFailedError on failure.

    If the parent is interrupted or terminated while waiting, the whole
    build process tree is stopped before the exception propagates.
    """
    if not command or not command.strip():
        raise ConfigError(
            'Build command is not set. Check config file or set command using option "--exec"'
        )

    # CreateProcess parses the command line itself on Windows
    args = command if IS_WINDOWS else shlex.split(command)
    build_env = {**os.environ, **(env or {}), "NO_HASH": "true"}
    logger.debug("Running build: %s", args)

    with _exit_on_termination():
        try:
            process = subprocess.Popen(
                args,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                env=build_env,
                start_new_session=not IS_WINDOWS,
            )
        except OSError as e:
            raise BuildFailedError(f'Command "{command}" failed to start: {e}') from e

        try:
            returncode = process.wait()
        except BaseException:
            _kill_process_tree(process)
            raise

    if returncode:
        raise BuildFailedError(
            f'Command "{command}" exited with status code: {returncode}',
            returncode=returncode,
        )


def measure_build(command: str | None, env: Mapping[str, str] | None = None) -> BuildTime:
    """Run the build and return its duration as (seconds, nanoseconds)."""
    started = time.perf_counter_ns()
    run_build(command, env)
    seconds, nanoseconds = divmod(time.perf_counter_ns() - started, NANOSECONDS)
    logger.debug("Build took %d.%09d s", seconds, nanoseconds)
    return (seconds, nanoseconds)
