# Copyright 2025 Roger Cibrian
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Logging interface for relseq.

Library modules report progress through a small Logger protocol instead of
printing directly, so the CLI decides how chatty a run is. The version engine
(relseq.versioning) is pure and never logs; the layers around it do.

Output levels:

- info: Always printed. Informational outcomes such as "no natural versions
    found" or "version 1.3.0 skipped" (these are never errors).
- step: Always printed. Progress through a multi-step command.
- verbose: Printed with --verbose.
- debug: Printed with --debug (implies verbose).

Prefixes in use: CONFIG, CRAWL, FILE, HTTP, SCAN, STATE, PLAN, POLICY, VERSION.

Example:
    Configure the global logger from a command handler:
        ```python
        from relseq.logging import get_logger, set_global_logger

        set_global_logger(get_logger(verbose=True))
        ```

    Use it in library code:
        ```python
        from relseq.logging import get_global_logger

        logger = get_global_logger()
        logger.step(1, 3, "Loading profile...")
        logger.verbose("SCAN", "Found zlib-1.2.13.tar.gz")
        logger.debug("VERSION", "1.3.0 skipped (odd minor)")
        ```

Note:
    The default global logger is silent, so importing relseq as a library
    prints nothing until a logger is installed.
"""

from __future__ import annotations

from typing import Protocol


class Logger(Protocol):
    """Protocol for logger implementations."""

    def info(self, message: str) -> None:
        """Print an informational message."""
        ...

    def step(self, step: int, total: int, message: str) -> None:
        """Print a step indicator.

        Args:
            step: Current step number (1-based).
            total: Total number of steps.
            message: Step description.
        """
        ...

    def verbose(self, prefix: str, message: str) -> None:
        """Print a message when verbose output is enabled."""
        ...

    def debug(self, prefix: str, message: str) -> None:
        """Print a message when debug output is enabled."""
        ...


class DefaultLogger:
    """Logger that prints to stdout, gated by verbose/debug flags."""

    def __init__(self, verbose: bool = False, debug: bool = False) -> None:
        self._verbose = verbose or debug
        self._debug = debug

    def info(self, message: str) -> None:
        print(f"[INFO] {message}")

    def step(self, step: int, total: int, message: str) -> None:
        print(f"[{step}/{total}] {message}")

    def verbose(self, prefix: str, message: str) -> None:
        if self._verbose:
            print(f"[{prefix}] {message}")

    def debug(self, prefix: str, message: str) -> None:
        if self._debug:
            print(f"[{prefix}] {message}")


class SilentLogger:
    """Logger that suppresses all output."""

    def info(self, message: str) -> None:
        pass

    def step(self, step: int, total: int, message: str) -> None:
        pass

    def verbose(self, prefix: str, message: str) -> None:
        pass

    def debug(self, prefix: str, message: str) -> None:
        pass


_global_logger: Logger = SilentLogger()


def get_logger(verbose: bool = False, debug: bool = False) -> Logger:
    """Return a stdout logger with the given verbosity.

    Args:
        verbose: Print verbose messages.
        debug: Print debug messages (implies verbose).

    Returns:
        A DefaultLogger instance.
    """
    return DefaultLogger(verbose=verbose, debug=debug)


def get_global_logger() -> Logger:
    """Return the process-wide logger (silent unless configured)."""
    return _global_logger


def set_global_logger(logger: Logger) -> None:
    """Install the process-wide logger.

    Args:
        logger: Logger used by library functions that are not handed one
            explicitly.
    """
    global _global_logger
    _global_logger = logger
