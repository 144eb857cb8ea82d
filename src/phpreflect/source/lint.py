# Copyright 2026 phpreflect Contributors
# SPDX-License-Identifier: Apache-2.0

"""Syntax validation of PHP files through the ``php -l`` linter."""

import subprocess
from pathlib import Path

# ###############
# Public Interface
# ###############


class SourceValidationError(Exception):
    """Raised when a file fails syntax validation.

    Attributes:
        lines: Diagnostic output lines reported by the linter.
    """

    def __init__(self, message: str, lines: list[str] | None = None) -> None:
        super().__init__(message)
        self.lines = lines or []


def lint_source(path: Path, php_binary: str = "php", timeout: int = 60) -> None:
    """Check that *path* contains syntactically valid PHP.

    Args:
        path: File to check.
        php_binary: PHP executable to run.
        timeout: Seconds to wait for the linter.

    Raises:
        SourceValidationError: If the linter reports errors, is not installed,
            or times out.
    """
    result = _run_php_raw(php_binary, ["-l", str(path)], timeout=timeout)
    if result.returncode != 0:
        lines = [line for line in (result.stdout + result.stderr).splitlines() if line.strip()]
        raise SourceValidationError(
            f"The file '{path}' could not be interpreted as it contains errors: " + "\n".join(lines),
            lines,
        )


# ################
# Implementation
# ################


def _run_php_raw(php_binary: str, args: list[str], *, timeout: int) -> subprocess.CompletedProcess[str]:
    """Run the PHP executable and return the raw CompletedProcess result.

    Raises:
        SourceValidationError: If the executable is not found or times out.
    """
    try:
        return subprocess.run(
            [php_binary, *args],
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except FileNotFoundError as exc:
        raise SourceValidationError(f"PHP executable '{php_binary}' not found on PATH") from exc
    except subprocess.TimeoutExpired as exc:
        raise SourceValidationError(f"PHP lint timed out: {php_binary} {' '.join(args)}") from exc
