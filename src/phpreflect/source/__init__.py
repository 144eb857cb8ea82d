# Copyright 2026 phpreflect Contributors
# SPDX-License-Identifier: Apache-2.0

"""Loading and syntax validation of PHP source files."""

from phpreflect.source.lint import SourceValidationError, lint_source
from phpreflect.source.loader import (
    DEFAULT_FALLBACK_ENCODING,
    SourceLoadError,
    SourceText,
    load_source,
)

__all__ = [
    "DEFAULT_FALLBACK_ENCODING",
    "SourceLoadError",
    "SourceText",
    "SourceValidationError",
    "lint_source",
    "load_source",
]
