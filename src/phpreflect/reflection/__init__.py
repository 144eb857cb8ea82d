# Copyright 2026 phpreflect Contributors
# SPDX-License-Identifier: Apache-2.0

"""Single-pass reflection of PHP files into entities and an XML document."""

from phpreflect.reflection.document import build_document, merge_fragment
from phpreflect.reflection.entities import (
    EntityParseError,
    parse_class,
    parse_constant,
    parse_function,
    parse_include,
    parse_interface,
)
from phpreflect.reflection.file import DEFAULT_MARKER_TERMS, Diagnostic, SourceFile

__all__ = [
    "DEFAULT_MARKER_TERMS",
    "Diagnostic",
    "EntityParseError",
    "SourceFile",
    "build_document",
    "merge_fragment",
    "parse_class",
    "parse_constant",
    "parse_function",
    "parse_include",
    "parse_interface",
]
