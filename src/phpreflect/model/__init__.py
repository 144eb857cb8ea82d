# Copyright 2026 phpreflect Contributors
# SPDX-License-Identifier: Apache-2.0

"""Symbol model for reflected PHP files (entities, docblocks, markers)."""

from phpreflect.model.docblock import DocBlock, DocBlockError, DocBlockTag, parse_docblock
from phpreflect.model.entities import (
    DEFAULT_NAMESPACE,
    Argument,
    ClassDef,
    ConstantDef,
    FunctionDef,
    IncludeDef,
    InterfaceDef,
    Marker,
    MethodDef,
    PropertyDef,
)

__all__ = [
    # Documentation comments
    "DocBlock",
    "DocBlockError",
    "DocBlockTag",
    "parse_docblock",
    # Entities
    "DEFAULT_NAMESPACE",
    "Argument",
    "ClassDef",
    "ConstantDef",
    "FunctionDef",
    "IncludeDef",
    "InterfaceDef",
    "Marker",
    "MethodDef",
    "PropertyDef",
]
