# Copyright 2026 phpreflect Contributors
# SPDX-License-Identifier: Apache-2.0

"""Reflection front end for PHP documentation generators."""

from phpreflect.reflection.file import SourceFile

__all__ = ["SourceFile"]
