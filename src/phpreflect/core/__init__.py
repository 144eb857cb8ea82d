# Copyright 2026 phpreflect Contributors
# SPDX-License-Identifier: Apache-2.0

"""Cross-cutting infrastructure."""
