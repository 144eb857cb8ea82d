# Copyright 2026 phpreflect Contributors
# SPDX-License-Identifier: Apache-2.0

"""Configuration for phpreflect."""

from phpreflect.config.settings import CONFIG_FILE_NAME, ConfigError, ReflectConfig, load_config

__all__ = [
    "CONFIG_FILE_NAME",
    "ConfigError",
    "ReflectConfig",
    "load_config",
]
