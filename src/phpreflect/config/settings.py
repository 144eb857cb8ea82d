# Copyright 2026 phpreflect Contributors
# SPDX-License-Identifier: Apache-2.0

"""Data model and YAML parser for the phpreflect configuration file."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml

from phpreflect.reflection.file import DEFAULT_MARKER_TERMS
from phpreflect.source.loader import DEFAULT_FALLBACK_ENCODING

# ###############
# Public Interface
# ###############

CONFIG_FILE_NAME = ".phpreflect.yaml"


class ConfigError(Exception):
    """Raised when a configuration file is invalid or cannot be loaded."""


@dataclass
class ReflectConfig:
    """Settings applied when reflecting files.

    Attributes:
        markers: Marker keywords collected from ``//`` comments.
        validate: Run ``php -l`` before parsing each file.
        php_binary: PHP executable used for validation.
        fallback_encoding: Codec for files that are not valid UTF-8.
        log_level: Minimum level of emitted log events.
    """

    markers: list[str] = field(default_factory=lambda: list(DEFAULT_MARKER_TERMS))
    validate: bool = False
    php_binary: str = "php"
    fallback_encoding: str = DEFAULT_FALLBACK_ENCODING
    log_level: str = "WARNING"


def load_config(path: Path) -> ReflectConfig:
    """Load and parse a phpreflect configuration file.

    Args:
        path: Path to the ``.phpreflect.yaml`` file.

    Returns:
        A ReflectConfig populated from the file; absent keys keep their defaults.

    Raises:
        ConfigError: If the file cannot be read or the configuration is invalid.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ConfigError(f"Config file not found: {path}") from None
    except OSError as exc:
        raise ConfigError(f"Cannot read config file: {exc}") from exc

    return _parse_config(text, source_label=str(path))


# ################
# Implementation
# ################

_KNOWN_KEYS = frozenset({"markers", "validate", "php-binary", "fallback-encoding", "log-level"})

_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


def _parse_config(text: str, source_label: str = "<string>") -> ReflectConfig:
    """Parse configuration YAML text into a ReflectConfig.

    An empty document yields the default configuration.

    Raises:
        ConfigError: If the YAML is invalid, not a mapping, or holds unknown
            keys or values of the wrong type.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {source_label}: {exc}") from exc

    if data is None:
        return ReflectConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"{source_label}: configuration must be a YAML mapping")

    unknown = sorted(set(data) - _KNOWN_KEYS)
    if unknown:
        raise ConfigError(f"{source_label}: unknown configuration key(s): {', '.join(map(str, unknown))}")

    config = ReflectConfig()
    if "markers" in data:
        config.markers = _require_string_list(data, "markers", source_label)
    if "validate" in data:
        value = data["validate"]
        if not isinstance(value, bool):
            raise ConfigError(f"{source_label}: 'validate' must be a boolean")
        config.validate = value
    if "php-binary" in data:
        config.php_binary = _require_string(data, "php-binary", source_label)
    if "fallback-encoding" in data:
        config.fallback_encoding = _require_string(data, "fallback-encoding", source_label)
    if "log-level" in data:
        level = _require_string(data, "log-level", source_label).upper()
        if level not in _LOG_LEVELS:
            raise ConfigError(f"{source_label}: 'log-level' must be one of {', '.join(sorted(_LOG_LEVELS))}")
        config.log_level = level
    return config


def _require_string(mapping: dict[str, object], key: str, source_label: str) -> str:
    value = mapping[key]
    if not isinstance(value, str):
        raise ConfigError(f"{source_label}: '{key}' must be a string")
    return value


def _require_string_list(mapping: dict[str, object], key: str, source_label: str) -> list[str]:
    value = mapping[key]
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ConfigError(f"{source_label}: '{key}' must be a list of strings")
    return list(value)
