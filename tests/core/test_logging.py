# Copyright 2026 phpreflect Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the structured logging setup."""

import io
import json
import logging

import structlog

from phpreflect.core.logging import configure_logging


class TestConfigureLogging:
    def test_json_output(self) -> None:
        stream = io.StringIO()
        configure_logging(level="INFO", json_format=True, stream=stream)
        structlog.get_logger().info("processed_entity", kind="class", name="Foo")
        data = json.loads(stream.getvalue().strip().splitlines()[-1])
        assert data["event"] == "processed_entity"
        assert data["kind"] == "class"
        assert data["name"] == "Foo"
        assert data["level"] == "info"
        assert "timestamp" in data

    def test_events_below_level_are_dropped(self) -> None:
        stream = io.StringIO()
        configure_logging(level="WARNING", stream=stream)
        structlog.get_logger().debug("tokens_found", count=3)
        assert stream.getvalue() == ""

    def test_console_output(self) -> None:
        stream = io.StringIO()
        configure_logging(level="DEBUG", stream=stream)
        structlog.get_logger().warning("source_transcoded", encoding="latin-1")
        output = stream.getvalue()
        assert "source_transcoded" in output
        assert "encoding=latin-1" in output

    def test_level_is_case_insensitive(self) -> None:
        configure_logging(level="error", stream=io.StringIO())
        assert logging.getLogger().level == logging.ERROR

    def test_reconfiguring_replaces_handler(self) -> None:
        configure_logging(stream=io.StringIO())
        configure_logging(stream=io.StringIO())
        assert len(logging.getLogger().handlers) == 1
