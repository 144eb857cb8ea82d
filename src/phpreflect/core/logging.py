# Copyright 2026 phpreflect Contributors
# SPDX-License-Identifier: Apache-2.0

"""Structured logging setup.

Library modules log through ``structlog.get_logger()``; applications call
:func:`configure_logging` once to route those events through stdlib logging
to stderr, rendered for the console or as JSON lines.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

import structlog

# ###############
# Public Interface
# ###############


def configure_logging(*, level: str = "WARNING", json_format: bool = False, stream: TextIO | None = None) -> None:
    """Configure structlog and the root stdlib logger.

    Args:
        level: Minimum level name (``DEBUG``, ``INFO``, ``WARNING``, ``ERROR``).
        json_format: Render events as JSON lines instead of console text.
        stream: Destination stream, stderr by default.
    """
    default_level = _LEVEL_MAP.get(level.upper(), logging.WARNING)

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", key="timestamp"),
    ]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(default_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    output = stream if stream is not None else sys.stderr
    if json_format:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=output.isatty(), pad_event_to=0, pad_level=False)

    handler = logging.StreamHandler(output)
    handler.setLevel(default_level)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=shared_processors))

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(default_level)
    root_logger.addHandler(handler)


# ################
# Implementation
# ################

_LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}
