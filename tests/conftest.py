# Copyright 2026 phpreflect Contributors
# SPDX-License-Identifier: Apache-2.0

"""Shared fixtures for the phpreflect test suite."""

import logging
from collections.abc import Generator

import pytest
import structlog


@pytest.fixture(autouse=True)
def reset_logging() -> Generator[None, None, None]:
    """Reset structlog and stdlib logging state between tests."""
    structlog.reset_defaults()
    logging.getLogger().handlers.clear()
    yield
    structlog.reset_defaults()
    logging.getLogger().handlers.clear()
