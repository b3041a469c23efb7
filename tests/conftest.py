from __future__ import annotations

import pytest
from loguru import logger

from deferer.utils import DEBUG_DEFERS


@pytest.fixture
def log_messages():
    """Collect deferer log messages emitted during a test."""
    messages: list[str] = []
    logger.enable("deferer")
    handler_id = logger.add(lambda message: messages.append(message.record["message"]), level="DEBUG")
    try:
        yield messages
    finally:
        logger.remove(handler_id)
        if not DEBUG_DEFERS:
            logger.disable("deferer")
