"""Shared fixtures for reentry tests.

The dispatcher is an external collaborator; ``QueueDispatcher`` is the smallest
thing that behaves like one: it runs posted callbacks until its queue is empty,
and a callback may pump it again reentrantly.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Callable, Iterator
from typing import Any

import pytest
from loguru import logger

from reentry import DeliveryConfig, DeliveryManager


class QueueDispatcher:
    def __init__(self) -> None:
        self.queue: deque[Callable[[], Any]] = deque()
        self.runs = 0

    def post(self, callback: Callable[[], Any]) -> None:
        self.queue.append(callback)

    def run_pending(self) -> int:
        self.runs += 1
        ran = 0
        while self.queue:
            callback = self.queue.popleft()
            callback()
            ran += 1
        return ran


@pytest.fixture
def manager() -> DeliveryManager:
    return DeliveryManager(DeliveryConfig(strict=True))


@pytest.fixture
def lenient_manager() -> DeliveryManager:
    return DeliveryManager(DeliveryConfig(strict=False))


@pytest.fixture
def dispatcher() -> QueueDispatcher:
    return QueueDispatcher()


@pytest.fixture
def log_messages() -> Iterator[list[str]]:
    messages: list[str] = []
    handler_id = logger.add(messages.append, level="DEBUG", format="{level} {message}")
    yield messages
    logger.remove(handler_id)
