"""Agent contract, the agent registry and the echo agent."""

from __future__ import annotations

import logging
import threading
import time
import uuid
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)


@dataclass
class Task:
    """A piece of work for an agent."""

    id: str = ""
    description: str = ""
    input: dict[str, Any] = field(default_factory=dict)


@dataclass
class Result:
    """The outcome of a task; ``error`` holds the failure when ``successful`` is false."""

    task_id: str = ""
    output: Any = None
    error: BaseException | None = None
    successful: bool = False


class TaskCancelled(Exception):
    """The task was cancelled before it finished."""


class UnknownAgentError(LookupError):
    """No agent is registered under the requested name."""


class Agent(ABC):
    """An autonomous worker that executes tasks."""

    id_prefix = "agent"

    def __init__(self) -> None:
        self.id = f"{self.id_prefix}-{uuid.uuid4()}"

    @abstractmethod
    def execute(self, task: Task, cancel: threading.Event | None = None) -> Result:
        """Perform ``task``; ``cancel``, when set, asks the agent to stop early."""


_registry: dict[str, Callable[[], Agent]] = {}
_registry_lock = threading.Lock()


def register(name: str, factory: Callable[[], Agent]) -> None:
    """Make an agent constructor available under ``name``."""
    with _registry_lock:
        _registry[name] = factory


def create(name: str) -> Agent:
    """Create a new agent of the registered type ``name``."""
    with _registry_lock:
        factory = _registry.get(name)
    if factory is None:
        raise UnknownAgentError(f"unknown agent type '{name}'")
    return factory()


def _delay_seconds(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 1.0
    return max(0.0, float(value)) / 1000.0


class EchoAgent(Agent):
    """Waits for ``delay_ms`` (default one second) and echoes its input back."""

    id_prefix = "echo-agent"

    def execute(self, task: Task, cancel: threading.Event | None = None) -> Result:
        logger.info("[%s] Received task: %s - Input: %s", self.id, task.description, task.input)
        delay = _delay_seconds(task.input.get("delay_ms"))
        logger.info("[%s] Simulating work for %.3fs", self.id, delay)

        cancelled = cancel.wait(delay) if cancel is not None else (time.sleep(delay) or False)
        if cancelled:
            logger.info("[%s] Task execution cancelled: %s", self.id, task.description)
            return Result(task_id=task.id, error=TaskCancelled("task cancelled"))

        output = {
            "message": f"Echoing from {self.id}: Processed task '{task.description}'",
            "processed_input": {key: f"Echoed: {value}" for key, value in task.input.items()},
        }
        logger.info("[%s] Finished task processing: %s", self.id, task.description)
        return Result(task_id=task.id, output=output, successful=True)


register("EchoAgent", EchoAgent)