"""Agent that forwards its task input to an HTTP endpoint."""

from __future__ import annotations

import json
import threading
from collections.abc import Mapping

import requests

from agentflow.agents import Agent, Result, Task, TaskCancelled, register

_TIMEOUT = 30.0


class HTTPCallAgent(Agent):
    """Sends the task input as JSON to ``url`` and returns the response body."""

    id_prefix = "http-agent"

    def __init__(
        self,
        method: str = "GET",
        url: str = "",
        headers: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__()
        self.method = method
        self.url = url
        self.headers = dict(headers or {})
        self._session = requests.Session()

    def execute(self, task: Task, cancel: threading.Event | None = None) -> Result:
        if cancel is not None and cancel.is_set():
            return Result(task_id=task.id, error=TaskCancelled("task cancelled"))
        try:
            body = json.dumps(task.input)
            headers = {**self.headers, "Content-Type": "application/json"}
            response = self._session.request(
                self.method, self.url, data=body, headers=headers, timeout=_TIMEOUT
            )
            with response:
                text = response.text
        except (TypeError, ValueError, requests.RequestException) as exc:
            return Result(task_id=task.id, error=exc)
        return Result(task_id=task.id, output=text, successful=True)


register("HTTPCallAgent", lambda: HTTPCallAgent("GET", "", None))