"""Completion requests against a remote language-model endpoint."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import requests

from agentflow.embedding import Tool

_TIMEOUT = 60.0

_defaults: dict[str, str] = {"endpoint": "http://localhost:8080/completion"}


class CompletionError(RuntimeError):
    """Raised when the completion endpoint answers with an error status."""


def set_default_completion_endpoint(endpoint: str) -> None:
    """Set the endpoint used when a tool is created without one."""
    _defaults["endpoint"] = endpoint


def default_completion_endpoint() -> str:
    """Return the currently configured default endpoint."""
    return _defaults["endpoint"]


class CompletionTool(Tool):
    """Sends a prompt to an LLM endpoint and returns the completion text."""

    def __init__(self, endpoint: str | None = None, session: requests.Session | None = None) -> None:
        self.endpoint = default_completion_endpoint() if endpoint is None else endpoint
        self.session = session if session is not None else requests.Session()

    def run(self, input: Mapping[str, Any]) -> dict[str, Any]:
        prompt = input.get("prompt")
        if not isinstance(prompt, str) or not prompt:
            raise ValueError("prompt required")
        body: dict[str, Any] = {"prompt": prompt}
        model = input.get("model")
        if isinstance(model, str) and model:
            body["model"] = model
        response = self.session.post(
            self.endpoint,
            json=body,
            headers={"Content-Type": "application/json"},
            timeout=_TIMEOUT,
        )
        with response:
            if response.status_code >= 300:
                raise CompletionError(f"{response.status_code} {response.reason or ''}".strip())
            data = response.json()
        completion = (data or {}).get("completion")
        if completion is None:
            completion = ""
        if not isinstance(completion, str):
            raise ValueError("completion must be a string")
        return {"completion": completion}