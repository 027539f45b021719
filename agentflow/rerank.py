"""Reranking of retrieved documents by score, optionally from a remote provider."""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import Any

import requests

from agentflow.embedding import Tool

_TIMEOUT = 30.0


class RerankProvider(ABC):
    """Assigns relevance scores to documents for a query."""

    @abstractmethod
    def rerank(self, query: str, docs: Sequence[str]) -> list[float]:
        """Return one score per document text."""


class RerankServiceError(RuntimeError):
    """Raised when a remote rerank service cannot produce scores."""


def _status(response: requests.Response) -> str:
    return f"{response.status_code} {response.reason or ''}".strip()


class RemoteRerankProvider(RerankProvider):
    """Calls an HTTP service accepting ``{"query", "documents"}`` and answering ``{"scores"}``."""

    def __init__(
        self,
        endpoint: str,
        headers: Mapping[str, str] | None = None,
        max_retries: int = 2,
        session: requests.Session | None = None,
    ) -> None:
        self.endpoint = endpoint
        self.headers = dict(headers or {})
        self.max_retries = max_retries
        self.session = session if session is not None else requests.Session()

    def rerank(self, query: str, docs: Sequence[str]) -> list[float]:
        payload = {"query": query, "documents": list(docs)}
        headers = {"Content-Type": "application/json", **self.headers}
        for attempt in range(self.max_retries + 1):
            last = attempt == self.max_retries
            try:
                response = self.session.post(
                    self.endpoint, json=payload, headers=headers, timeout=_TIMEOUT
                )
            except requests.RequestException:
                if last:
                    raise
            else:
                with response:
                    if response.status_code == 200:
                        data = response.json()
                        return [float(x) for x in (data or {}).get("scores") or []]
                    if last:
                        raise RerankServiceError(
                            f"rerank service returned {_status(response)}"
                        )
            time.sleep(0.1 * (1 << attempt))
        raise RerankServiceError("rerank request failed")


_defaults: dict[str, RerankProvider | None] = {"provider": None}


def set_default_rerank_provider(provider: RerankProvider | None) -> None:
    """Set the provider RerankTool uses when it has none of its own."""
    _defaults["provider"] = provider


def default_rerank_provider() -> RerankProvider | None:
    """Return the configured provider, or None."""
    return _defaults["provider"]


def _score(doc: Mapping[str, Any]) -> float:
    value = doc.get("score")
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    return 0.0


class RerankTool(Tool):
    """Orders documents by score, asking a provider for scores when a query is given."""

    def __init__(self, provider: RerankProvider | None = None) -> None:
        self.provider = provider

    def run(self, input: Mapping[str, Any]) -> dict[str, Any]:
        docs = input.get("documents")
        if not isinstance(docs, list):
            raise ValueError("documents must be provided")
        query = input.get("query")
        if not isinstance(query, str):
            query = ""
        if self.provider is None:
            self.provider = default_rerank_provider()
        if self.provider is not None and query:
            texts = [d.get("text") if isinstance(d.get("text"), str) else "" for d in docs]
            try:
                scores = self.provider.rerank(query, texts)
            except Exception:
                scores = None
            if scores is not None and len(scores) == len(docs):
                for doc, score in zip(docs, scores):
                    doc["score"] = score
        return {"reranked": sorted(docs, key=_score, reverse=True)}