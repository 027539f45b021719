"""Text embeddings: the tool interface, local hash embeddings and a remote provider."""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import requests

_TIMEOUT = 30.0
_FNV_OFFSET = 0x811C9DC5
_FNV_PRIME = 0x01000193


class Tool(ABC):
    """An executable piece of functionality the orchestrator can call."""

    @abstractmethod
    def run(self, input: Mapping[str, Any]) -> dict[str, Any]:
        """Perform the tool's work on ``input`` and return its output."""


class EmbeddingProvider(ABC):
    """Converts text into a vector."""

    @abstractmethod
    def embed(self, text: str) -> list[float]:
        """Return the embedding of ``text``."""


class EmbeddingServiceError(RuntimeError):
    """Raised when a remote embedding service cannot produce an embedding."""


def _fnv1a_32(data: bytes) -> int:
    value = _FNV_OFFSET
    for byte in data:
        value ^= byte
        value = (value * _FNV_PRIME) & 0xFFFFFFFF
    return value


def basic_hash_embed(text: str, dim: int) -> list[float]:
    """Deterministic bag-of-words embedding using FNV-1a hashes of lower-cased words."""
    if dim < 0:
        raise ValueError("dim must not be negative")
    words = text.lower().split()
    if words and dim == 0:
        raise ValueError("dim must be positive")
    vector = [0.0] * dim
    for word in words:
        vector[_fnv1a_32(word.encode("utf-8")) % dim] += 1
    return vector


@dataclass(frozen=True)
class HashEmbeddingProvider(EmbeddingProvider):
    """Local provider built on :func:`basic_hash_embed`, for tests and development."""

    dim: int

    def embed(self, text: str) -> list[float]:
        return basic_hash_embed(text, self.dim)


def _status(response: requests.Response) -> str:
    return f"{response.status_code} {response.reason or ''}".strip()


class RemoteEmbeddingProvider(EmbeddingProvider):
    """Calls an HTTP service accepting ``{"text": ...}`` and answering ``{"embedding": [...]}``."""

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

    def embed(self, text: str) -> list[float]:
        headers = {"Content-Type": "application/json", **self.headers}
        for attempt in range(self.max_retries + 1):
            last = attempt == self.max_retries
            try:
                response = self.session.post(
                    self.endpoint, json={"text": text}, headers=headers, timeout=_TIMEOUT
                )
            except requests.RequestException:
                if last:
                    raise
            else:
                with response:
                    if response.status_code == 200:
                        data = response.json()
                        return [float(x) for x in (data or {}).get("embedding") or []]
                    if last:
                        raise EmbeddingServiceError(
                            f"embedding service returned {_status(response)}"
                        )
            time.sleep(0.1 * (1 << attempt))
        raise EmbeddingServiceError("embedding request failed")


_defaults: dict[str, EmbeddingProvider | None] = {"provider": None}


def set_default_embedding_provider(provider: EmbeddingProvider | None) -> None:
    """Set the provider used when a tool has none of its own."""
    _defaults["provider"] = provider


def default_embedding_provider() -> EmbeddingProvider:
    """Return the configured provider, falling back to a 128-dimension hash provider."""
    provider = _defaults["provider"]
    if provider is None:
        provider = HashEmbeddingProvider(128)
        _defaults["provider"] = provider
    return provider


class EmbeddingTool(Tool):
    """Produces an embedding for the ``text`` input using a provider."""

    def __init__(self, provider: EmbeddingProvider | None = None) -> None:
        self.provider = provider

    def run(self, input: Mapping[str, Any]) -> dict[str, Any]:
        text = input.get("text")
        if not isinstance(text, str) or not text:
            raise ValueError("text field required")
        if self.provider is None:
            self.provider = default_embedding_provider()
        return {"embedding": self.provider.embed(text)}


def hash_embedding_tool(dim: int) -> EmbeddingTool:
    """An EmbeddingTool backed by a hash provider of the given dimension."""
    return EmbeddingTool(HashEmbeddingProvider(dim))