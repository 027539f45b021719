"""Vector store interface, an in-memory implementation and the default store."""

from __future__ import annotations

import math
import threading
from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field, replace
from typing import Any


@dataclass
class Document:
    """An item held in a vector store; ``score`` is filled in by queries."""

    id: str
    embedding: list[float] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    score: float = 0.0


@dataclass
class QueryRequest:
    """A similarity search: the query vector, how many hits, and a metadata filter."""

    embedding: list[float]
    top_k: int = 0
    filter: dict[str, Any] = field(default_factory=dict)


class VectorStore(ABC):
    """Operations every vector store supports."""

    @abstractmethod
    def upsert(self, docs: Iterable[Document]) -> None:
        """Add documents, replacing any with the same id."""

    @abstractmethod
    def query(self, request: QueryRequest) -> list[Document]:
        """Return the documents most similar to the request's embedding."""

    @abstractmethod
    def delete(self, ids: Iterable[str]) -> None:
        """Remove the documents with the given ids."""


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine similarity of two vectors; 0 for mismatched lengths or zero vectors."""
    if len(a) != len(b):
        return 0.0
    dot = sum(x * y for x, y in zip(a, b))
    norm_a = sum(x * x for x in a)
    norm_b = sum(y * y for y in b)
    if norm_a == 0 or norm_b == 0:
        return 0.0
    return dot / (math.sqrt(norm_a) * math.sqrt(norm_b))


def _same_value(a: Any, b: Any) -> bool:
    if isinstance(a, bool) or isinstance(b, bool):
        return isinstance(a, bool) and isinstance(b, bool) and a == b
    return a == b


def matches_filter(meta: Mapping[str, Any] | None, filter: Mapping[str, Any] | None) -> bool:
    """True when every filter key has an equal value in ``meta``."""
    if not filter:
        return True
    meta = meta or {}
    return all(_same_value(meta.get(key), value) for key, value in filter.items())


class MemoryStore(VectorStore):
    """A thread-safe vector store kept in process memory."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._docs: list[Document] = []

    def upsert(self, docs: Iterable[Document]) -> None:
        with self._lock:
            for doc in docs:
                for index, existing in enumerate(self._docs):
                    if existing.id == doc.id:
                        self._docs[index] = doc
                        break
                else:
                    self._docs.append(doc)

    def query(self, request: QueryRequest) -> list[Document]:
        if request.top_k < 0:
            raise ValueError("top_k must not be negative")
        with self._lock:
            scored = [
                (cosine_similarity(doc.embedding, request.embedding), doc)
                for doc in self._docs
                if matches_filter(doc.metadata, request.filter)
            ]
        scored.sort(key=lambda pair: pair[0], reverse=True)
        return [replace(doc, score=score) for score, doc in scored[: request.top_k]]

    def delete(self, ids: Iterable[str]) -> None:
        doomed = set(ids)
        with self._lock:
            self._docs = [doc for doc in self._docs if doc.id not in doomed]


_defaults: dict[str, VectorStore | None] = {"store": None}


def set_default_store(store: VectorStore | None) -> None:
    """Set the store used when none is given explicitly."""
    _defaults["store"] = store


def default_store() -> VectorStore | None:
    """Return the globally configured store, if any."""
    return _defaults["store"]