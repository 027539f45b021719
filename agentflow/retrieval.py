"""Nearest-neighbour retrieval of documents from a vector store."""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

from agentflow.embedding import Tool
from agentflow.vectorstore import QueryRequest, VectorStore, default_store

_default_top_k = 5


def set_default_top_k(k: int) -> None:
    """Set the default number of documents returned; non-positive values are ignored."""
    global _default_top_k
    if k > 0:
        _default_top_k = k


def default_top_k() -> int:
    """Return the currently configured default top K."""
    return _default_top_k


def _is_vector(value: Any) -> bool:
    return (
        isinstance(value, (list, tuple))
        and len(value) > 0
        and all(isinstance(x, (int, float)) and not isinstance(x, bool) for x in value)
    )


class RetrievalTool(Tool):
    """Retrieves the documents nearest to an ``embedding`` input."""

    def __init__(self, store: VectorStore | None = None, top_k: int = 0) -> None:
        self.store = store
        self.top_k = top_k if top_k > 0 else default_top_k()

    def _apply_top_k(self, value: Any) -> None:
        if isinstance(value, bool):
            return
        if isinstance(value, int) and value > 0:
            self.top_k = value
        elif isinstance(value, float) and math.isfinite(value) and int(value) > 0:
            self.top_k = int(value)

    def run(self, input: Mapping[str, Any]) -> dict[str, Any]:
        embedding = input.get("embedding")
        if not _is_vector(embedding):
            raise ValueError("embedding required")
        self._apply_top_k(input.get("top_k"))
        if self.store is None:
            self.store = default_store()
        if self.store is None:
            raise RuntimeError("no vector store configured")
        filter_value = input.get("filter")
        request = QueryRequest(
            embedding=[float(x) for x in embedding],
            top_k=self.top_k,
            filter=dict(filter_value) if isinstance(filter_value, Mapping) else {},
        )
        documents = [
            {"id": doc.id, "metadata": doc.metadata, "score": doc.score}
            for doc in self.store.query(request)
        ]
        return {"documents": documents}