"""Embedding and storing documents in a vector store."""

from __future__ import annotations

import uuid
from collections.abc import Callable, Mapping
from typing import Any

from agentflow.embedding import EmbeddingTool, Tool
from agentflow.vectorstore import Document, VectorStore, default_store


def _new_id() -> str:
    return str(uuid.uuid4())


class IngestTool(Tool):
    """Embeds ``text`` and stores it under ``id`` (generated when absent) with ``metadata``."""

    def __init__(
        self,
        store: VectorStore | None = None,
        embedder: EmbeddingTool | None = None,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        self.store = store
        self.embedder = embedder if embedder is not None else EmbeddingTool()
        self.id_factory = id_factory if id_factory is not None else _new_id

    def run(self, input: Mapping[str, Any]) -> dict[str, Any]:
        text = input.get("text")
        if not isinstance(text, str) or not text:
            raise ValueError("text field required")
        doc_id = input.get("id")
        if not isinstance(doc_id, str):
            doc_id = ""
        metadata = input.get("metadata")
        metadata = dict(metadata) if isinstance(metadata, Mapping) else {}

        if self.store is None:
            self.store = default_store()
        if self.store is None:
            raise RuntimeError("no vector store configured")

        embedding = self.embedder.run({"text": text})["embedding"]
        doc = Document(id=doc_id or self.id_factory(), embedding=embedding, metadata=metadata)
        self.store.upsert([doc])
        return {"id": doc.id}