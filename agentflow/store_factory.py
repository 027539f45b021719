"""Construction of vector stores from configuration."""

from __future__ import annotations

from agentflow.config import VectorStoreConfig
from agentflow.qdrant import QdrantStore
from agentflow.vectorstore import MemoryStore, VectorStore, set_default_store


def new_from_config(cfg: VectorStoreConfig) -> VectorStore:
    """Return a Qdrant store when an endpoint is set, else an in-memory store."""
    if not cfg.endpoint:
        return MemoryStore()
    return QdrantStore(
        cfg.endpoint,
        cfg.collection,
        api_key=cfg.api_key,
        insecure=cfg.insecure,
    )


def init_default(cfg: VectorStoreConfig) -> None:
    """Install the store built from ``cfg`` as the global default."""
    set_default_store(new_from_config(cfg))