"""Runtime settings loaded from environment variables."""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from dataclasses import dataclass, field

_INTEGER = re.compile(r"[+-]?[0-9]+")


@dataclass(frozen=True)
class VectorStoreConfig:
    """Connection details for a vector database."""

    endpoint: str = ""
    collection: str = ""
    api_key: str = ""
    insecure: bool = False


@dataclass(frozen=True)
class Config:
    """Settings for the pipeline tools; empty values mean "not configured"."""

    vector_store: VectorStoreConfig = field(default_factory=VectorStoreConfig)
    embedding_endpoint: str = ""
    embedding_api_key: str = ""
    rerank_endpoint: str = ""
    rerank_api_key: str = ""
    completion_endpoint: str = ""
    embedding_dim: int = 0
    retrieval_top_k: int = 0


def _parse_int(value: str) -> int:
    """Parse a plain decimal integer, returning 0 when it is not one."""
    if value and _INTEGER.fullmatch(value):
        return int(value)
    return 0


def load_from_env(environ: Mapping[str, str] | None = None) -> Config:
    """Build a Config from environment variables (``os.environ`` by default)."""
    env = os.environ if environ is None else environ
    return Config(
        vector_store=VectorStoreConfig(
            endpoint=env.get("VECTORSTORE_ENDPOINT", ""),
            collection=env.get("VECTORSTORE_COLLECTION", ""),
            api_key=env.get("VECTORSTORE_API_KEY", ""),
            insecure=env.get("VECTORSTORE_INSECURE", "") == "1",
        ),
        embedding_endpoint=env.get("EMBEDDING_ENDPOINT", ""),
        embedding_api_key=env.get("EMBEDDING_API_KEY", ""),
        rerank_endpoint=env.get("RERANK_ENDPOINT", ""),
        rerank_api_key=env.get("RERANK_API_KEY", ""),
        completion_endpoint=env.get("COMPLETION_ENDPOINT", ""),
        embedding_dim=_parse_int(env.get("EMBEDDING_DIM", "")),
        retrieval_top_k=_parse_int(env.get("RETRIEVAL_TOP_K", "")),
    )