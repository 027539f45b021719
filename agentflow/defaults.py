"""Installing global tool providers from configuration."""

from __future__ import annotations

from agentflow.completion import set_default_completion_endpoint
from agentflow.config import Config
from agentflow.embedding import (
    HashEmbeddingProvider,
    RemoteEmbeddingProvider,
    set_default_embedding_provider,
)
from agentflow.rerank import RemoteRerankProvider, set_default_rerank_provider
from agentflow.retrieval import set_default_top_k


def _auth_headers(api_key: str) -> dict[str, str]:
    return {"Authorization": api_key} if api_key else {}


def init_defaults(cfg: Config) -> None:
    """Configure global providers; empty settings leave the built-in ones in place."""
    if cfg.embedding_endpoint:
        set_default_embedding_provider(
            RemoteEmbeddingProvider(
                cfg.embedding_endpoint, headers=_auth_headers(cfg.embedding_api_key)
            )
        )
    elif cfg.embedding_dim > 0:
        set_default_embedding_provider(HashEmbeddingProvider(cfg.embedding_dim))

    if cfg.rerank_endpoint:
        set_default_rerank_provider(
            RemoteRerankProvider(cfg.rerank_endpoint, headers=_auth_headers(cfg.rerank_api_key))
        )
    if cfg.completion_endpoint:
        set_default_completion_endpoint(cfg.completion_endpoint)
    if cfg.retrieval_top_k > 0:
        set_default_top_k(cfg.retrieval_top_k)