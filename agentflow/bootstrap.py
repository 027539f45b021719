"""Process start-up: configuration and global defaults from the environment."""

from __future__ import annotations

from collections.abc import Mapping

from agentflow.config import Config, load_from_env
from agentflow.defaults import init_defaults
from agentflow.store_factory import init_default


def init_from_env(environ: Mapping[str, str] | None = None) -> Config:
    """Load configuration, install the default store and providers, and return it."""
    cfg = load_from_env(environ)
    init_default(cfg.vector_store)
    init_defaults(cfg)
    return cfg