import pytest

from agentflow.config import VectorStoreConfig
from agentflow.qdrant import QdrantStore
from agentflow.store_factory import init_default, new_from_config
from agentflow.vectorstore import (
    Document,
    MemoryStore,
    QueryRequest,
    default_store,
    set_default_store,
)


@pytest.fixture
def restore_default():
    previous = default_store()
    yield
    set_default_store(previous)


def test_empty_endpoint_gives_memory_store():
    store = new_from_config(VectorStoreConfig(collection="ignored"))
    assert isinstance(store, MemoryStore)
    store.upsert([Document(id="1", embedding=[1.0, 0.0])])
    hits = store.query(QueryRequest(embedding=[1.0, 0.0], top_k=1))
    assert [doc.id for doc in hits] == ["1"]
    assert hits[0].score == pytest.approx(1.0)


def test_endpoint_gives_qdrant_store_with_settings():
    cfg = VectorStoreConfig(
        endpoint="http://localhost:6333",
        collection="docs",
        api_key="placeholder",
        insecure=True,
    )
    store = new_from_config(cfg)
    assert isinstance(store, QdrantStore)
    assert store.endpoint == "http://localhost:6333"
    assert store.collection == "docs"
    assert store.api_key == "placeholder"
    assert store.insecure is True
    assert store.session.verify is False


def test_init_default_installs_store(restore_default):
    set_default_store(None)
    init_default(VectorStoreConfig())
    assert isinstance(default_store(), MemoryStore)

    init_default(VectorStoreConfig(endpoint="http://localhost:6333", collection="c1"))
    installed = default_store()
    assert isinstance(installed, QdrantStore)
    assert installed.collection == "c1"