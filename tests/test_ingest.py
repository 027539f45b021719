import pytest

from agentflow.embedding import (
    HashEmbeddingProvider,
    basic_hash_embed,
    default_embedding_provider,
    set_default_embedding_provider,
)
from agentflow.ingest import IngestTool
from agentflow.vectorstore import (
    MemoryStore,
    QueryRequest,
    default_store,
    set_default_store,
)


@pytest.fixture(autouse=True)
def _restore_globals():
    old_store = default_store()
    old_provider = default_embedding_provider()
    yield
    set_default_store(old_store)
    set_default_embedding_provider(old_provider)


def test_ingest_tool_generated_id():
    store = MemoryStore()
    set_default_store(store)
    set_default_embedding_provider(HashEmbeddingProvider(8))

    tool = IngestTool(id_factory=lambda: "doc1")
    out = tool.run({"text": "hello"})
    assert out["id"] == "doc1"

    docs = store.query(QueryRequest(embedding=basic_hash_embed("hello", 8), top_k=1))
    assert len(docs) == 1
    assert docs[0].id == "doc1"


def test_ingest_explicit_id_and_metadata():
    store = MemoryStore()
    set_default_embedding_provider(HashEmbeddingProvider(8))
    tool = IngestTool(store=store, id_factory=lambda: "unused")
    out = tool.run({"text": "hello world", "id": "mine", "metadata": {"text": "hello world"}})
    assert out == {"id": "mine"}
    docs = store.query(QueryRequest(embedding=basic_hash_embed("hello world", 8), top_k=5))
    assert [d.id for d in docs] == ["mine"]
    assert docs[0].metadata == {"text": "hello world"}
    assert docs[0].embedding == basic_hash_embed("hello world", 8)


def test_ingest_default_ids_are_unique():
    store = MemoryStore()
    tool = IngestTool(store=store)
    first = tool.run({"text": "a"})["id"]
    second = tool.run({"text": "b"})["id"]
    assert first and second and first != second


def test_ingest_requires_text():
    tool = IngestTool(store=MemoryStore())
    with pytest.raises(ValueError, match="text field required"):
        tool.run({})
    with pytest.raises(ValueError, match="text field required"):
        tool.run({"text": ""})