import math

import pytest

from agentflow.vectorstore import (
    Document,
    MemoryStore,
    QueryRequest,
    cosine_similarity,
    default_store,
    matches_filter,
    set_default_store,
)


@pytest.fixture
def restore_default():
    previous = default_store()
    yield
    set_default_store(previous)


def test_memory_store(restore_default):
    store = MemoryStore()
    set_default_store(store)
    assert default_store() is store
    store.upsert([Document(id="1", embedding=[1.0, 0.0], metadata={"text": "a"})])

    results = store.query(QueryRequest(embedding=[1.0, 0.0], top_k=1))
    assert len(results) == 1
    assert results[0].id == "1"
    assert results[0].score != 0
    assert results[0].score == pytest.approx(1.0)

    store.delete(["1"])
    assert store.query(QueryRequest(embedding=[1.0, 0.0], top_k=1)) == []


def test_upsert_replaces_by_id():
    store = MemoryStore()
    store.upsert([Document(id="x", embedding=[1.0, 0.0], metadata={"v": 1})])
    store.upsert([Document(id="x", embedding=[0.0, 1.0], metadata={"v": 2})])
    results = store.query(QueryRequest(embedding=[0.0, 1.0], top_k=10))
    assert [d.id for d in results] == ["x"]
    assert results[0].metadata == {"v": 2}


def test_query_orders_by_similarity_and_limits():
    store = MemoryStore()
    store.upsert(
        [
            Document(id="far", embedding=[0.0, 1.0]),
            Document(id="near", embedding=[1.0, 0.0]),
            Document(id="mid", embedding=[1.0, 1.0]),
        ]
    )
    results = store.query(QueryRequest(embedding=[1.0, 0.0], top_k=2))
    assert [d.id for d in results] == ["near", "mid"]
    assert results[0].score >= results[1].score
    everything = store.query(QueryRequest(embedding=[1.0, 0.0], top_k=50))
    assert [d.id for d in everything] == ["near", "mid", "far"]


def test_query_does_not_mutate_stored_score():
    store = MemoryStore()
    doc = Document(id="a", embedding=[1.0])
    store.upsert([doc])
    store.query(QueryRequest(embedding=[1.0], top_k=1))
    assert doc.score == 0.0


def test_query_applies_filter():
    store = MemoryStore()
    store.upsert(
        [
            Document(id="a", embedding=[1.0, 0.0], metadata={"tag": "x"}),
            Document(id="b", embedding=[1.0, 0.0], metadata={"tag": "y"}),
        ]
    )
    results = store.query(QueryRequest(embedding=[1.0, 0.0], top_k=5, filter={"tag": "y"}))
    assert [d.id for d in results] == ["b"]


def test_zero_top_k_returns_nothing_and_negative_raises():
    store = MemoryStore()
    store.upsert([Document(id="a", embedding=[1.0])])
    assert store.query(QueryRequest(embedding=[1.0], top_k=0)) == []
    with pytest.raises(ValueError):
        store.query(QueryRequest(embedding=[1.0], top_k=-1))


def test_cosine_similarity_cases():
    assert cosine_similarity([1.0, 0.0], [1.0, 0.0]) == pytest.approx(1.0)
    assert cosine_similarity([1.0, 0.0], [0.0, 1.0]) == 0.0
    assert cosine_similarity([1.0, 1.0], [1.0, 0.0]) == pytest.approx(1 / math.sqrt(2))
    assert cosine_similarity([1.0], [1.0, 0.0]) == 0.0
    assert cosine_similarity([0.0, 0.0], [1.0, 0.0]) == 0.0


def test_matches_filter_cases():
    assert matches_filter({"a": 1}, {}) is True
    assert matches_filter(None, None) is True
    assert matches_filter({"a": 1, "b": 2}, {"a": 1}) is True
    assert matches_filter({"a": 1}, {"a": 2}) is False
    assert matches_filter({}, {"a": 1}) is False
    assert matches_filter({}, {"a": None}) is True
    assert matches_filter({"a": True}, {"a": 1}) is False