import json

import pytest
import requests
import responses

from agentflow.qdrant import QdrantError, QdrantStore
from agentflow.vectorstore import Document, QueryRequest

BASE = "http://localhost:6333"


@pytest.fixture
def rsps():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as mock:
        yield mock


def test_new_qdrant_store_with_http_client():
    session = requests.Session()
    store = QdrantStore(BASE, "c1", session=session)
    assert store.session is session


def test_insecure_disables_verification():
    assert QdrantStore(BASE, "c1", insecure=True).session.verify is False
    assert QdrantStore(BASE, "c1").session.verify is True


def test_upsert_sends_points(rsps):
    rsps.add(responses.PUT, f"{BASE}/collections/c1/points", json={"status": "ok"})
    store = QdrantStore(BASE, "c1", api_key="placeholder")
    store.upsert([Document(id="1", embedding=[1.0, 2.0], metadata={"text": "a"})])

    request = rsps.calls[0].request
    assert "wait=true" in request.url
    assert request.headers["api-key"] == "placeholder"
    assert request.headers["Content-Type"] == "application/json"
    assert json.loads(request.body) == {
        "points": [{"id": "1", "vector": [1.0, 2.0], "payload": {"text": "a"}}]
    }


def test_upsert_without_api_key_sends_no_header(rsps):
    rsps.add(responses.PUT, f"{BASE}/collections/c1/points", json={})
    QdrantStore(BASE, "c1").upsert([Document(id="1")])
    assert "api-key" not in rsps.calls[0].request.headers


def test_upsert_error_status_raises(rsps):
    rsps.add(responses.PUT, f"{BASE}/collections/c1/points", status=500)
    with pytest.raises(QdrantError, match="qdrant upsert error: 500"):
        QdrantStore(BASE, "c1").upsert([Document(id="1")])


def test_query_parses_results(rsps):
    rsps.add(
        responses.POST,
        f"{BASE}/collections/c1/points/search",
        json={"result": [{"id": "a", "score": 0.75, "payload": {"text": "hi"}}]},
    )
    store = QdrantStore(BASE, "c1")
    docs = store.query(QueryRequest(embedding=[1.0], top_k=3, filter={"must": []}))

    assert docs == [Document(id="a", embedding=[], metadata={"text": "hi"}, score=0.75)]
    body = json.loads(rsps.calls[0].request.body)
    assert body == {"vector": [1.0], "limit": 3, "filter": {"must": []}}


def test_query_omits_empty_filter(rsps):
    rsps.add(responses.POST, f"{BASE}/collections/c1/points/search", json={"result": []})
    assert QdrantStore(BASE, "c1").query(QueryRequest(embedding=[1.0], top_k=2)) == []
    assert "filter" not in json.loads(rsps.calls[0].request.body)


def test_query_non_200_raises(rsps):
    rsps.add(responses.POST, f"{BASE}/collections/c1/points/search", status=201, json={})
    with pytest.raises(QdrantError, match="qdrant search error: 201"):
        QdrantStore(BASE, "c1").query(QueryRequest(embedding=[1.0], top_k=1))


def test_delete_sends_ids_and_reports_errors(rsps):
    rsps.add(responses.POST, f"{BASE}/collections/c1/points/delete", json={})
    QdrantStore(BASE, "c1").delete(["a", "b"])
    request = rsps.calls[0].request
    assert "wait=true" in request.url
    assert json.loads(request.body) == {"points": ["a", "b"]}

    rsps.replace(responses.POST, f"{BASE}/collections/c1/points/delete", status=404)
    with pytest.raises(QdrantError, match="qdrant delete error: 404"):
        QdrantStore(BASE, "c1").delete(["a"])