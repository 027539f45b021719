"""Vector store backed by a Qdrant server over its HTTP API."""

from __future__ import annotations

from collections.abc import Iterable

import requests

from agentflow.vectorstore import Document, QueryRequest, VectorStore

_TIMEOUT = 30.0


class QdrantError(RuntimeError):
    """Raised when the Qdrant server answers with an error status."""


def _status(response: requests.Response) -> str:
    return f"{response.status_code} {response.reason or ''}".strip()


class QdrantStore(VectorStore):
    """A VectorStore talking to one Qdrant collection."""

    def __init__(
        self,
        endpoint: str,
        collection: str,
        api_key: str = "",
        insecure: bool = False,
        session: requests.Session | None = None,
    ) -> None:
        self.endpoint = endpoint
        self.collection = collection
        self.api_key = api_key
        self.insecure = insecure
        if session is None:
            session = requests.Session()
            if insecure:
                session.verify = False
        self.session = session

    def _url(self, suffix: str) -> str:
        return f"{self.endpoint}/collections/{self.collection}/{suffix}"

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["api-key"] = self.api_key
        return headers

    def upsert(self, docs: Iterable[Document]) -> None:
        points = [
            {"id": doc.id, "vector": doc.embedding, "payload": doc.metadata} for doc in docs
        ]
        response = self.session.put(
            self._url("points"),
            params={"wait": "true"},
            json={"points": points},
            headers=self._headers(),
            timeout=_TIMEOUT,
        )
        with response:
            if response.status_code >= 300:
                raise QdrantError(f"qdrant upsert error: {_status(response)}")

    def query(self, request: QueryRequest) -> list[Document]:
        body: dict = {"vector": request.embedding, "limit": request.top_k}
        if request.filter:
            body["filter"] = request.filter
        response = self.session.post(
            self._url("points/search"),
            json=body,
            headers=self._headers(),
            timeout=_TIMEOUT,
        )
        with response:
            if response.status_code != 200:
                raise QdrantError(f"qdrant search error: {_status(response)}")
            data = response.json()
        docs = []
        for point in data.get("result") or []:
            point_id = point.get("id")
            if point_id is None:
                point_id = ""
            elif not isinstance(point_id, str):
                raise QdrantError(f"qdrant search error: unexpected point id {point_id!r}")
            docs.append(
                Document(
                    id=point_id,
                    embedding=[],
                    metadata=point.get("payload") or {},
                    score=float(point.get("score") or 0.0),
                )
            )
        return docs

    def delete(self, ids: Iterable[str]) -> None:
        response = self.session.post(
            self._url("points/delete"),
            params={"wait": "true"},
            json={"points": list(ids)},
            headers=self._headers(),
            timeout=_TIMEOUT,
        )
        with response:
            if response.status_code >= 300:
                raise QdrantError(f"qdrant delete error: {_status(response)}")