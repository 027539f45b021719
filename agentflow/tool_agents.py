"""Agents that delegate their work to embedding, completion, ingest, rerank and retrieval tools."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Any

from agentflow.agents import Agent, Result, Task, TaskCancelled, register
from agentflow.completion import CompletionTool, default_completion_endpoint
from agentflow.embedding import EmbeddingTool, default_embedding_provider
from agentflow.ingest import IngestTool
from agentflow.rerank import RerankTool, default_rerank_provider
from agentflow.retrieval import RetrievalTool
from agentflow.vectorstore import Document, VectorStore, default_store

logger = logging.getLogger(__name__)


def _run(task: Task, cancel: threading.Event | None, work: Callable[[], Any]) -> Result:
    if cancel is not None and cancel.is_set():
        return Result(task_id=task.id, error=TaskCancelled("task cancelled"))
    try:
        output = work()
    except Exception as exc:
        return Result(task_id=task.id, error=exc)
    return Result(task_id=task.id, output=output, successful=True)


class EmbeddingAgent(Agent):
    """Embeds ``text`` and stores the vector under the task id in a vector store."""

    id_prefix = "embedding-agent"

    def __init__(self, store: VectorStore | None = None, tool: EmbeddingTool | None = None) -> None:
        super().__init__()
        self.store = store if store is not None else default_store()
        self.tool = tool if tool is not None else EmbeddingTool(default_embedding_provider())

    def execute(self, task: Task, cancel: threading.Event | None = None) -> Result:
        def work() -> dict[str, Any]:
            output = self.tool.run(task.input)
            if self.store is not None:
                doc = Document(
                    id=task.id, embedding=output["embedding"], metadata=dict(task.input)
                )
                try:
                    self.store.upsert([doc])
                except Exception:
                    logger.warning("[%s] could not store embedding for %s", self.id, task.id)
            return output

        return _run(task, cancel, work)


class GenerationAgent(Agent):
    """Sends ``prompt`` (and optional ``model``) to a completion endpoint.

    An ``endpoint`` input overrides the agent's own endpoint for that task.
    """

    id_prefix = "generation-agent"

    def __init__(self, endpoint: str | None = None) -> None:
        super().__init__()
        self.tool = CompletionTool(
            default_completion_endpoint() if endpoint is None else endpoint
        )

    def execute(self, task: Task, cancel: threading.Event | None = None) -> Result:
        tool = self.tool
        override = task.input.get("endpoint")
        if isinstance(override, str) and override and override != tool.endpoint:
            tool = CompletionTool(override)
        return _run(task, cancel, lambda: tool.run(task.input))


class IngestAgent(Agent):
    """Embeds and stores a document through an IngestTool."""

    id_prefix = "ingest-agent"

    def __init__(self, tool: IngestTool | None = None) -> None:
        super().__init__()
        self.tool = tool if tool is not None else IngestTool()

    def execute(self, task: Task, cancel: threading.Event | None = None) -> Result:
        return _run(task, cancel, lambda: self.tool.run(task.input))


class RerankAgent(Agent):
    """Orders documents by score through a RerankTool."""

    id_prefix = "rerank-agent"

    def __init__(self, tool: RerankTool | None = None) -> None:
        super().__init__()
        self.tool = tool if tool is not None else RerankTool(default_rerank_provider())

    def execute(self, task: Task, cancel: threading.Event | None = None) -> Result:
        return _run(task, cancel, lambda: self.tool.run(task.input))


class RetrievalAgent(Agent):
    """Queries the default vector store for documents similar to ``embedding``."""

    id_prefix = "retrieval-agent"

    def __init__(self, top_k: int = 0) -> None:
        super().__init__()
        self.tool = RetrievalTool(default_store(), top_k)

    def execute(self, task: Task, cancel: threading.Event | None = None) -> Result:
        return _run(task, cancel, lambda: self.tool.run(task.input))


register("EmbeddingAgent", EmbeddingAgent)
register("GenerationAgent", GenerationAgent)
register("IngestAgent", IngestAgent)
register("RerankAgent", RerankAgent)
register("RetrievalAgent", RetrievalAgent)