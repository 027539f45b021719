# agentflow

agentflow holds the building blocks for agent pipelines and retrieval
augmented generation:

- **Agents**: small workers that take a `Task` and return a `Result`. You create them by name from a registry.
- **Tools**: embedding, retrieval, reranking, ingest and completion.
- **Vector stores**: an in-memory store (`MemoryStore`) and a Qdrant store (`QdrantStore`).
- **Pipeline definitions**: `Pipeline`, `PipelineGroup` and `PipelineStep`.
- **Configuration**: settings read from environment variables.

## Installation

```
pip install .
```

To also install the test tools, add the `test` extra:

```
pip install ".[test]"
```

## Agents

Every agent has an `id` and an `execute(task, cancel=None)` method. The
optional `cancel` argument is a `threading.Event`. Agents do not raise when
a task fails. Instead, the returned `Result` has `successful=False` and
holds the exception in `error`.

An agent type is registered when the module that defines it is imported.
After that, `agentflow.agents.create(name)` builds a new agent of that type.
An unknown name raises `UnknownAgentError`.

| Name | Module | What it does |
| --- | --- | --- |
| `EchoAgent` | `agentflow.agents` | Waits for `delay_ms` milliseconds (one second by default), then echoes its input back. |
| `HTTPCallAgent` | `agentflow.http_agent` | Sends the task input as JSON to `url` using `method`, and returns the response body. |
| `ContextBuilderAgent` | `agentflow.text_agents` | Joins one field of each document into a `retrieved_context` string. |
| `DataTransformAgent` | `agentflow.text_agents` | Applies `uppercase`, `lowercase`, `reverse` or `title` to `text`. |
| `PromptAgent` | `agentflow.text_agents` | Renders `template` using `context`, `documents`, `query` and `answer`. |
| `EmbeddingAgent` | `agentflow.tool_agents` | Embeds `text` and stores the vector under the task id. |
| `RetrievalAgent` | `agentflow.tool_agents` | Finds the documents nearest to `embedding` in the default store. |
| `RerankAgent` | `agentflow.tool_agents` | Orders `documents` by score. |
| `IngestAgent` | `agentflow.tool_agents` | Embeds and stores a document. |
| `GenerationAgent` | `agentflow.tool_agents` | Sends `prompt` to a completion endpoint. The `endpoint` input overrides the endpoint for that task. |

```python
import agentflow.text_agents  # registers the text agents
from agentflow.agents import Task, create

agent = create("DataTransformAgent")
result = agent.execute(Task(id="t1", input={"text": "hello"}))
print(result.output)
# {'operation': 'uppercase', 'output': 'HELLO'}
```

### Prompt templates

`agentflow.text_agents.render_template` supports:

- field references such as `{{.name}}` and `{{.a.b}}`
- `{{range}}`, `{{if}}` and `{{with}}`, each with an optional `{{else}}`
- comments written as `{{/* ... */}}`
- trim markers written as `{{- ... -}}`

A missing key renders as `<no value>`. A template that cannot be parsed or
evaluated raises `TemplateError`.

```python
from agentflow.text_agents import render_template

render_template("Hello {{.User}}", {"User": "World"})  # 'Hello World'
```

## Tools and vector stores

Each tool has a `run(input)` method. It takes a mapping and returns a dict.
If a required input is missing, the tool raises `ValueError`.

```python
from agentflow.embedding import hash_embedding_tool
from agentflow.ingest import IngestTool
from agentflow.retrieval import RetrievalTool
from agentflow.vectorstore import MemoryStore

store = MemoryStore()
embedder = hash_embedding_tool(128)
IngestTool(store=store, embedder=embedder).run(
    {"id": "doc1", "text": "hello world", "metadata": {"text": "hello world"}}
)

query = embedder.run({"text": "hello"})["embedding"]
print(RetrievalTool(store, 1).run({"embedding": query}))
# {'documents': [{'id': 'doc1', 'metadata': {'text': 'hello world'}, 'score': ...}]}
```

**Embeddings.** `basic_hash_embed` builds a deterministic bag-of-words vector
from FNV-1a hashes of the words. `RemoteEmbeddingProvider` calls an HTTP
service that accepts `{"text": ...}` and answers `{"embedding": [...]}`.

**Reranking.** `RemoteRerankProvider` sends `{"query", "documents"}` and reads
back `{"scores": [...]}`.

**Retries.** Both remote providers retry up to `max_retries` times (two by
default). They wait 0.1 s, then 0.2 s, and so on between attempts.

**Completion.** `CompletionTool` posts `{"prompt", "model"}` to its endpoint
and returns `{"completion": ...}`.

**Qdrant.** `QdrantStore` talks to a single Qdrant collection over HTTP. When
the server answers with an error status, it raises `QdrantError`.

## Pipeline definitions

`agentflow.pipeline` describes pipelines:

- A `Pipeline` is a list of groups, which run one after another.
- A `PipelineGroup` holds steps that may run at the same time.
- A `PipelineStep` names an agent type, a base `Task`, and `input_mappings`. The mappings say where each input comes from in the pipeline state, such as `initial.query` or `embed_query.default_output.embedding`.

`Pipeline.from_dict` builds a definition from decoded JSON. It ignores key
case and underscores, so `agent_type` and `AgentType` both work.

## Configuration

`agentflow.bootstrap.init_from_env` reads the environment variables below,
using `os.environ` unless you pass another mapping. It then:

1. installs the default vector store,
2. installs the default embedding and rerank providers, the default completion endpoint, and the default retrieval depth,
3. returns the resulting `Config`.

| Variable | Meaning |
| --- | --- |
| `VECTORSTORE_ENDPOINT`, `VECTORSTORE_COLLECTION` | Qdrant server and collection. Without an endpoint, a `MemoryStore` is used. |
| `VECTORSTORE_API_KEY`, `VECTORSTORE_INSECURE` | Qdrant API key. `VECTORSTORE_INSECURE=1` turns off TLS verification. |
| `EMBEDDING_ENDPOINT`, `EMBEDDING_API_KEY` | Remote embedding service. The key is sent as the `Authorization` header. |
| `EMBEDDING_DIM` | Dimension of the hash embeddings. The default provider uses 128. |
| `RERANK_ENDPOINT`, `RERANK_API_KEY` | Remote rerank service. |
| `COMPLETION_ENDPOINT` | Default completion endpoint. Without it, the default is `http://localhost:8080/completion`. |
| `RETRIEVAL_TOP_K` | Default number of documents to retrieve. Without it, the default is 5. |

## What the package does not do

- **It does not run pipelines.** It defines `Pipeline` objects, but nothing in the package executes them group by group. Call the agents yourself.
- **It has no ready-made retrieval augmented generation pipeline.**
- **It has no commands and no HTTP server.** Use it as a library.