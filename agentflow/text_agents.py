"""Agents that work on text: context building, string transforms and prompt templates."""

from __future__ import annotations

import math
import re
import threading
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from agentflow.agents import Agent, Result, Task, register


class TemplateError(ValueError):
    """A prompt template could not be parsed or rendered."""


def get_nested(mapping: Mapping[str, Any], path: str) -> Any:
    """Return the value at a dotted ``path`` inside nested mappings.

    Raises KeyError when a part of the path is missing or an intermediate
    value is not a mapping.
    """
    current: Any = mapping
    for part in path.split("."):
        if not isinstance(current, Mapping) or part not in current:
            raise KeyError(path)
        current = current[part]
    return current


def _non_empty_str(value: Any, default: str) -> str:
    return value if isinstance(value, str) and value else default


def _is_document_list(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(doc, Mapping) for doc in value)


class ContextBuilderAgent(Agent):
    """Joins one field of each retrieved document into a context string.

    Input keys: ``documents`` (required list of mappings), ``field`` (dotted
    path, default ``metadata.text``), ``separator`` (default newline),
    ``max_chars`` (limit on the combined length) and ``extra`` (mapping merged
    into the output). A ``truncated`` flag is added when the limit cut the text.
    """

    id_prefix = "ctx-builder"

    def execute(self, task: Task, cancel: threading.Event | None = None) -> Result:
        docs = task.input.get("documents")
        if not _is_document_list(docs):
            return Result(task_id=task.id, error=ValueError("documents required"))
        field_path = _non_empty_str(task.input.get("field"), "metadata.text")
        separator = _non_empty_str(task.input.get("separator"), "\n")
        max_chars = task.input.get("max_chars")
        if isinstance(max_chars, bool) or not isinstance(max_chars, int):
            max_chars = 0

        parts = []
        for doc in docs:
            try:
                value = get_nested(doc, field_path)
            except KeyError:
                continue
            if isinstance(value, str) and value:
                parts.append(value)

        combined = separator.join(parts)
        context: dict[str, Any] = {}
        if max_chars > 0 and len(combined) > max_chars:
            context["retrieved_context"] = combined[:max_chars]
            context["truncated"] = True
        else:
            context["retrieved_context"] = combined
        extra = task.input.get("extra")
        if isinstance(extra, Mapping):
            context.update(extra)
        return Result(task_id=task.id, output=context, successful=True)


def _is_title_separator(ch: str) -> bool:
    if ch.isascii():
        return not (ch.isalnum() or ch == "_")
    if ch.isalpha() or ch.isdigit():
        return False
    return ch.isspace()


def _title(text: str) -> str:
    """Capitalise the first letter of every word, leaving other letters alone."""
    out = []
    previous = " "
    for ch in text:
        if _is_title_separator(previous):
            titled = ch.title()
            out.append(titled if len(titled) == 1 else ch)
        else:
            out.append(ch)
        previous = ch
    return "".join(out)


_TRANSFORMS = {
    "uppercase": str.upper,
    "lowercase": str.lower,
    "reverse": lambda text: text[::-1],
    "title": _title,
}


class DataTransformAgent(Agent):
    """Applies ``operation`` (uppercase, lowercase, reverse, title) to ``text``.

    The operation defaults to uppercase; an unknown operation leaves the text as is.
    """

    id_prefix = "transform-agent"

    def execute(self, task: Task, cancel: threading.Event | None = None) -> Result:
        text = task.input.get("text")
        if not isinstance(text, str):
            text = ""
        operation = _non_empty_str(task.input.get("operation"), "uppercase")
        transform = _TRANSFORMS.get(operation)
        output = transform(text) if transform is not None else text
        return Result(
            task_id=task.id,
            output={"operation": operation, "output": output},
            successful=True,
        )


# --- prompt templates -------------------------------------------------------

_ACTION = re.compile(r"\{\{(-\s+)?(.*?)(\s+-)?\}\}", re.DOTALL)
_PATH = re.compile(r"(?:\.[A-Za-z_][A-Za-z0-9_]*)+")
_TRIM = " \t\r\n"
_MISSING = object()


@dataclass
class _Text:
    text: str


@dataclass
class _Value:
    path: tuple[str, ...]


@dataclass
class _Block:
    kind: str
    path: tuple[str, ...]
    body: list = field(default_factory=list)
    alternative: list = field(default_factory=list)


def _tokenize(source: str) -> list[tuple[str, str]]:
    tokens: list[tuple[str, str]] = []
    position = 0
    trim_next = False
    for match in _ACTION.finditer(source):
        text = source[position : match.start()]
        if trim_next:
            text = text.lstrip(_TRIM)
        if match.group(1):
            text = text.rstrip(_TRIM)
        if text:
            tokens.append(("text", text))
        tokens.append(("action", match.group(2).strip(_TRIM)))
        trim_next = bool(match.group(3))
        position = match.end()
    tail = source[position:]
    if trim_next:
        tail = tail.lstrip(_TRIM)
    if "{{" in tail:
        raise TemplateError("unclosed action")
    if tail:
        tokens.append(("text", tail))
    return tokens


def _parse_path(expression: str) -> tuple[str, ...]:
    expression = expression.strip(_TRIM)
    if expression == ".":
        return ()
    if not expression:
        raise TemplateError("missing value for command")
    if not _PATH.fullmatch(expression):
        raise TemplateError(f"unsupported expression {expression!r}")
    return tuple(expression[1:].split("."))


def _parse_list(tokens: list[tuple[str, str]], index: int) -> tuple[list, int, str | None]:
    nodes: list = []
    while index < len(tokens):
        kind, value = tokens[index]
        if kind == "text":
            nodes.append(_Text(value))
            index += 1
            continue
        if value.startswith("/*"):
            if not value.endswith("*/"):
                raise TemplateError("unclosed comment")
            index += 1
            continue
        word, _, rest = value.partition(" ")
        if word in ("end", "else"):
            if rest.strip(_TRIM):
                raise TemplateError(f"unsupported {{{{{word}}}}} arguments")
            return nodes, index, word
        if word in ("range", "if", "with"):
            path = _parse_path(rest)
            body, index, terminator = _parse_list(tokens, index + 1)
            alternative: list = []
            if terminator == "else":
                alternative, index, terminator = _parse_list(tokens, index + 1)
                if terminator == "else":
                    raise TemplateError(f"unexpected {{{{else}}}} in {word}")
            if terminator != "end":
                raise TemplateError(f"unexpected EOF in {word}")
            nodes.append(_Block(word, path, body, alternative))
            index += 1
            continue
        nodes.append(_Value(_parse_path(value)))
        index += 1
    return nodes, index, None


def _parse(source: str) -> list:
    nodes, _, terminator = _parse_list(_tokenize(source), 0)
    if terminator is not None:
        raise TemplateError(f"unexpected {{{{{terminator}}}}}")
    return nodes


def _resolve(dot: Any, path: tuple[str, ...]) -> Any:
    current = dot
    for name in path:
        if isinstance(current, Mapping):
            current = current.get(name, _MISSING)
        elif current is _MISSING or current is None:
            raise TemplateError(f"nil pointer evaluating field {name}")
        else:
            raise TemplateError(f"can't evaluate field {name} in type {type(current).__name__}")
    return current


def _truthy(value: Any) -> bool:
    if value is _MISSING or value is None:
        return False
    if isinstance(value, (bool, int, float, str, list, tuple, Mapping)):
        return bool(value)
    return True


def _items(value: Any) -> list:
    if value is _MISSING or value is None:
        return []
    if isinstance(value, Mapping):
        return [value[key] for key in sorted(value, key=str)]
    if isinstance(value, (list, tuple)):
        return list(value)
    raise TemplateError(f"range can't iterate over {_format(value)}")


def _format(value: Any) -> str:
    if value is _MISSING:
        return "<no value>"
    if value is None:
        return "<nil>"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "+Inf" if value > 0 else "-Inf"
        if value.is_integer() and abs(value) < 1e21:
            return str(int(value))
        return repr(value)
    if isinstance(value, str):
        return value
    if isinstance(value, Mapping):
        entries = " ".join(f"{key}:{_format(value[key])}" for key in sorted(value, key=str))
        return f"map[{entries}]"
    if isinstance(value, (list, tuple)):
        return "[" + " ".join(_format(item) for item in value) + "]"
    return str(value)


def _render(nodes: list, dot: Any, out: list[str]) -> None:
    for node in nodes:
        if isinstance(node, _Text):
            out.append(node.text)
        elif isinstance(node, _Value):
            out.append(_format(_resolve(dot, node.path)))
        else:
            value = _resolve(dot, node.path)
            if node.kind == "if":
                _render(node.body if _truthy(value) else node.alternative, dot, out)
            elif node.kind == "with":
                if _truthy(value):
                    _render(node.body, value, out)
                else:
                    _render(node.alternative, dot, out)
            else:
                items = _items(value)
                if items:
                    for item in items:
                        _render(node.body, item, out)
                else:
                    _render(node.alternative, dot, out)


def render_template(template: str, data: Any) -> str:
    """Render a template using ``{{.field}}``, ``range``, ``if``, ``with`` and comments.

    Missing keys render as ``<no value>``; parse and evaluation problems raise
    TemplateError.
    """
    out: list[str] = []
    _render(_parse(template), data, out)
    return "".join(out)


class PromptAgent(Agent):
    """Renders ``template`` with ``context`` entries plus documents, query and answer."""

    id_prefix = "prompt-agent"

    def execute(self, task: Task, cancel: threading.Event | None = None) -> Result:
        template = task.input.get("template")
        if not isinstance(template, str) or not template:
            return Result(task_id=task.id, error=ValueError("template required"))

        data: dict[str, Any] = {}
        context = task.input.get("context")
        if isinstance(context, Mapping):
            data.update(context)
        documents = task.input.get("documents")
        if _is_document_list(documents):
            data["documents"] = documents
        for key in ("query", "answer"):
            value = task.input.get(key)
            if isinstance(value, str):
                data[key] = value

        try:
            prompt = render_template(template, data)
        except TemplateError as exc:
            return Result(task_id=task.id, error=exc)
        return Result(task_id=task.id, output={"prompt": prompt}, successful=True)


register("ContextBuilderAgent", ContextBuilderAgent)
register("DataTransformAgent", DataTransformAgent)
register("PromptAgent", PromptAgent)