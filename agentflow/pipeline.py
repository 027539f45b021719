"""Pipeline definitions: steps, groups of concurrent steps, and whole pipelines."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from agentflow.agents import Task

DEFAULT_OUTPUT_KEY = "default_output"
"""Suffix under which a step's output is stored in the pipeline state."""

StepData = dict
"""Pipeline state: initial inputs and step outputs keyed by dotted names."""


def _normalise(data: Any, what: str) -> dict[str, Any]:
    """Index an object's keys case-insensitively, ignoring underscores."""
    if not isinstance(data, Mapping):
        raise TypeError(f"{what} must be an object")
    return {str(key).replace("_", "").lower(): value for key, value in data.items()}


def _string(fields: Mapping[str, Any], key: str, what: str) -> str:
    value = fields.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"{what} field {key!r} must be a string")
    return value


def _list(fields: Mapping[str, Any], key: str, what: str) -> list:
    value = fields.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"{what} field {key!r} must be a list")
    return value


def _task_from_dict(data: Any) -> Task:
    if data is None:
        return Task()
    fields = _normalise(data, "agent config")
    raw_input = fields.get("input")
    if raw_input is None:
        task_input: dict[str, Any] = {}
    elif isinstance(raw_input, Mapping):
        task_input = dict(raw_input)
    else:
        raise ValueError("agent config field 'input' must be an object")
    return Task(
        id=_string(fields, "id", "agent config"),
        description=_string(fields, "description", "agent config"),
        input=task_input,
    )


def _mappings_from_dict(data: Any) -> dict[str, str]:
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise ValueError("input mappings must be an object")
    mappings = {}
    for target, source in data.items():
        if not isinstance(target, str) or not isinstance(source, str):
            raise ValueError("input mappings must map strings to strings")
        mappings[target] = source
    return mappings


@dataclass
class PipelineStep:
    """One agent invocation whose inputs are drawn from the pipeline state."""

    name: str = ""
    agent_type: str = ""
    agent_config: Task = field(default_factory=Task)
    input_mappings: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PipelineStep:
        """Build a step from decoded JSON; key case and underscores are ignored."""
        fields = _normalise(data, "step")
        return cls(
            name=_string(fields, "name", "step"),
            agent_type=_string(fields, "agenttype", "step"),
            agent_config=_task_from_dict(fields.get("agentconfig")),
            input_mappings=_mappings_from_dict(fields.get("inputmappings")),
        )


@dataclass
class PipelineGroup:
    """Steps run concurrently; they must not depend on each other's output."""

    name: str = ""
    steps: list[PipelineStep] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PipelineGroup:
        """Build a group from decoded JSON."""
        fields = _normalise(data, "group")
        return cls(
            name=_string(fields, "name", "group"),
            steps=[PipelineStep.from_dict(step) for step in _list(fields, "steps", "group")],
        )


@dataclass
class Pipeline:
    """Groups executed one after another in the order given."""

    id: str = ""
    description: str = ""
    groups: list[PipelineGroup] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Pipeline:
        """Build a pipeline from decoded JSON."""
        fields = _normalise(data, "pipeline")
        return cls(
            id=_string(fields, "id", "pipeline"),
            description=_string(fields, "description", "pipeline"),
            groups=[
                PipelineGroup.from_dict(group) for group in _list(fields, "groups", "pipeline")
            ],
        )