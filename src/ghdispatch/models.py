#!/usr/bin/env python3
"""
models - Data types shared across ghdispatch.

Workflows and their inputs are fetched fresh from `gh` on every run;
bookmarks live in the YAML config file.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union


def input_value_to_str(value: Any) -> str:
    """Render a workflow input value the way `gh -f key=value` expects it."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class InputKind(Enum):
    """Declared `type:` of a workflow_dispatch input."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    CHOICE = "choice"
    ENVIRONMENT = "environment"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, raw: Any) -> "InputKind":
        for kind in cls:
            if kind is not cls.UNKNOWN and kind.value == raw:
                return kind
        return cls.UNKNOWN


@dataclass
class WorkflowSummary:
    name: str
    path: str
    id: int
    state: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WorkflowSummary":
        return cls(
            name=data.get("name", ""),
            path=data.get("path", ""),
            id=data.get("id", 0),
            state=data.get("state", ""),
        )

    @property
    def is_active(self) -> bool:
        return self.state == "active"


@dataclass
class WorkflowInputSpec:
    """One entry of `on.workflow_dispatch.inputs`."""

    name: str
    type: str
    default: str = ""
    options: Optional[List[str]] = None
    required: bool = False

    @property
    def kind(self) -> InputKind:
        return InputKind.parse(self.type)


@dataclass
class Bookmark:
    """A saved (workflow, branch, inputs) triple under a nickname."""

    nickname: str
    workflow: str
    branch: str
    inputs: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Bookmark":
        raw_inputs = data.get("inputs") or {}
        return cls(
            nickname=input_value_to_str(data.get("nickname")),
            workflow=input_value_to_str(data.get("workflow")),
            branch=input_value_to_str(data.get("branch")),
            inputs={str(k): input_value_to_str(v) for k, v in raw_inputs.items()},
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nickname": self.nickname,
            "workflow": self.workflow,
            "branch": self.branch,
            "inputs": {k: input_value_to_str(v) for k, v in self.inputs.items()},
        }


@dataclass(frozen=True)
class BookmarkSelection:
    index: int


@dataclass(frozen=True)
class WorkflowSelection:
    workflow_id: int


Selection = Union[BookmarkSelection, WorkflowSelection]
