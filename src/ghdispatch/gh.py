#!/usr/bin/env python3
"""
gh - GitHub CLI wrapper for workflow dispatch.

  gh auth status                                        → check_login()
  gh workflow list -R <repo> --json name,path,id,state   → list_workflows()
  gh workflow view <wf> -R <repo> --ref <ref> --yaml     → get_workflow_inputs()
  gh workflow run <wf> -R <repo> --ref <ref> -f k=v …    → run_workflow()
  gh workflow view <wf> -R <repo> --web                  → open_workflow_in_browser()

Nothing is cached: every call hits gh.
"""

import json
import os
import subprocess
from typing import Any, Dict, List

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from ghdispatch.log import get_logger
from ghdispatch.models import (
    InputKind,
    WorkflowInputSpec,
    WorkflowSummary,
    input_value_to_str,
)

GH_ENV_VAR = "GH_PATH"
WORKFLOW_LIST_FIELDS = "name,path,id,state"


class GHError(Exception):
    pass


def gh_executable() -> str:
    return os.environ.get(GH_ENV_VAR) or "gh"


def _gh(*args: str) -> str:
    """Run a `gh` command; return stdout or raise GHError."""
    cmd = [gh_executable(), *args]
    get_logger().info(f"exec: {' '.join(cmd)}")
    try:
        r = subprocess.run(
            cmd,
            capture_output=True, text=True, check=False,
        )
    except FileNotFoundError:
        raise GHError("GitHub CLI ('gh') not found: https://cli.github.com")

    if r.returncode != 0:
        message = r.stderr.strip() or r.stdout.strip() or f"gh exited with {r.returncode}"
        get_logger().error(f"gh {args[0] if args else ''} failed: {message}")
        raise GHError(message)
    return r.stdout.strip()


def _gh_json(*args: str) -> Any:
    raw = _gh(*args)
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise GHError(f"gh JSON parse error: {e}\n{raw[:200]}")


def check_login() -> bool:
    """True when `gh auth status` succeeds; False if not logged in or gh is missing."""
    try:
        _gh("auth", "status")
        return True
    except GHError:
        return False


def list_workflows(repo: str) -> List[WorkflowSummary]:
    data = _gh_json("workflow", "list", "-R", repo, "--json", WORKFLOW_LIST_FIELDS)
    return [WorkflowSummary.from_dict(w) for w in data or []]


def filter_active_workflows(workflows: List[WorkflowSummary]) -> List[WorkflowSummary]:
    """Keep only workflows whose state is exactly 'active', order preserved."""
    return [w for w in workflows if w.is_active]


def _dispatch_inputs(doc: Any) -> Dict[str, Any]:
    """Locate on.workflow_dispatch.inputs in a parsed workflow document."""
    if not isinstance(doc, dict):
        return {}
    # YAML 1.1 loaders turn the bare key `on` into True
    on_val = doc.get("on")
    if on_val is None:
        on_val = doc.get(True)
    if not isinstance(on_val, dict):
        return {}
    dispatch = on_val.get("workflow_dispatch")
    if not isinstance(dispatch, dict):
        return {}
    return dispatch.get("inputs") or {}


def parse_workflow_inputs(workflow_yaml: str) -> List[WorkflowInputSpec]:
    """Project a workflow definition's dispatch inputs onto WorkflowInputSpec."""
    try:
        doc = YAML(typ="safe", pure=True).load(workflow_yaml)
    except YAMLError as e:
        raise GHError(f"gh YAML parse error: {e}")

    specs = []
    for name, decl in _dispatch_inputs(doc).items():
        decl = decl or {}
        input_type = decl.get("type")
        is_choice = InputKind.parse(input_type) is InputKind.CHOICE
        specs.append(WorkflowInputSpec(
            name=str(name),
            type=input_type,
            default=input_value_to_str(decl.get("default")),
            options=[input_value_to_str(o) for o in decl.get("options") or []] if is_choice else None,
            required=decl.get("required", False),
        ))
    return specs


def get_workflow_inputs(workflow: str, repo: str, ref: str) -> List[WorkflowInputSpec]:
    """Fetch the workflow as it exists on `ref` and return its dispatch inputs."""
    raw = _gh("workflow", "view", workflow, "-R", repo, "--ref", ref, "--yaml")
    return parse_workflow_inputs(raw)


def run_workflow(run_args: List[str]) -> str:
    """Run a prepared `gh workflow run …` argument vector; return gh's output."""
    return _gh(*run_args)


def open_workflow_in_browser(workflow: str, repo: str) -> None:
    _gh("workflow", "view", workflow, "-R", repo, "--web")
