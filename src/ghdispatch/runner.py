#!/usr/bin/env python3
"""
runner - Build the `gh workflow run` argument vector and its summary.
"""

from typing import Any, Dict, List

from ghdispatch.models import input_value_to_str

LABEL_WIDTH = 15


def build_workflow_run_args(
    workflow: str,
    repo: str,
    branch: str,
    inputs: Dict[str, Any],
) -> List[str]:
    """workflow run <wf> -R <repo> --ref <branch> [-f key=value ...]"""
    args = [
        "workflow", "run", workflow,
        "-R", repo,
        "--ref", branch,
    ]
    for key, value in inputs.items():
        args += ["-f", f"{key}={input_value_to_str(value)}"]
    return args


def build_display_info(
    workflow: str,
    repo: str,
    branch: str,
    inputs: Dict[str, Any],
) -> str:
    lines = [
        f"Running Workflow : {workflow}",
        f"Repo             : {repo}",
        f"Branch           : {branch}",
        "",
        "Inputs :",
    ]
    lines += [f"  {key:<{LABEL_WIDTH}} : {input_value_to_str(value)}"
              for key, value in inputs.items()]
    return "\n".join(lines)
