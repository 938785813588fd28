#!/usr/bin/env python3
"""
inputs - Map workflow_dispatch input declarations onto prompt widgets.

Prompts are returned unexecuted so ui.group() can run them in order under a
single cancellation hook.
"""

from functools import partial
from typing import Any, Callable, Dict, List

from ghdispatch import ui
from ghdispatch.log import get_logger
from ghdispatch.models import InputKind, WorkflowInputSpec

BOOLEAN_OPTIONS = [
    ui.Option(value="true", label="True"),
    ui.Option(value="false", label="False"),
]

TEXT_KINDS = (InputKind.STRING, InputKind.NUMBER, InputKind.ENVIRONMENT)


def _prompt_for(spec: WorkflowInputSpec) -> Callable[[], Any]:
    message = f"Input {spec.name}"
    kind = spec.kind

    if kind in TEXT_KINDS:
        return partial(
            ui.text,
            message=message,
            placeholder=f"Required? {str(spec.required).lower()}",
            initial_value=spec.default,
        )
    if kind is InputKind.BOOLEAN:
        return partial(
            ui.select,
            message=message,
            options=BOOLEAN_OPTIONS,
            initial_value=spec.default,
        )
    if kind is InputKind.CHOICE:
        return partial(
            ui.select,
            message=message,
            options=[ui.Option(value=o, label=o) for o in spec.options or []],
            initial_value=spec.default,
        )
    raise AssertionError(f"no prompt for {kind}")


def build_input_prompts(inputs: List[WorkflowInputSpec]) -> Dict[str, Callable[[], Any]]:
    """
    Build one deferred prompt per input, keyed by input name.

    Inputs with an unrecognised type get no prompt: they are logged, reported
    and left out of the returned mapping.
    """
    prompts: Dict[str, Callable[[], Any]] = {}
    for spec in inputs:
        if spec.kind is InputKind.UNKNOWN:
            get_logger().error(f"Invalid input type {spec.type!r} for input '{spec.name}'")
            ui.warn(f"Invalid input type! Skipping '{spec.name}' ({spec.type})")
            continue
        prompts[spec.name] = _prompt_for(spec)
    return prompts
