# validator.py
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from .model import VALID_SHELLS, ActionDefinition, Step, WorkflowInput, output_key
from .parser import action_from_text

# steps.<id>.outputs.<name> == '<value>'
CONDITION_PATTERN = re.compile(r"steps\.(.+?)\.outputs\.(.+?)\s*==\s*'(.+?)'")

REQUIRED_INPUT_FIELDS = ("github-token", "public-repo-token", "private-repo", "public-repo")
OPTIONAL_INPUT_FIELDS = ("wrangler-port",)


def condition_holds(expression: str | None, outputs: Mapping[str, str]) -> bool:
    """
    Evaluate a step guard against recorded outputs.

    Only `steps.<id>.outputs.<name> == '<value>'` is understood. Any other
    expression is treated as satisfied; callers wanting fail-closed behavior
    must check `CONDITION_PATTERN` themselves.
    """
    if not expression:
        return True

    match = CONDITION_PATTERN.search(expression)
    if match is None:
        return True

    step_id, name, expected = match.groups()
    return outputs.get(output_key(step_id, name)) == expected


class WorkflowValidator:
    """Structural queries over one composite action definition."""

    def __init__(self, source: str | ActionDefinition):
        if isinstance(source, ActionDefinition):
            self.action = source
        else:
            self.action = action_from_text(source, strict=False)

    def validate_inputs(self, inputs: Mapping[str, Any] | WorkflowInput) -> List[str]:
        supplied = inputs.as_inputs() if isinstance(inputs, WorkflowInput) else inputs
        errors: List[str] = []
        for name, spec in self.action.inputs.items():
            if spec.required and not supplied.get(name):
                errors.append(f"Missing required input: {name}")
        return errors

    def get_step_by_name(self, name: str) -> Optional[Step]:
        return next((s for s in self.action.steps if s.name == name), None)

    def get_step_by_id(self, step_id: str) -> Optional[Step]:
        return next((s for s in self.action.steps if s.id == step_id), None)

    def extract_commands(self, step: Step, shell: str | None = None) -> List[str]:
        # shell is accepted for symmetry with simulate_step; lines are shell-agnostic
        if not step.run:
            return []

        commands: List[str] = []
        for line in step.run.split("\n"):
            trimmed = line.strip()
            if trimmed and not trimmed.startswith("#"):
                commands.append(trimmed)
        return commands

    def evaluate_condition(self, step_name: str, outputs: Mapping[str, str]) -> bool:
        step = self.get_step_by_name(step_name)
        if step is None:
            return True
        return condition_holds(step.condition, outputs)


# ---------------------------------------------------------------------
# Free-standing checks
# ---------------------------------------------------------------------

def validate_action_structure(config: Mapping[str, Any]) -> List[str]:
    """Collect every structural problem of a raw action mapping instead of failing on the first."""
    errors: List[str] = []
    runs = config.get("runs")

    if not config.get("name"):
        errors.append("Missing action name")
    if not config.get("description"):
        errors.append("Missing action description")
    if not runs:
        errors.append("Missing runs configuration")
    if runs and (not isinstance(runs, Mapping) or runs.get("using") != "composite"):
        errors.append("Action must use composite runner")
    if "inputs" not in config or config.get("inputs") is None:
        errors.append("Missing inputs configuration")

    return errors


def is_valid_shell(shell: Any) -> bool:
    return isinstance(shell, str) and shell in VALID_SHELLS


@dataclass
class InvalidWorkflowInput(ValueError):
    message: str

    def __str__(self) -> str:
        return self.message


def assert_workflow_input(value: Any) -> WorkflowInput:
    """Check an untyped mapping and return it as a WorkflowInput."""
    if not isinstance(value, Mapping):
        raise InvalidWorkflowInput("Invalid workflow input")

    for name in REQUIRED_INPUT_FIELDS:
        if not isinstance(value.get(name), str) or not value.get(name):
            raise InvalidWorkflowInput(f"Missing required field: {name}")

    for name in OPTIONAL_INPUT_FIELDS:
        if name in value and not isinstance(value[name], str):
            raise InvalidWorkflowInput(f"{name} must be a string")

    return WorkflowInput.from_inputs(value)
