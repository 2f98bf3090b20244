# model.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional


class Shell(str, Enum):
    BASH = "bash"
    POWERSHELL = "powershell"
    PWSH = "pwsh"
    SH = "sh"
    CMD = "cmd"


VALID_SHELLS = tuple(shell.value for shell in Shell)


def output_key(step_id: str | None, name: str) -> str:
    """Address of a step output: steps.<id>.outputs.<name>."""
    return f"steps.{step_id}.outputs.{name}"


@dataclass(frozen=True)
class Step:
    """A single declared unit of work inside an action or a workflow job."""
    name: str
    id: str | None = None
    shell: str | None = None
    run: str | None = None
    uses: str | None = None
    condition: str | None = None              # YAML `if`
    params: Dict[str, str] | None = None      # YAML `with`

    @property
    def label(self) -> str:
        return self.name or self.id or self.uses or "<unnamed>"


@dataclass(frozen=True)
class InputSpec:
    description: str = ""
    required: bool = False
    default: str | None = None


@dataclass
class ActionDefinition:
    """
    A composite action (action.yml).

    `inputs` keeps declaration order; `using` must be "composite" for the
    parser to accept the document.
    """
    name: str
    description: str
    steps: list[Step]
    author: str = ""
    inputs: Dict[str, InputSpec] = field(default_factory=dict)
    using: str = "composite"


@dataclass
class WorkflowJob:
    runs_on: str | list[str]
    steps: list[Step] = field(default_factory=list)
    matrix: Optional[Dict[str, List[Any]]] = None   # strategy.matrix


@dataclass
class WorkflowDefinition:
    name: str
    on: Dict[str, Any]
    jobs: Dict[str, WorkflowJob]
    permissions: Optional[Dict[str, str]] = None

    def all_steps(self) -> list[Step]:
        return [step for job in self.jobs.values() for step in job.steps]


@dataclass(frozen=True)
class WorkflowInput:
    """Values supplied to the deploy action by a calling workflow."""
    github_token: str
    public_repo_token: str
    private_repo: str
    public_repo: str
    wrangler_port: str | None = None

    def as_inputs(self) -> Dict[str, str]:
        """Dash-keyed mapping, as referenced by `${{ inputs.<key> }}`."""
        values = {
            "github-token": self.github_token,
            "public-repo-token": self.public_repo_token,
            "private-repo": self.private_repo,
            "public-repo": self.public_repo,
        }
        if self.wrangler_port is not None:
            values["wrangler-port"] = self.wrangler_port
        return values

    @classmethod
    def from_inputs(cls, values: Mapping[str, str]) -> WorkflowInput:
        return cls(
            github_token=values["github-token"],
            public_repo_token=values["public-repo-token"],
            private_repo=values["private-repo"],
            public_repo=values["public-repo"],
            wrangler_port=values.get("wrangler-port"),
        )


@dataclass
class StepResult:
    success: bool
    outputs: Optional[Dict[str, str]] = None
    error: Optional[str] = None
