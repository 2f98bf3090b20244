# parser.py
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Type, TypeVar

import yaml
from pydantic import BaseModel, ValidationError

from . import settings
from .model import ActionDefinition, InputSpec, Step, WorkflowDefinition, WorkflowJob
from .schema import ActionDocument, StepDocument, WorkflowDocument

DocumentT = TypeVar("DocumentT", bound=BaseModel)


# ----------------------------------------------------------------------
# Errors
# ----------------------------------------------------------------------

@dataclass
class ConfigError(Exception):
    """An action or workflow document could not be read, parsed or accepted."""
    message: str
    path: str | None = None

    def __str__(self) -> str:
        if self.path:
            return f"{self.message} ({self.path})"
        return self.message


# ----------------------------------------------------------------------
# Text -> document -> definition
# ----------------------------------------------------------------------

def _load_mapping(text: str, source: str | None) -> Dict[Any, Any]:
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError(f"Malformed YAML: {e}", source) from e

    if not isinstance(data, dict):
        raise ConfigError("Document must be a mapping at the top level", source)
    return data


def _validate(model: Type[DocumentT], data: Dict[Any, Any], source: str | None) -> DocumentT:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        first = e.errors()[0]
        where = ".".join(str(part) for part in first["loc"]) or "<root>"
        raise ConfigError(f"Invalid document at {where}: {first['msg']}", source) from e


def _build_step(doc: StepDocument) -> Step:
    return Step(
        name=doc.name,
        id=doc.id,
        shell=doc.shell,
        run=doc.run,
        uses=doc.uses,
        condition=doc.condition,
        params=dict(doc.params) if doc.params is not None else None,
    )


def check_action_invariants(doc: ActionDocument, source: str | None = None) -> None:
    if not doc.name:
        raise ConfigError("Action must have a name", source)
    if not doc.description:
        raise ConfigError("Action must have a description", source)
    if doc.runs is None or doc.runs.using != "composite":
        raise ConfigError("Action must use composite runs", source)
    if not doc.runs.steps:
        raise ConfigError("Action must have at least one step", source)


def check_workflow_invariants(doc: WorkflowDocument, source: str | None = None) -> None:
    if not doc.name:
        raise ConfigError("Workflow must have a name", source)
    if not doc.on:
        raise ConfigError("Workflow must have triggers", source)
    if not doc.jobs:
        raise ConfigError("Workflow must have at least one job", source)


def action_from_text(text: str, *, source: str | None = None, strict: bool = True) -> ActionDefinition:
    """
    Parse action.yml text into an ActionDefinition.

    With strict=False the structural invariants (name, description,
    composite runs, at least one step) are not enforced; only the shape of
    the document is checked.
    """
    doc = _validate(ActionDocument, _load_mapping(text, source), source)
    if strict:
        check_action_invariants(doc, source)

    runs = doc.runs
    return ActionDefinition(
        name=doc.name,
        description=doc.description,
        author=doc.author,
        inputs={
            name: InputSpec(description=spec.description, required=spec.required, default=spec.default)
            for name, spec in doc.inputs.items()
        },
        using=runs.using if runs is not None else "",
        steps=[_build_step(s) for s in runs.steps] if runs is not None else [],
    )


def workflow_from_text(text: str, *, source: str | None = None, strict: bool = True) -> WorkflowDefinition:
    data = _load_mapping(text, source)

    # YAML 1.1 reads a bare `on:` key as boolean True
    if True in data and "on" not in data:
        data["on"] = data.pop(True)

    doc = _validate(WorkflowDocument, data, source)
    if strict:
        check_workflow_invariants(doc, source)

    jobs: Dict[str, WorkflowJob] = {}
    for job_name, job_doc in doc.jobs.items():
        matrix = job_doc.strategy.matrix if job_doc.strategy is not None else None
        jobs[job_name] = WorkflowJob(
            runs_on=job_doc.runs_on,
            matrix=dict(matrix) if matrix is not None else None,
            steps=[_build_step(s) for s in job_doc.steps],
        )

    return WorkflowDefinition(
        name=doc.name,
        on=dict(doc.on or {}),
        permissions=dict(doc.permissions) if doc.permissions is not None else None,
        jobs=jobs,
    )


# ----------------------------------------------------------------------
# Cached file parser
# ----------------------------------------------------------------------

class ConfigParser:
    """
    Reads action / workflow definitions from disk.

    Parsed definitions are cached per resolved path for the lifetime of the
    parser; repeat calls return the same object without touching the file.
    A path cached as one kind of definition cannot be read back as the other.
    """

    def __init__(self, root: str | Path | None = None):
        self.root = Path(root) if root is not None else None
        self._cache: Dict[str, Any] = {}

    def resolve(self, path: str | Path | None, default: str) -> Path:
        base = self.root if self.root is not None else Path.cwd()
        candidate = Path(path).expanduser() if path is not None else Path(default)
        if not candidate.is_absolute():
            candidate = base / candidate
        return candidate.resolve()

    def _read(self, path: Path) -> str:
        if not path.exists():
            raise ConfigError("File not found", str(path))
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigError(f"Could not read file: {e}", str(path)) from e

    def _cached(self, key: str, kind: type) -> Any:
        hit = self._cache.get(key)
        if hit is not None and not isinstance(hit, kind):
            raise ConfigError(
                f"Already parsed as {type(hit).__name__}, not {kind.__name__}", key
            )
        return hit

    def parse_action(self, path: str | Path | None = None) -> ActionDefinition:
        actual = self.resolve(path, settings.ACTION_PATH)
        key = str(actual)
        cached = self._cached(key, ActionDefinition)
        if cached is not None:
            return cached

        definition = action_from_text(self._read(actual), source=key)
        self._cache[key] = definition
        return definition

    def parse_workflow(self, path: str | Path | None = None) -> WorkflowDefinition:
        actual = self.resolve(path, settings.WORKFLOW_PATH)
        key = str(actual)
        cached = self._cached(key, WorkflowDefinition)
        if cached is not None:
            return cached

        definition = workflow_from_text(self._read(actual), source=key)
        self._cache[key] = definition
        return definition

    def clear_cache(self) -> None:
        self._cache.clear()

    @property
    def cache_size(self) -> int:
        return len(self._cache)

    # ---- convenience queries ----

    def extract_action_inputs(self, definition: Optional[ActionDefinition] = None) -> List[str]:
        """Declared input names, in declaration order."""
        action = definition if definition is not None else self.parse_action()
        return list(action.inputs)

    def extract_workflow_steps(self, definition: Optional[WorkflowDefinition] = None) -> List[str]:
        """Step names across every job, in document order."""
        workflow = definition if definition is not None else self.parse_workflow()
        return [step.name for step in workflow.all_steps()]
