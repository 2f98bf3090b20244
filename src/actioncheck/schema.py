# schema.py
# Shape of the raw YAML documents as they come off disk. The parser validates
# against these before building the dataclasses in model.py.
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .model import VALID_SHELLS


def _stringify(value: Any) -> Any:
    # YAML turns `default: 8787` or `if: true` into int / bool
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    return value


class InputDocument(BaseModel):
    model_config = ConfigDict(extra="allow")

    description: str = ""
    required: bool = False
    default: str | None = None

    @field_validator("description", "default", mode="before")
    @classmethod
    def coerce_scalars(cls, value: Any) -> Any:
        return _stringify(value)


class StepDocument(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    name: str = ""
    id: str | None = None
    shell: str | None = None
    run: str | None = None
    uses: str | None = None
    condition: str | None = Field(default=None, alias="if")
    params: dict[str, str] | None = Field(default=None, alias="with")

    @field_validator("name", "id", "run", "condition", mode="before")
    @classmethod
    def coerce_scalars(cls, value: Any) -> Any:
        return _stringify(value)

    @field_validator("params", mode="before")
    @classmethod
    def coerce_params(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return {str(k): _stringify(v) for k, v in value.items()}
        return value

    @field_validator("shell")
    @classmethod
    def validate_shell(cls, shell: str | None) -> str | None:
        if shell is not None and shell not in VALID_SHELLS:
            raise ValueError(f"unsupported shell {shell!r}, expected one of {list(VALID_SHELLS)}")
        return shell


class RunsDocument(BaseModel):
    model_config = ConfigDict(extra="allow")

    using: str = ""
    steps: list[StepDocument] = Field(default_factory=list)

    @field_validator("steps", mode="before")
    @classmethod
    def none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class ActionDocument(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str = ""
    description: str = ""
    author: str = ""
    inputs: dict[str, InputDocument] = Field(default_factory=dict)
    runs: RunsDocument | None = None

    @field_validator("name", "description", "author", mode="before")
    @classmethod
    def coerce_scalars(cls, value: Any) -> Any:
        return "" if value is None else _stringify(value)

    @field_validator("inputs", mode="before")
    @classmethod
    def none_as_empty(cls, value: Any) -> Any:
        if value is None:
            return {}
        if isinstance(value, dict):
            # `some-input:` with no body
            return {k: ({} if v is None else v) for k, v in value.items()}
        return value


class StrategyDocument(BaseModel):
    model_config = ConfigDict(extra="allow")

    matrix: dict[str, Any] | None = None


class JobDocument(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    runs_on: str | list[str] = Field(default="", alias="runs-on")
    strategy: StrategyDocument | None = None
    steps: list[StepDocument] = Field(default_factory=list)

    @field_validator("steps", mode="before")
    @classmethod
    def none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class WorkflowDocument(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str = ""
    on: dict[str, Any] | None = None
    permissions: dict[str, str] | None = None
    jobs: dict[str, JobDocument] = Field(default_factory=dict)

    @field_validator("name", mode="before")
    @classmethod
    def coerce_name(cls, value: Any) -> Any:
        return "" if value is None else _stringify(value)

    @field_validator("on", mode="before")
    @classmethod
    def normalize_triggers(cls, value: Any) -> Any:
        # `on: push` and `on: [push, pull_request]` are shorthand for a mapping
        if isinstance(value, str):
            return {value: None}
        if isinstance(value, list):
            return {str(event): None for event in value}
        return value

    @field_validator("jobs", mode="before")
    @classmethod
    def none_as_empty(cls, value: Any) -> Any:
        return {} if value is None else value
