from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
import yaml

from actioncheck.mocks import CommandMocker
from actioncheck.parser import ConfigParser

ROOT = Path(__file__).resolve().parent.parent
ACTION_PATH = ROOT / "action.yml"
WORKFLOW_PATH = ROOT / ".github" / "workflows" / "test.yml"

FULL_INPUTS = {
    "github-token": "test-github-token",
    "public-repo-token": "test-public-token",
    "private-repo": "owner/private-repo",
    "public-repo": "owner/public-repo",
    "wrangler-port": "8787",
}


def write_yaml(directory: Path, name: str, data: Any) -> Path:
    path = directory / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
    return path


def minimal_action(**overrides: Any) -> dict[str, Any]:
    action: dict[str, Any] = {
        "name": "Test",
        "description": "Test action",
        "inputs": {},
        "runs": {"using": "composite", "steps": [{"name": "Hello", "shell": "bash", "run": "echo hello"}]},
    }
    action.update(overrides)
    return action


@pytest.fixture
def parser() -> ConfigParser:
    return ConfigParser(root=ROOT)


@pytest.fixture
def mocker() -> CommandMocker:
    return CommandMocker()


@pytest.fixture
def action_text() -> str:
    return ACTION_PATH.read_text(encoding="utf-8")
