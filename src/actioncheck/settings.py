from __future__ import annotations
import os

ACTION_PATH = os.environ.get("ACTIONCHECK_ACTION_PATH", "action.yml")
WORKFLOW_PATH = os.environ.get("ACTIONCHECK_WORKFLOW_PATH", os.path.join(".github", "workflows", "test.yml"))
MATRIX_JOB = os.environ.get("ACTIONCHECK_MATRIX_JOB", "test")
VERSION_AXIS = os.environ.get("ACTIONCHECK_VERSION_AXIS", "python-version")
