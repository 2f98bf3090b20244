from .analyzer import analyze_matrix, analyze_secrets, check_conventions
from .mocks import CommandMocker, NoMockError, StepAborted
from .model import ActionDefinition, Step, StepResult, WorkflowDefinition, WorkflowInput
from .parser import ConfigError, ConfigParser
from .simulator import simulate_action, simulate_step
from .validator import WorkflowValidator

__all__ = [
    "analyze_matrix",
    "analyze_secrets",
    "check_conventions",
    "CommandMocker",
    "NoMockError",
    "StepAborted",
    "ActionDefinition",
    "Step",
    "StepResult",
    "WorkflowDefinition",
    "WorkflowInput",
    "ConfigError",
    "ConfigParser",
    "simulate_action",
    "simulate_step",
    "WorkflowValidator",
]
