# simulator.py
"""
Dry-run of composite action steps.

Scripts are never executed. Each line is either recognised as one of the
GitHub output idioms (and recorded on the mocker) or handed to the mocker as
a command. The shell designator picks the strategy:

  powershell  `echo "k=v" >> $env:GITHUB_OUTPUT`, plus the try/catch probe
              used to detect whether bash is available
  others      `echo "k=v" >> $GITHUB_OUTPUT`, everything else is dispatched
"""
from __future__ import annotations

import re
from typing import Any, Dict, List, Mapping, Optional, Pattern, Tuple

from .mocks import CommandMocker
from .model import ActionDefinition, Step, StepResult, output_key
from .validator import condition_holds

BASH_AVAILABLE_OUTPUT = "bash_available"


# ---------------------------------------------------------------------
# Shell strategies
# ---------------------------------------------------------------------

class ShellStrategy:
    output_pattern: Pattern[str]

    def record_output(self, line: str, step: Step, mocker: CommandMocker) -> bool:
        match = self.output_pattern.search(line)
        if match is None:
            return False
        key, value = match.groups()
        mocker.set_output(output_key(step.id, key), value)
        return True

    def handle(self, line: str, step: Step, mocker: CommandMocker) -> None:
        raise NotImplementedError


class DefaultShell(ShellStrategy):
    output_pattern = re.compile(r'echo "(.+?)=(.+?)" >> \$GITHUB_OUTPUT')

    def handle(self, line: str, step: Step, mocker: CommandMocker) -> None:
        if "echo" in line and "GITHUB_OUTPUT" in line and self.record_output(line, step, mocker):
            return
        mocker.execute(line)


class PowerShell(ShellStrategy):
    output_pattern = re.compile(r'echo "(.+?)=(.+?)" >> \$env:GITHUB_OUTPUT')

    def handle(self, line: str, step: Step, mocker: CommandMocker) -> None:
        # nothing is dispatched under powershell; only outputs are tracked
        if "echo" in line and "GITHUB_OUTPUT" in line:
            self.record_output(line, step, mocker)
        elif "try {" in line:
            mocker.set_output(output_key(step.id, BASH_AVAILABLE_OUTPUT), "true")
        elif "} catch {" in line:
            mocker.set_output(output_key(step.id, BASH_AVAILABLE_OUTPUT), "false")


STRATEGIES: Dict[str, ShellStrategy] = {
    "powershell": PowerShell(),
}
DEFAULT_STRATEGY: ShellStrategy = DefaultShell()


def strategy_for(shell: str | None) -> ShellStrategy:
    return STRATEGIES.get(shell or "", DEFAULT_STRATEGY)


# ---------------------------------------------------------------------
# Simulation
# ---------------------------------------------------------------------

def interpolate_inputs(script: str, inputs: Mapping[str, Any]) -> str:
    for key, value in inputs.items():
        pattern = re.compile(r"\$\{\{\s*inputs\." + re.escape(str(key)) + r"\s*\}\}")
        script = pattern.sub(lambda _m, v=str(value): v, script)
    return script


def _error_text(exc: Exception) -> str:
    return str(exc) or type(exc).__name__


def simulate_step(step: Step, inputs: Mapping[str, str], mocker: CommandMocker) -> StepResult:
    if not step.run:
        return StepResult(success=True)

    strategy = strategy_for(step.shell)

    try:
        script = interpolate_inputs(step.run, inputs)
        for line in script.split("\n"):
            trimmed = line.strip()
            if not trimmed or trimmed.startswith("#"):
                continue
            strategy.handle(trimmed, step, mocker)
    except Exception as e:
        return StepResult(success=False, error=_error_text(e))

    prefix = f"steps.{step.id}"
    return StepResult(
        success=True,
        outputs={k: v for k, v in mocker.outputs.items() if k.startswith(prefix)},
    )


def simulate_action(
    action: ActionDefinition,
    inputs: Mapping[str, str],
    mocker: CommandMocker,
) -> List[Tuple[Step, Optional[StepResult]]]:
    """
    Simulate every step in order.

    Steps whose guard does not hold against the outputs recorded so far are
    skipped (result None). The run stops after the first failing step.
    """
    results: List[Tuple[Step, Optional[StepResult]]] = []
    for step in action.steps:
        if not condition_holds(step.condition, mocker.outputs):
            results.append((step, None))
            continue

        result = simulate_step(step, inputs, mocker)
        results.append((step, result))
        if not result.success:
            break
    return results
