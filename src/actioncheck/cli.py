# cli.py
from __future__ import annotations

import sys

import click

from actioncheck import settings
from actioncheck.analyzer import analyze_matrix, analyze_secrets, check_conventions, scan_text_for_secrets
from actioncheck.mocks import CommandMocker, StepAborted
from actioncheck.parser import ConfigError, ConfigParser
from actioncheck.simulator import simulate_action
from actioncheck.ui.console import Console, get_console, set_console
from actioncheck.validator import WorkflowValidator


def _parse_pairs(pairs: tuple[str, ...]) -> dict[str, str]:
    values: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"expected KEY=VALUE, got {pair!r}", param_hint="--input")
        values[key.strip()] = value
    return values


def _succeed(pattern: str):
    def handler():
        get_console().print_debug(f"mock hit: {pattern}")
        return True
    return handler


def _fail(pattern: str):
    def handler():
        raise StepAborted(f"mocked failure: {pattern}")
    return handler


def _config_failure(ctx: click.Context, e: ConfigError) -> None:
    console = get_console()
    console.print_error(
        "Invalid configuration",
        e.message,
        details=[f"path: {e.path}"] if e.path else None,
    )
    if ctx.obj.get("debug", False):
        console.print_exception(e)
    sys.exit(1)


@click.group()
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Enable debug mode (show stack traces and detailed output)",
)
@click.pass_context
def cli(ctx, debug):
    """actioncheck: lint and dry-run the deploy composite action."""
    console = Console(debug=debug)
    set_console(console)
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug
    ctx.obj["parser"] = ConfigParser()


@cli.command("inspect")
@click.option("--action", "action_path", default=None, help=f"Action file (default: {settings.ACTION_PATH})")
@click.option("--workflow", "workflow_path", default=None, help=f"Workflow file (default: {settings.WORKFLOW_PATH})")
@click.option("--version-axis", default=settings.VERSION_AXIS, show_default=True, help="Matrix key holding runtime versions")
@click.pass_context
def inspect_cmd(ctx, action_path, workflow_path, version_axis):
    """Parse the action and workflow and print their structure."""
    console = get_console()
    parser: ConfigParser = ctx.obj["parser"]

    try:
        action = parser.parse_action(action_path)
        workflow = parser.parse_workflow(workflow_path)
    except ConfigError as e:
        _config_failure(ctx, e)
        return

    console.print_header("ACTION")
    console.print_item("name", action.name)
    console.print_item("author", action.author or "-")
    for name, spec in action.inputs.items():
        flag = "required" if spec.required else f"optional, default={spec.default!r}"
        console.print_item(f"input {name}", flag)
    for step in action.steps:
        console.print_item(f"step {step.label}", step.shell or step.uses or "-")

    console.print_header("WORKFLOW")
    console.print_item("name", workflow.name)
    console.print_item("triggers", ", ".join(workflow.on))
    for job_name, job in workflow.jobs.items():
        console.print_item(f"job {job_name}", f"{len(job.steps)} step(s) on {job.runs_on}")

    matrix = analyze_matrix(workflow, job=settings.MATRIX_JOB, version_axis=version_axis)
    console.print_item("matrix combinations", matrix.total_combinations)


@cli.command()
@click.option("--action", "action_path", default=None, help=f"Action file (default: {settings.ACTION_PATH})")
@click.option("--workflow", "workflow_path", default=None, help="Also scan this workflow file")
@click.pass_context
def lint(ctx, action_path, workflow_path):
    """Run the secret and convention heuristics. Exits 1 on hardcoded secrets."""
    console = get_console()
    parser: ConfigParser = ctx.obj["parser"]

    try:
        action = parser.parse_action(action_path)
        workflow = parser.parse_workflow(workflow_path) if workflow_path else None
    except ConfigError as e:
        _config_failure(ctx, e)
        return

    secrets = analyze_secrets(action)
    conventions = check_conventions(action)

    console.print_header(f"LINT: {action.name}")
    console.print_check("hardcoded secrets", secrets.has_hardcoded_secrets)
    console.print_check("secure token passing", secrets.uses_secure_tokens)
    console.print_check("cleans up resources", secrets.cleans_up_resources)
    console.print_check("checks for wrangler.toml", conventions.checks_for_config_file)
    console.print_check("skips without wrangler.toml", conventions.skips_if_not_found)
    console.print_check("creates docs directory", conventions.creates_output_directory)

    leaked = secrets.has_hardcoded_secrets
    raw_text = parser.resolve(action_path, settings.ACTION_PATH).read_text(encoding="utf-8")
    for rule_name in scan_text_for_secrets(raw_text):
        console.print_item("token literal in file", rule_name)
        leaked = True

    if workflow is not None:
        workflow_secrets = analyze_secrets(workflow)
        console.print_check(f"hardcoded secrets in {workflow.name}", workflow_secrets.has_hardcoded_secrets)
        leaked = leaked or workflow_secrets.has_hardcoded_secrets
        matrix = analyze_matrix(workflow, job=settings.MATRIX_JOB, version_axis=settings.VERSION_AXIS)
        console.print_item("matrix combinations", matrix.total_combinations)

    if leaked:
        console.print_error(
            "Hardcoded secrets found",
            "A step script contains a literal GitHub token.",
            suggestion="Pass tokens through inputs or ${{ secrets.* }} instead.",
        )
        sys.exit(1)


@cli.command()
@click.option("--action", "action_path", default=None, help=f"Action file (default: {settings.ACTION_PATH})")
@click.option("--input", "input_pairs", multiple=True, help="Action input as KEY=VALUE (repeatable)")
@click.option("--mock", "mock_patterns", multiple=True, help="Command substring that succeeds (repeatable)")
@click.option("--fail", "fail_patterns", multiple=True, help="Command substring that fails (repeatable)")
@click.option("--permissive", is_flag=True, default=False, help="Let commands without a mock succeed")
@click.pass_context
def simulate(ctx, action_path, input_pairs, mock_patterns, fail_patterns, permissive):
    """Dry-run the action's steps against mocked commands."""
    console = get_console()
    parser: ConfigParser = ctx.obj["parser"]

    try:
        action = parser.parse_action(action_path)
    except ConfigError as e:
        _config_failure(ctx, e)
        return

    inputs = {name: spec.default for name, spec in action.inputs.items() if spec.default is not None}
    inputs.update(_parse_pairs(input_pairs))

    missing = WorkflowValidator(action).validate_inputs(inputs)
    if missing:
        console.print_error(
            "Missing inputs",
            "The action declares required inputs that were not supplied.",
            details=missing,
            suggestion="Pass them with --input KEY=VALUE",
        )
        sys.exit(1)

    mocker = CommandMocker()
    # failures first so they win over a broader success pattern
    for pattern in fail_patterns:
        mocker.mock_command(pattern, _fail(pattern))
    for pattern in mock_patterns:
        mocker.mock_command(pattern, _succeed(pattern))
    if permissive:
        mocker.mock_command("", _succeed("<any>"))

    summary: dict[str, str] = {}
    failed = False
    for index, (step, result) in enumerate(simulate_action(action, inputs, mocker), start=1):
        # steps may share a name
        row = f"{index}. {step.label}"
        if result is None:
            console.print_step_skipped(step.label)
            summary[row] = "skipped"
            continue

        console.print_step(step.label)
        if result.success:
            console.print_success(result.outputs)
            summary[row] = "success"
        else:
            console.print_failure(step.label, result.error or "")
            summary[row] = "failed"
            failed = True

    console.print_results(summary)
    if failed:
        sys.exit(1)


if __name__ == "__main__":
    cli()
