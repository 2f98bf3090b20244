# analyzer.py
"""
Regex heuristics over step scripts.

None of this is a security guarantee: each check is a named list of patterns
(`PatternRule`) and a report flag is set as soon as any step body matches.
Add a rule to one of the rule lists below to widen a check.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable, List, Pattern, Sequence, Union

from .model import ActionDefinition, Step, WorkflowDefinition


@dataclass(frozen=True)
class PatternRule:
    name: str
    patterns: Sequence[Pattern[str]]

    def matches(self, text: str) -> bool:
        return any(p.search(text) for p in self.patterns)


def rule(name: str, *patterns: str) -> PatternRule:
    return PatternRule(name=name, patterns=tuple(re.compile(p) for p in patterns))


# ---------------------------------------------------------------------
# Rule families
# ---------------------------------------------------------------------

HARDCODED_SECRET_RULES: List[PatternRule] = [
    rule("github-classic-token", r"ghp_[a-zA-Z0-9]{36}"),
    rule("github-fine-grained-pat", r"github_pat_[a-zA-Z0-9_]+"),
]

SECURE_TOKEN_RULES: List[PatternRule] = [
    rule("x-access-token-interpolation", r"x-access-token:\$\{\{"),
]

CLEANUP_RULES: List[PatternRule] = [
    rule("recursive-delete", r"rm -rf", r"Remove-Item -Recurse -Force"),
]

CONFIG_FILE_CHECK_RULES: List[PatternRule] = [
    rule("wrangler-toml-exists", r"if \[ -f wrangler\.toml \]", r"Test-Path wrangler\.toml"),
]

SKIP_MESSAGE_RULES: List[PatternRule] = [
    rule("wrangler-skip-message", r"No wrangler\.toml found, skipping"),
]

OUTPUT_DIRECTORY_RULES: List[PatternRule] = [
    rule("docs-directory", r"mkdir -p docs", r"New-Item -ItemType Directory -Path docs"),
]


# ---------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------

@dataclass
class SecretsReport:
    has_hardcoded_secrets: bool = False
    uses_secure_tokens: bool = False
    cleans_up_resources: bool = False


@dataclass
class MatrixReport:
    operating_systems: list = field(default_factory=list)
    runtime_versions: list = field(default_factory=list)
    total_combinations: int = 0


@dataclass
class ConventionsReport:
    checks_for_config_file: bool = False
    skips_if_not_found: bool = False
    creates_output_directory: bool = False


StepSource = Union[ActionDefinition, WorkflowDefinition, Iterable[Step]]


def _scripts(source: StepSource) -> List[str]:
    if isinstance(source, ActionDefinition):
        steps: Iterable[Step] = source.steps
    elif isinstance(source, WorkflowDefinition):
        steps = source.all_steps()
    else:
        steps = source
    return [step.run for step in steps if step.run]


def _any_match(rules: Sequence[PatternRule], text: str) -> bool:
    return any(r.matches(text) for r in rules)


# ---------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------

def analyze_secrets(source: StepSource) -> SecretsReport:
    report = SecretsReport()
    for script in _scripts(source):
        if _any_match(HARDCODED_SECRET_RULES, script):
            report.has_hardcoded_secrets = True
        if _any_match(SECURE_TOKEN_RULES, script):
            report.uses_secure_tokens = True
        if _any_match(CLEANUP_RULES, script):
            report.cleans_up_resources = True
    return report


def analyze_matrix(
    workflow: WorkflowDefinition,
    *,
    job: str = "test",
    os_axis: str = "os",
    version_axis: str = "python-version",
) -> MatrixReport:
    """
    Size of the os x version matrix of one job.

    Values are not deduplicated: a matrix listing the same OS twice counts
    it twice.
    """
    test_job = workflow.jobs.get(job)
    if test_job is None or not test_job.matrix:
        return MatrixReport()

    operating_systems = list(test_job.matrix.get(os_axis) or [])
    runtime_versions = list(test_job.matrix.get(version_axis) or [])
    return MatrixReport(
        operating_systems=operating_systems,
        runtime_versions=runtime_versions,
        total_combinations=len(operating_systems) * len(runtime_versions),
    )


def check_conventions(source: StepSource) -> ConventionsReport:
    report = ConventionsReport()
    for script in _scripts(source):
        if _any_match(CONFIG_FILE_CHECK_RULES, script):
            report.checks_for_config_file = True
        if _any_match(SKIP_MESSAGE_RULES, script):
            report.skips_if_not_found = True
        if _any_match(OUTPUT_DIRECTORY_RULES, script):
            report.creates_output_directory = True
    return report


def scan_text_for_secrets(text: str) -> List[str]:
    """
    Names of the hardcoded-secret rules that hit raw document text.

    Lines that reference `${{ secrets.` are skipped.
    """
    hits: List[str] = []
    for line in text.splitlines():
        if "${{ secrets." in line:
            continue
        for r in HARDCODED_SECRET_RULES:
            if r.name not in hits and r.matches(line):
                hits.append(r.name)
    return hits
