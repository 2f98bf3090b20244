"""Terminal output for the actioncheck commands."""

from __future__ import annotations

import sys
from typing import Mapping, Optional


class Console:
    """
    All user-facing output goes through here.

    Normal output is written to stdout; errors and debug lines to stderr.
    """

    RULE_WIDTH = 40

    def __init__(self, debug: bool = False):
        """
        Initialize the console.

        Args:
            debug: If True, print full error details and tracebacks
        """
        self.debug = debug

    # ---- sections ----

    def print_header(self, title: str) -> None:
        """Print a section header."""
        print(f"\n{title}")
        print("-" * len(title))

    def print_item(self, label: str, value: object = None) -> None:
        """Print an indented label, with its value when given."""
        print(f"  {label}" if value is None else f"  {label}: {value}")

    def print_check(self, label: str, ok: bool) -> None:
        """Print a yes/no heuristic result."""
        print(f"  {label}: {'yes' if ok else 'no'}")

    # ---- simulation ----

    def print_step(self, name: str) -> None:
        """Print step start message."""
        print(f"STEP: {name}")

    def print_step_skipped(self, name: str) -> None:
        """Print a step whose guard did not hold."""
        self.print_step(name)
        print("STATUS: skipped (condition not met)")

    def print_success(self, outputs: Optional[Mapping[str, str]] = None) -> None:
        """Step passed; list whatever outputs it recorded."""
        print("STATUS: success")
        for key, value in (outputs or {}).items():
            print(f"  {key} = {value}")

    def print_failure(self, name: str, reason: str) -> None:
        """
        Print step failure message.

        Args:
            name: Step label
            reason: Error text; only its first line unless in debug mode
        """
        print(f"STEP FAILED: {name}")
        if self.debug:
            print(f"Error details: {reason}")
            return
        first_line = reason.split("\n")[0] if reason else "Unknown error"
        print(f"Error: {first_line}")

    def print_results(self, results: Mapping[str, str]) -> None:
        """Print final results summary."""
        print("\n" + "=" * self.RULE_WIDTH)
        print("RESULTS")
        print("=" * self.RULE_WIDTH)
        for step, status in results.items():
            print(f"  {step}: {status.upper()}")

    # ---- errors ----

    def print_error(
        self,
        title: str,
        message: str,
        details: Optional[list[str]] = None,
        suggestion: Optional[str] = None,
    ) -> None:
        """
        Print a structured error to stderr.

        Args:
            title: Short error title
            message: One-line explanation
            details: Extra lines, indented under the message
            suggestion: What the user can do about it
        """
        lines = [f"\nERROR: {title}", message]
        lines += [f"  {detail}" for detail in details or []]
        if suggestion:
            lines.append(f"\n{suggestion}")
        print("\n".join(lines), file=sys.stderr)

    def print_exception(self, exc: BaseException) -> None:
        """Traceback in debug mode, one line otherwise."""
        if self.debug:
            import traceback
            traceback.print_exception(type(exc), exc, exc.__traceback__)
        else:
            print(f"Error: {exc}", file=sys.stderr)

    def print_debug(self, message: str) -> None:
        """Print debug message (only if debug mode enabled)."""
        if self.debug:
            print(f"[DEBUG] {message}", file=sys.stderr)


_console: Optional[Console] = None


def get_console() -> Console:
    """Shared console, created on first use if the CLI has not set one."""
    global _console
    if _console is None:
        _console = Console()
    return _console


def set_console(console: Console) -> None:
    """Replace the shared console (the CLI does this once per invocation)."""
    global _console
    _console = console
