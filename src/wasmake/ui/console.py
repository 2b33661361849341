"""Console output formatting utilities for wasmake."""

from __future__ import annotations

import sys
from typing import Iterable, Optional


class Console:
    """Centralized console output formatting."""

    def __init__(self, debug: bool = False):
        """
        Initialize console formatter.

        Args:
            debug: If True, show detailed output including stack traces
        """
        self.debug = debug

    def print_header(self, title: str) -> None:
        """Print a section header."""
        print(f"\n{title}")
        print("-" * len(title))

    def print_run_started(
        self,
        project: str,
        task: str,
        profile: str,
        task_count: int,
    ) -> None:
        """Print run start information."""
        print("\nRUN STARTED")
        print(f"Project: {project}")
        print(f"Task: {task}")
        print(f"Profile: {profile}")
        print(f"Tasks: {task_count}")
        print()

    def print_plan(self, order: Iterable[str]) -> None:
        print("PLAN: " + " -> ".join(order))

    def print_task_start(self, name: str) -> None:
        print(f"\nTASK STARTED: {name}")

    def print_command(self, index: int, display: str) -> None:
        print(f"[{index}] $ {display}", flush=True)

    def print_task_success(self, name: str) -> None:
        print("STATUS: success")

    def print_task_placeholder(self, name: str) -> None:
        print("STATUS: nothing to run")

    def print_failure(
        self,
        name: str,
        reason: str,
        exit_code: Optional[int] = None,
        hint: Optional[str] = None,
    ) -> None:
        """
        Print failure message.

        Args:
            name: Task name
            reason: Failure reason/error message
            exit_code: Optional exit code
            hint: Optional hint for user
        """
        print(f"TASK FAILED: {name}")
        if exit_code is not None:
            print(f"Exit code: {exit_code}")
        if hint:
            print(f"Hint: {hint}")
        if reason:
            print(f"Error: {reason}")

    def print_results(self, results: dict[str, str]) -> None:
        """Print final results summary."""
        print("\n" + "=" * 40)
        print("RESULTS")
        print("=" * 40)
        for task, status in results.items():
            status_display = status.upper() if status != "ok" else "SUCCESS"
            print(f"  {task}: {status_display}")

    def print_watch_started(self, root: str, exclude: Iterable[str], on_change: str) -> None:
        print("\nWATCH STARTED")
        print(f"Root: {root}")
        print(f"Ignoring: {', '.join(exclude) or '-'}")
        print(f"On change: {on_change}")
        print("Press Ctrl-C to stop.", flush=True)

    def print_watch_triggered(self, paths: list[str]) -> None:
        shown = ", ".join(paths[:3])
        if len(paths) > 3:
            shown += f" (+{len(paths) - 3} more)"
        print(f"\nCHANGE DETECTED: {shown}", flush=True)

    def print_watch_waiting(self) -> None:
        print("Waiting for changes...", flush=True)

    def print_watch_stopped(self) -> None:
        print("\nWATCH STOPPED")

    def print_error(
        self,
        title: str,
        message: str,
        details: Optional[list[str]] = None,
        suggestion: Optional[str] = None,
    ) -> None:
        """
        Print structured error message.

        Args:
            title: Error title
            message: Main error message
            details: Optional list of detail lines
            suggestion: Optional suggestion for user
        """
        print(f"\nERROR: {title}", file=sys.stderr)
        print(f"{message}", file=sys.stderr)
        if details:
            for detail in details:
                print(f"  {detail}", file=sys.stderr)
        if suggestion:
            print(f"\n{suggestion}", file=sys.stderr)

    def print_exception(self, exc: Exception) -> None:
        """Print exception, with full traceback only in debug mode."""
        if self.debug:
            import traceback
            traceback.print_exc()
        else:
            print(f"Error: {exc}", file=sys.stderr)

    def print_info(self, message: str) -> None:
        """Print informational message."""
        print(message)

    def print_debug(self, message: str) -> None:
        """Print debug message (only if debug mode enabled)."""
        if self.debug:
            print(f"[DEBUG] {message}", file=sys.stderr)


# Global console instance (will be initialized by CLI)
_console: Optional[Console] = None


def get_console() -> Console:
    """Get the global console instance."""
    global _console
    if _console is None:
        _console = Console()
    return _console


def set_console(console: Console) -> None:
    """Set the global console instance."""
    global _console
    _console = console
