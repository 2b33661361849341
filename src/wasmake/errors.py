# errors.py
from __future__ import annotations

from dataclasses import dataclass, field


class WasmakeError(Exception):
    """Base class for every error raised by wasmake."""


# ----------------------------------------------------------------------
# Graph errors
# ----------------------------------------------------------------------

@dataclass
class UnknownTask(WasmakeError):
    name: str
    referenced_by: str | None = None
    known: list[str] = field(default_factory=list)

    def __str__(self) -> str:
        if self.referenced_by:
            msg = f"Task '{self.referenced_by}' needs missing task '{self.name}'"
        else:
            msg = f"Unknown task: '{self.name}'"
        if self.known:
            msg += f". Known tasks: {sorted(self.known)}"
        return msg


@dataclass
class CyclicDependency(WasmakeError):
    path: list[str]

    def __str__(self) -> str:
        return f"Cyclic dependency: {' -> '.join(self.path)}"


@dataclass
class DuplicateTask(WasmakeError):
    names: list[str]

    def __str__(self) -> str:
        return f"Duplicate task names found: {sorted(self.names)}"


# ----------------------------------------------------------------------
# Execution errors
# ----------------------------------------------------------------------

@dataclass
class UnsupportedVariant(WasmakeError):
    task: str
    profile: str
    available: list[str] = field(default_factory=list)

    def __str__(self) -> str:
        return (
            f"Task '{self.task}' has no command variant for profile '{self.profile}' "
            f"(available: {', '.join(self.available) or 'none'})"
        )


@dataclass
class SpawnFailure(WasmakeError):
    """The program could not be started at all (not found, bad cwd, ...)."""
    program: str
    reason: str
    hint: str | None = None

    def __str__(self) -> str:
        return f"Could not start '{self.program}': {self.reason}"


@dataclass
class TaskFailure(WasmakeError):
    """
    First failing command of a run.

    Returned by the runner as a value; it is an exception only so callers
    that prefer raising can do so.
    """
    task: str
    command_index: int
    exit_code: int
    command: str = ""
    spawn_error: SpawnFailure | None = None

    def __str__(self) -> str:
        return (
            f"[{self.task}] command #{self.command_index} failed "
            f"(exit={self.exit_code}): {self.command}"
        )
