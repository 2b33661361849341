# model.py
from __future__ import annotations

import shlex
from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Optional

# Closed set of phases the canonical graph defines.
TASK_NAMES = (
    "clean",
    "check",
    "checkdeny",
    "doc",
    "build",
    "test",
    "publish",
    "watch",
    "wtest",
    "wtable",
    "all",
)


class BuildProfile(str, Enum):
    """Compilation target a run is made for."""
    NATIVE = "native"
    WEB = "web"

    @classmethod
    def parse(cls, value: "str | BuildProfile") -> "BuildProfile":
        if isinstance(value, BuildProfile):
            return value
        try:
            return cls(value.strip().lower())
        except ValueError:
            choices = ", ".join(p.value for p in cls)
            raise ValueError(f"Unknown build profile {value!r} (expected one of: {choices})") from None


@dataclass(frozen=True)
class Command:
    """A single external program invocation inside a task."""
    program: str
    args: tuple[str, ...] = ()
    cwd: str | None = None

    # Only runs when explicitly enabled (e.g. headless browser tests)
    opt_in: bool = False
    # Appended only when attached to a terminal (e.g. `--open`)
    interactive_args: tuple[str, ...] = ()

    def argv(self) -> list[str]:
        return [self.program, *self.args]

    def display(self) -> str:
        text = shlex.join(self.argv())
        if self.cwd:
            text = f"(cd {self.cwd}) {text}"
        return text


@dataclass(frozen=True)
class WatchSpec:
    """What a long-running watch entry point observes and re-runs."""
    root: str
    on_change: str
    exclude: tuple[str, ...] = ()

    # Forced profile / opt-in commands for the triggered run
    profile: Optional[BuildProfile] = None
    opt_in: bool = False


@dataclass(frozen=True)
class Task:
    """
    A named phase: ordered commands + prerequisites.

    `commands` are profile independent. When `variants` is non-empty it
    replaces `commands` and the active profile picks the sequence.
    A task with neither is a pure aggregate (`all`) or a placeholder.
    """
    name: str
    needs: tuple[str, ...] = ()
    commands: tuple[Command, ...] = ()
    variants: Mapping[BuildProfile, tuple[Command, ...]] = field(default_factory=dict)
    watch: WatchSpec | None = None
    description: str = ""

    @property
    def is_watch(self) -> bool:
        return self.watch is not None
