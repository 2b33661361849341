# shell.py
from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path

from .errors import SpawnFailure
from .model import Command

# Exit code shells use for "command not found"
SPAWN_FAILURE_CODE = 127

TOOL_HINTS = {
    "cargo": "Install the Rust toolchain (https://rustup.rs) or fix PATH.",
    "rustup": "Install rustup (https://rustup.rs) or fix PATH.",
    "wasm-pack": "Install wasm-pack (cargo install wasm-pack).",
    "trunk": "Install trunk (cargo install trunk).",
}

# cargo subcommands that ship as separate binaries
CARGO_PLUGIN_HINTS = {
    "deny": "Install cargo-deny (cargo install cargo-deny).",
    "udeps": "Install cargo-udeps (cargo +nightly install cargo-udeps).",
    "watch": "Install cargo-watch (cargo install cargo-watch).",
}


@dataclass(frozen=True)
class ExitStatus:
    code: int
    spawn_error: SpawnFailure | None = None

    @property
    def ok(self) -> bool:
        return self.code == 0


def hint_for(command: Command) -> str | None:
    if command.program == "cargo":
        for arg in command.args:
            if arg.startswith("+"):
                continue
            if arg in CARGO_PLUGIN_HINTS:
                return CARGO_PLUGIN_HINTS[arg]
            break
    return TOOL_HINTS.get(command.program)


def execute(
    command: Command,
    *,
    project_root: str | Path = ".",
) -> ExitStatus:
    """
    Run one command to completion.

    Output is not captured: the child inherits our stdin/stdout/stderr and
    environment so tool output shows up live. Ctrl-C reaches the child
    through the terminal; we keep waiting for it and never kill it.
    """
    cwd = (Path(project_root) / (command.cwd or ".")).resolve()
    if not cwd.is_dir():
        return ExitStatus(
            code=SPAWN_FAILURE_CODE,
            spawn_error=SpawnFailure(command.program, f"working directory not found: {cwd}"),
        )

    try:
        proc = subprocess.Popen(
            command.argv(),
            shell=False,
            cwd=str(cwd),
        )
    except FileNotFoundError:
        return ExitStatus(
            code=SPAWN_FAILURE_CODE,
            spawn_error=SpawnFailure(
                command.program,
                "program not found on PATH",
                hint=hint_for(command),
            ),
        )
    except PermissionError as e:
        return ExitStatus(
            code=SPAWN_FAILURE_CODE,
            spawn_error=SpawnFailure(command.program, f"permission denied: {e}"),
        )
    except OSError as e:
        return ExitStatus(
            code=SPAWN_FAILURE_CODE,
            spawn_error=SpawnFailure(command.program, e.strerror or str(e)),
        )

    try:
        proc.wait()
    except KeyboardInterrupt:
        proc.wait()
        raise
    return ExitStatus(code=proc.returncode)
