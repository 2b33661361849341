# src/wasmake/dsl.py
from __future__ import annotations

import shlex
from dataclasses import replace
from typing import Dict, Iterable, List, Optional

from .model import BuildProfile, Command, Task, WatchSpec


# ---------------------------------------------------------------------
# Command helper
# ---------------------------------------------------------------------

def sh(
    cmd: str,
    *,
    cwd: str | None = None,
    opt_in: bool = False,
    interactive: str | None = None,
) -> Command:
    """
    Create a command from a shell-like string.

    The string is only split (shlex), never run through a shell:
        sh("cargo +nightly udeps")
        sh("cargo doc --no-deps", interactive="--open")
    """
    argv = shlex.split(cmd)
    if not argv:
        raise ValueError("sh() needs a non-empty command")
    return Command(
        program=argv[0],
        args=tuple(argv[1:]),
        cwd=cwd,
        opt_in=opt_in,
        interactive_args=tuple(shlex.split(interactive)) if interactive else (),
    )


# ---------------------------------------------------------------------
# Task helpers
# ---------------------------------------------------------------------

def task(
    name: str,
    *commands: Command,  # allow: task("x", sh(...), sh(...))
    needs: Optional[List[str]] = None,
    native: Optional[Iterable[Command]] = None,
    web: Optional[Iterable[Command]] = None,
    cwd: str | None = None,  # default cwd applied to commands missing cwd
    description: str = "",
) -> Task:
    variants: Dict[BuildProfile, tuple[Command, ...]] = {}
    if native is not None:
        variants[BuildProfile.NATIVE] = tuple(native)
    if web is not None:
        variants[BuildProfile.WEB] = tuple(web)

    if commands and variants:
        raise ValueError(
            f"task({name!r}) takes either plain commands or native=/web= variants, not both"
        )

    cmds = tuple(commands)
    if cwd is not None:
        cmds = tuple(_with_cwd(c, cwd) for c in cmds)
        variants = {p: tuple(_with_cwd(c, cwd) for c in seq) for p, seq in variants.items()}

    return Task(
        name=name,
        needs=tuple(needs or ()),
        commands=cmds,
        variants=variants,
        description=description,
    )


def watch(
    name: str,
    on_change: str,
    *,
    root: str = ".",
    exclude: Optional[Iterable[str]] = None,
    profile: BuildProfile | str | None = None,
    opt_in: bool = False,
    description: str = "",
) -> Task:
    """Long-running entry point that re-runs `on_change` when files change."""
    spec = WatchSpec(
        root=root,
        on_change=on_change,
        exclude=tuple(exclude or ()),
        profile=BuildProfile.parse(profile) if profile is not None else None,
        opt_in=opt_in,
    )
    return Task(name=name, watch=spec, description=description)


def _with_cwd(command: Command, cwd: str) -> Command:
    if command.cwd is not None:
        return command
    return replace(command, cwd=cwd)


# ---------------------------------------------------------------------
# Workflow helper (single-file story)
# ---------------------------------------------------------------------

def wf(*tasks: Task) -> List[Task]:
    """
    Task table helper for tasks files:

        from wasmake import wf, task, sh

        def workflow():
            return wf(
                task("lint", sh("cargo clippy")),
                task("all", needs=["lint"]),
            )
    """
    return list(tasks)
