# variants.py
from __future__ import annotations

from dataclasses import replace
from typing import List

from .errors import UnsupportedVariant
from .model import BuildProfile, Command, Task


def select_commands(
    task: Task,
    profile: BuildProfile,
    *,
    opt_in: bool = False,
    interactive: bool = False,
) -> List[Command]:
    """
    Commands `task` runs under `profile`.

    Tasks without variants ignore the profile. Opt-in commands are dropped
    unless `opt_in`; interactive-only arguments are folded into `args` when
    `interactive`.
    """
    if task.variants:
        if profile not in task.variants:
            raise UnsupportedVariant(
                task=task.name,
                profile=profile.value,
                available=[p.value for p in task.variants],
            )
        commands = task.variants[profile]
    else:
        commands = task.commands

    selected: List[Command] = []
    for cmd in commands:
        if cmd.opt_in and not opt_in:
            continue
        if interactive and cmd.interactive_args:
            cmd = replace(cmd, args=cmd.args + cmd.interactive_args, interactive_args=())
        selected.append(cmd)
    return selected
