# runner.py
from __future__ import annotations

from dataclasses import dataclass, field
from functools import partial
from pathlib import Path
from typing import Callable, Dict, List, Optional

from .dag import TaskGraph
from .errors import TaskFailure, WasmakeError
from .model import BuildProfile, Command, Task
from .shell import ExitStatus, execute
from .ui.console import Console, get_console
from .variants import select_commands
from .watch import WatchTrigger

Invoker = Callable[..., ExitStatus]


@dataclass
class RunResult:
    """
    Outcome of one orchestrator run.

    `executed` lists tasks whose commands were started, in order; aggregates
    without commands (`all`, `publish`) are not listed.
    """
    task: str
    profile: BuildProfile
    executed: List[str] = field(default_factory=list)
    failure: Optional[TaskFailure] = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @property
    def exit_code(self) -> int:
        if self.failure is None:
            return 0
        code = self.failure.exit_code
        if code < 0:
            # killed by signal N -> 128 + N, like a shell reports it
            return 128 - code
        return code or 1

    def statuses(self) -> Dict[str, str]:
        out = {name: "ok" for name in self.executed}
        if self.failure is not None:
            out[self.failure.task] = "failed"
        return out


# ----------------------------------------------------------------------
# Execution primitives
# ----------------------------------------------------------------------

def _run_commands(
    task: Task,
    commands: List[Command],
    invoker: Invoker,
    project_root: Path,
    console: Console,
) -> Optional[TaskFailure]:
    for index, cmd in enumerate(commands):
        console.print_command(index, cmd.display())
        status = invoker(cmd, project_root=project_root)
        if not status.ok:
            return TaskFailure(
                task=task.name,
                command_index=index,
                exit_code=status.code,
                command=cmd.display(),
                spawn_error=status.spawn_error,
            )
    return None


def plan(
    graph: TaskGraph,
    name: str,
    profile: BuildProfile,
    *,
    opt_in: bool = False,
    interactive: bool = False,
) -> List[tuple[Task, List[Command]]]:
    """
    Resolve `name` and pick every task's commands up front.

    Raises UnknownTask / CyclicDependency / UnsupportedVariant before
    anything has been executed.
    """
    order = graph.resolve(name)
    for task in order:
        if task.is_watch:
            raise WasmakeError(
                f"Task '{task.name}' is a watch entry point; start it with watch_task() "
                f"instead of running it as part of '{name}'"
            )
    return [
        (task, select_commands(task, profile, opt_in=opt_in, interactive=interactive))
        for task in order
    ]


# ----------------------------------------------------------------------
# Public API
# ----------------------------------------------------------------------

def run_task(
    graph: TaskGraph,
    name: str,
    profile: BuildProfile = BuildProfile.WEB,
    *,
    project_root: str | Path = ".",
    opt_in: bool = False,
    interactive: bool = False,
    invoker: Invoker = execute,
    console: Console | None = None,
) -> RunResult:
    """
    Run `name` and its prerequisites sequentially, fail-fast.

    The first non-zero exit stops the run: later commands of the same task
    and every later task are not started. The failure is returned in
    `RunResult.failure`, not raised.
    """
    console = console or get_console()
    root = Path(project_root).resolve()
    steps = plan(graph, name, profile, opt_in=opt_in, interactive=interactive)

    console.print_run_started(
        project=root.name,
        task=name,
        profile=profile.value,
        task_count=len(steps),
    )
    console.print_plan(task.name for task, _ in steps)

    result = RunResult(task=name, profile=profile)
    for task, commands in steps:
        console.print_task_start(task.name)
        if not commands:
            console.print_task_placeholder(task.name)
            continue

        result.executed.append(task.name)

        failure = _run_commands(task, commands, invoker, root, console)
        if failure is not None:
            result.failure = failure
            spawn = failure.spawn_error
            console.print_failure(
                task.name,
                str(spawn) if spawn else str(failure),
                exit_code=failure.exit_code,
                hint=spawn.hint if spawn else None,
            )
            break
        console.print_task_success(task.name)

    console.print_results(result.statuses())
    return result


def watch_task(
    graph: TaskGraph,
    name: str,
    profile: BuildProfile = BuildProfile.WEB,
    *,
    project_root: str | Path = ".",
    opt_in: bool = False,
    debounce: float = 0.2,
    invoker: Invoker = execute,
    console: Console | None = None,
    observer_factory=None,
) -> WatchTrigger:
    """
    Start the watch entry point `name` and block until it is cancelled.

    The triggered task is validated once up front so a broken graph fails
    before any watching starts.
    """
    console = console or get_console()
    task = graph[name]
    if task.watch is None:
        raise WasmakeError(f"Task '{name}' is not a watch task")

    spec = task.watch
    root = Path(project_root).resolve()
    run_profile = spec.profile or profile
    run_opt_in = opt_in or spec.opt_in

    plan(graph, spec.on_change, run_profile, opt_in=run_opt_in)

    on_change = partial(
        run_task,
        graph,
        spec.on_change,
        run_profile,
        project_root=root,
        opt_in=run_opt_in,
        invoker=invoker,
        console=console,
    )
    kwargs = {}
    if observer_factory is not None:
        kwargs["observer_factory"] = observer_factory
    trigger = WatchTrigger(
        spec,
        on_change,
        project_root=root,
        debounce=debounce,
        console=console,
        **kwargs,
    )
    trigger.run()
    return trigger
