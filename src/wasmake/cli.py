# cli.py
from __future__ import annotations

import sys

import click

from wasmake.config import Settings, load_graph
from wasmake.errors import WasmakeError
from wasmake.model import TASK_NAMES, BuildProfile
from wasmake.runner import plan as plan_task
from wasmake.runner import run_task, watch_task
from wasmake.ui.console import Console, get_console, set_console


@click.group()
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Enable debug mode (show stack traces and detailed output)",
)
@click.option(
    "--profile",
    type=click.Choice([p.value for p in BuildProfile], case_sensitive=False),
    default=BuildProfile.WEB.value,
    show_default=True,
    envvar="WASMAKE_PROFILE",
    help="Build target: native binary/library or wasm for the web",
)
@click.option(
    "--project-dir",
    default=".",
    envvar="WASMAKE_PROJECT_DIR",
    type=click.Path(file_okay=False),
    help="Crate root commands run from",
)
@click.option(
    "--tasks-file",
    default=None,
    envvar="WASMAKE_TASKS_FILE",
    type=click.Path(dir_okay=False),
    help="Python file defining the task table (defaults to wasmake_tasks.py if present)",
)
@click.option(
    "--browser-tests/--no-browser-tests",
    default=False,
    envvar="WASMAKE_BROWSER_TESTS",
    help="Also run opt-in headless browser tests",
)
@click.option(
    "--debounce",
    default=0.2,
    type=float,
    show_default=True,
    envvar="WASMAKE_DEBOUNCE",
    help="Seconds to wait for more changes before a watch re-run",
)
@click.option(
    "--interactive/--no-interactive",
    default=None,
    help="Open generated docs etc. (defaults to whether stdout is a terminal)",
)
@click.pass_context
def cli(ctx, debug, profile, project_dir, tasks_file, browser_tests, debounce, interactive):
    """wasmake: task runner for crates built natively and to WebAssembly."""
    console = Console(debug=debug)
    set_console(console)
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug
    try:
        ctx.obj["settings"] = Settings.create(
            project_root=project_dir,
            profile=profile,
            tasks_file=tasks_file,
            opt_in=browser_tests,
            debounce=debounce,
            debug=debug,
            interactive=interactive,
        )
    except ValueError as e:
        raise click.BadParameter(str(e)) from e


def _fail(ctx, exc: Exception) -> None:
    console = get_console()
    if isinstance(exc, WasmakeError):
        console.print_error("Task error", str(exc))
    else:
        console.print_exception(exc)
    if ctx.obj.get("debug", False) and isinstance(exc, WasmakeError):
        import traceback
        traceback.print_exc()
    sys.exit(1)


def _invoke(ctx, name: str) -> None:
    console = get_console()
    settings: Settings = ctx.obj["settings"]
    console.print_debug(f"settings: {settings}")

    try:
        graph = load_graph(settings)
        task = graph[name]

        if task.is_watch:
            watch_task(
                graph,
                name,
                settings.profile,
                project_root=settings.project_root,
                opt_in=settings.opt_in,
                debounce=settings.debounce,
                console=console,
            )
            return

        result = run_task(
            graph,
            name,
            settings.profile,
            project_root=settings.project_root,
            opt_in=settings.opt_in,
            interactive=settings.interactive,
            console=console,
        )
    except KeyboardInterrupt:
        console.print_info("\nInterrupted by user")
        sys.exit(130)
    except Exception as e:
        _fail(ctx, e)

    if not result.ok:
        sys.exit(result.exit_code)


def _task_command(name: str) -> click.Command:
    @click.pass_context
    def callback(ctx):
        _invoke(ctx, name)

    return click.Command(
        name,
        callback=callback,
        help=f"Run the '{name}' task (and its prerequisites).",
    )


for _name in TASK_NAMES:
    cli.add_command(_task_command(_name))


@cli.command("run")
@click.argument("name")
@click.pass_context
def run_cmd(ctx, name):
    """Run any task from the loaded task table by NAME."""
    _invoke(ctx, name)


@cli.command("list")
@click.pass_context
def list_tasks(ctx):
    """List tasks, their prerequisites and what they do."""
    console = get_console()
    try:
        graph = load_graph(ctx.obj["settings"])
    except Exception as e:
        _fail(ctx, e)

    console.print_header("Tasks")
    for task in graph:
        needs = f" (needs: {', '.join(task.needs)})" if task.needs else ""
        kind = " [watch]" if task.is_watch else ""
        console.print_info(f"  {task.name}{kind}{needs}  {task.description}".rstrip())


@cli.command("plan")
@click.argument("name")
@click.pass_context
def plan_cmd(ctx, name):
    """Show what NAME would run under the active profile, without running it."""
    console = get_console()
    settings: Settings = ctx.obj["settings"]
    profile, opt_in = settings.profile, settings.opt_in
    try:
        graph = load_graph(settings)
        spec = graph[name].watch
        if spec is not None:
            console.print_info(
                f"{name}: watch {spec.root} (ignoring {', '.join(spec.exclude) or '-'}) "
                f"-> {spec.on_change}"
            )
            name = spec.on_change
            profile = spec.profile or profile
            opt_in = opt_in or spec.opt_in
        steps = plan_task(
            graph,
            name,
            profile,
            opt_in=opt_in,
            interactive=settings.interactive,
        )
    except Exception as e:
        _fail(ctx, e)

    console.print_plan(task.name for task, _ in steps)
    for task, commands in steps:
        console.print_task_start(task.name)
        if not commands:
            console.print_task_placeholder(task.name)
        for index, cmd in enumerate(commands):
            console.print_command(index, cmd.display())


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
