# config.py
from __future__ import annotations

import runpy
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from .dag import TaskGraph
from .model import BuildProfile, Task
from .workflow import default_graph

DEFAULT_TASKS_FILE = "wasmake_tasks.py"


@dataclass(frozen=True)
class Settings:
    """Everything a single invocation needs, resolved once at startup."""
    project_root: Path = Path(".")
    profile: BuildProfile = BuildProfile.WEB
    tasks_file: Optional[Path] = None
    opt_in: bool = False
    debounce: float = 0.2
    debug: bool = False
    interactive: bool = False

    @classmethod
    def create(
        cls,
        *,
        project_root: str | Path = ".",
        profile: str | BuildProfile = BuildProfile.WEB,
        tasks_file: str | Path | None = None,
        opt_in: bool = False,
        debounce: float = 0.2,
        debug: bool = False,
        interactive: bool | None = None,
    ) -> "Settings":
        if debounce < 0:
            raise ValueError(f"debounce must be >= 0, got {debounce}")
        if interactive is None:
            interactive = sys.stdout.isatty()
        return cls(
            project_root=Path(project_root).expanduser().resolve(),
            profile=BuildProfile.parse(profile),
            tasks_file=Path(tasks_file).expanduser().resolve() if tasks_file else None,
            opt_in=opt_in,
            debounce=debounce,
            debug=debug,
            interactive=interactive,
        )


# ----------------------------------------------------------------------
# Tasks file loading (local file)
# ----------------------------------------------------------------------

def find_tasks_file(project_root: str | Path) -> Optional[Path]:
    candidate = Path(project_root) / DEFAULT_TASKS_FILE
    return candidate if candidate.is_file() else None


def load_tasks(path: str | Path) -> List[Task]:
    """
    Load a task table from a python file path.

    The file must define either:
      - workflow() -> List[Task]
      - TASKS = [Task, ...]
    """
    tasks_path = Path(path).expanduser().resolve()
    if not tasks_path.exists():
        raise FileNotFoundError(f"Tasks file not found: {tasks_path}")
    if tasks_path.suffix != ".py":
        raise ValueError(f"Tasks file must be a .py file, got: {tasks_path.name}")

    module_name = f"wasmake_tasks_{tasks_path.stem}"
    globals_dict = runpy.run_path(str(tasks_path), run_name=module_name)

    tasks = None
    if "workflow" in globals_dict and callable(globals_dict["workflow"]):
        tasks = globals_dict["workflow"]()
    elif "TASKS" in globals_dict:
        tasks = globals_dict["TASKS"]

    if not isinstance(tasks, list) or not all(isinstance(t, Task) for t in tasks):
        raise TypeError(
            "Tasks file must return/define a List[Task]. "
            "Define workflow() -> List[Task] or TASKS = [Task, ...]."
        )
    return tasks


def load_graph(settings: Settings) -> TaskGraph:
    """Graph from the explicit/discovered tasks file, else the built-in table."""
    path = settings.tasks_file or find_tasks_file(settings.project_root)
    if path is None:
        return default_graph()
    return TaskGraph(load_tasks(path))
