from .dsl import sh, task, watch, wf
from .dag import TaskGraph
from .model import BuildProfile, Command, Task, WatchSpec
from .runner import RunResult, run_task, watch_task
from .workflow import default_graph

__all__ = [
    "sh",
    "task",
    "watch",
    "wf",
    "TaskGraph",
    "BuildProfile",
    "Command",
    "Task",
    "WatchSpec",
    "RunResult",
    "run_task",
    "watch_task",
    "default_graph",
]
