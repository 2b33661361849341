# dag.py
from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Set

from .errors import CyclicDependency, DuplicateTask, UnknownTask
from .model import Task


class TaskGraph:
    """
    Read-only mapping from task name to Task.

    Requires:
      - task.name: str (unique)
      - task.needs: names of tasks that must run BEFORE this task
    """

    def __init__(self, tasks: Iterable[Task]):
        tasks = list(tasks)
        names = [t.name for t in tasks]
        if len(set(names)) != len(names):
            dupes = sorted({n for n in names if names.count(n) > 1})
            raise DuplicateTask(dupes)

        self._tasks: Dict[str, Task] = {t.name: t for t in tasks}

        for t in tasks:
            for need in t.needs:
                if need not in self._tasks:
                    raise UnknownTask(need, referenced_by=t.name, known=names)

    # ---- mapping protocol ----
    def __getitem__(self, name: str) -> Task:
        try:
            return self._tasks[name]
        except KeyError:
            raise UnknownTask(name, known=list(self._tasks)) from None

    def __contains__(self, name: object) -> bool:
        return name in self._tasks

    def __iter__(self) -> Iterator[Task]:
        return iter(self._tasks.values())

    def __len__(self) -> int:
        return len(self._tasks)

    def names(self) -> List[str]:
        return list(self._tasks)

    def resolve(self, name: str) -> List[Task]:
        """
        Linearize `name` and its prerequisites.

        Depth-first post-order: every prerequisite lands before its
        dependents, each task exactly once (first occurrence wins).
        `name` itself is always last, aggregates included: resolve("all")
        is the five phases followed by `all`.
        """
        order: List[Task] = []
        done: Set[str] = set()
        path: List[str] = []

        def visit(current: str) -> None:
            if current in done:
                return
            if current in path:
                start = path.index(current)
                raise CyclicDependency(path[start:] + [current])

            task = self[current]
            path.append(current)
            for need in task.needs:
                visit(need)
            path.pop()

            done.add(current)
            order.append(task)

        visit(name)
        return order
