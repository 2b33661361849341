from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

import pytest

from wasmake.model import Command
from wasmake.shell import ExitStatus
from wasmake.ui.console import Console


def py(code: str, *, cwd: str | None = None) -> Command:
    """Command that runs a python snippet with the current interpreter."""
    return Command(program=sys.executable, args=("-c", code), cwd=cwd)


def touch(name: str, exit_code: int = 0) -> Command:
    """Command that creates marker file `name` in its cwd, then exits."""
    return py(f"import sys; open({name!r}, 'w').close(); sys.exit({exit_code})")


@dataclass
class FakeInvoker:
    """Records every command; fails the ones whose display contains a marker."""
    fail_on: dict = field(default_factory=dict)
    calls: List[Command] = field(default_factory=list)

    def __call__(self, command: Command, *, project_root=".") -> ExitStatus:
        self.calls.append(command)
        for needle, code in self.fail_on.items():
            if needle in command.display():
                return ExitStatus(code=code)
        return ExitStatus(code=0)

    @property
    def displayed(self) -> List[str]:
        return [c.display() for c in self.calls]


@pytest.fixture()
def console() -> Console:
    return Console(debug=False)


@pytest.fixture()
def invoker() -> FakeInvoker:
    return FakeInvoker()


@pytest.fixture()
def project(tmp_path: Path) -> Path:
    root = tmp_path / "crate"
    (root / "src").mkdir(parents=True)
    (root / "src" / "lib.rs").write_text("pub fn it() {}\n", encoding="utf-8")
    return root
