from __future__ import annotations

from pathlib import Path

import pytest

from wasmake.config import DEFAULT_TASKS_FILE, Settings, find_tasks_file, load_graph, load_tasks
from wasmake.model import TASK_NAMES, BuildProfile

WORKFLOW_FILE = """
from wasmake import wf, task, sh

def workflow():
    return wf(
        task("lint", sh("cargo clippy")),
        task("all", needs=["lint"]),
    )
"""

TASKS_LIST_FILE = """
from wasmake import task, sh

TASKS = [task("fmt", sh("cargo fmt --check"))]
"""


def test_load_tasks_from_workflow_function(tmp_path: Path):
    path = tmp_path / "tasks.py"
    path.write_text(WORKFLOW_FILE, encoding="utf-8")
    assert [t.name for t in load_tasks(path)] == ["lint", "all"]


def test_load_tasks_from_tasks_list(tmp_path: Path):
    path = tmp_path / "tasks.py"
    path.write_text(TASKS_LIST_FILE, encoding="utf-8")
    assert [t.name for t in load_tasks(path)] == ["fmt"]


def test_load_tasks_rejects_bad_files(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_tasks(tmp_path / "missing.py")

    not_py = tmp_path / "tasks.toml"
    not_py.write_text("", encoding="utf-8")
    with pytest.raises(ValueError):
        load_tasks(not_py)

    empty = tmp_path / "empty.py"
    empty.write_text("TASKS = ['build']\n", encoding="utf-8")
    with pytest.raises(TypeError):
        load_tasks(empty)


def test_load_graph_discovers_tasks_file(tmp_path: Path):
    assert find_tasks_file(tmp_path) is None
    assert sorted(load_graph(Settings.create(project_root=tmp_path)).names()) == sorted(TASK_NAMES)

    (tmp_path / DEFAULT_TASKS_FILE).write_text(WORKFLOW_FILE, encoding="utf-8")
    graph = load_graph(Settings.create(project_root=tmp_path))
    assert graph.names() == ["lint", "all"]


def test_explicit_tasks_file_wins(tmp_path: Path):
    (tmp_path / DEFAULT_TASKS_FILE).write_text(WORKFLOW_FILE, encoding="utf-8")
    other = tmp_path / "other.py"
    other.write_text(TASKS_LIST_FILE, encoding="utf-8")
    graph = load_graph(Settings.create(project_root=tmp_path, tasks_file=other))
    assert graph.names() == ["fmt"]


def test_settings_defaults_and_validation(tmp_path: Path):
    settings = Settings.create(project_root=tmp_path, interactive=False)
    assert settings.profile is BuildProfile.WEB
    assert settings.project_root == tmp_path.resolve()
    assert settings.opt_in is False

    assert Settings.create(profile="NATIVE").profile is BuildProfile.NATIVE
    with pytest.raises(ValueError):
        Settings.create(debounce=-1)
    with pytest.raises(ValueError):
        Settings.create(profile="wasi")
