from __future__ import annotations

import pytest

from wasmake.dag import TaskGraph
from wasmake.dsl import sh, task
from wasmake.errors import CyclicDependency, DuplicateTask, UnknownTask
from wasmake.model import TASK_NAMES
from wasmake.workflow import default_graph


def _names(tasks):
    return [t.name for t in tasks]


def test_canonical_graph_covers_every_task_name():
    graph = default_graph()
    assert sorted(graph.names()) == sorted(TASK_NAMES)


@pytest.mark.parametrize("name", [n for n in TASK_NAMES if n not in ("all", "publish")])
def test_task_without_prerequisites_resolves_to_itself(name):
    graph = default_graph()
    assert graph[name].needs == ()
    assert _names(graph.resolve(name)) == [name]


def test_resolve_all_keeps_documented_order():
    order = _names(default_graph().resolve("all"))
    assert order[:-1] == ["clean", "check", "test", "build", "doc"]
    assert order[-1] == "all"
    assert len(order) == len(set(order))


def test_publish_runs_everything_in_all_first():
    order = _names(default_graph().resolve("publish"))
    assert order == ["clean", "check", "test", "build", "doc", "all", "publish"]


def test_watch_entry_points_are_not_part_of_all():
    order = _names(default_graph().resolve("all"))
    for name in ("watch", "wtest", "wtable"):
        assert name not in order


def test_shared_prerequisite_appears_once():
    graph = TaskGraph([
        task("fetch", sh("cargo fetch")),
        task("lint", sh("cargo clippy"), needs=["fetch"]),
        task("unit", sh("cargo test"), needs=["fetch"]),
        task("ci", needs=["lint", "unit", "fetch"]),
    ])
    assert _names(graph.resolve("ci")) == ["fetch", "lint", "unit", "ci"]


def test_self_reference_is_a_cycle():
    graph = TaskGraph([task("loop", sh("true"), needs=["loop"])])
    with pytest.raises(CyclicDependency) as exc:
        graph.resolve("loop")
    assert exc.value.path == ["loop", "loop"]


def test_mutual_reference_is_a_cycle():
    graph = TaskGraph([
        task("a", sh("true"), needs=["b"]),
        task("b", sh("true"), needs=["a"]),
        task("top", needs=["a"]),
    ])
    with pytest.raises(CyclicDependency) as exc:
        graph.resolve("top")
    assert exc.value.path == ["a", "b", "a"]
    assert "a -> b -> a" in str(exc.value)


def test_missing_prerequisite_is_rejected_at_construction():
    with pytest.raises(UnknownTask) as exc:
        TaskGraph([task("build", sh("cargo build"), needs=["codegen"])])
    assert exc.value.name == "codegen"
    assert exc.value.referenced_by == "build"


def test_unknown_requested_task():
    with pytest.raises(UnknownTask):
        default_graph().resolve("deploy")


def test_duplicate_names_are_rejected():
    with pytest.raises(DuplicateTask) as exc:
        TaskGraph([task("doc", sh("cargo doc")), task("doc", sh("mdbook build"))])
    assert exc.value.names == ["doc"]


def test_graph_mapping_protocol():
    graph = default_graph()
    assert "build" in graph
    assert "deploy" not in graph
    assert len(graph) == len(TASK_NAMES)
    assert {t.name for t in graph} == set(TASK_NAMES)
