from __future__ import annotations

import pytest

from wasmake.dsl import sh, task
from wasmake.errors import UnsupportedVariant
from wasmake.model import BuildProfile
from wasmake.variants import select_commands
from wasmake.workflow import default_graph

NATIVE = BuildProfile.NATIVE
WEB = BuildProfile.WEB


def _display(commands):
    return [c.display() for c in commands]


def test_build_differs_per_profile():
    build = default_graph()["build"]
    native = select_commands(build, NATIVE)
    web = select_commands(build, WEB)
    assert native != web
    assert _display(native) == ["cargo build --release"]
    assert _display(web) == ["wasm-pack build --target web --out-name wasm --out-dir wasm/"]


@pytest.mark.parametrize("name", ["clean", "check", "checkdeny", "doc", "wtable"])
def test_single_variant_tasks_ignore_profile(name):
    t = default_graph()[name]
    assert select_commands(t, WEB) == select_commands(t, NATIVE)


def test_check_runs_tools_in_fixed_order():
    check = default_graph()["check"]
    assert _display(select_commands(check, WEB)) == [
        "cargo fix",
        "cargo check",
        "cargo clippy",
        "cargo fmt",
        "cargo +nightly udeps",
    ]


def test_browser_tests_are_opt_in():
    test = default_graph()["test"]
    assert _display(select_commands(test, WEB)) == ["cargo test"]
    assert _display(select_commands(test, WEB, opt_in=True)) == [
        "cargo test",
        "wasm-pack test --chrome --headless",
    ]
    assert _display(select_commands(test, NATIVE, opt_in=True)) == ["cargo test"]


def test_doc_opens_only_when_interactive():
    doc = default_graph()["doc"]
    assert _display(select_commands(doc, WEB)) == [
        "cargo doc --no-deps --document-private-items"
    ]
    assert _display(select_commands(doc, WEB, interactive=True)) == [
        "cargo doc --no-deps --document-private-items --open"
    ]


def test_wtable_runs_in_example_dir():
    (cmd,) = select_commands(default_graph()["wtable"], WEB)
    assert cmd.cwd == "examples/table"
    assert cmd.argv() == ["trunk", "serve", "--release"]


def test_missing_variant_is_unsupported():
    native_only = task("bench", native=[sh("cargo bench")])
    with pytest.raises(UnsupportedVariant) as exc:
        select_commands(native_only, WEB)
    assert exc.value.task == "bench"
    assert exc.value.profile == "web"
    assert exc.value.available == ["native"]


def test_aggregate_has_no_commands():
    assert select_commands(default_graph()["all"], NATIVE) == []


def test_task_rejects_plain_commands_mixed_with_variants():
    with pytest.raises(ValueError):
        task("build", sh("make"), native=[sh("cargo build")])


def test_profile_parsing():
    assert BuildProfile.parse("Native") is NATIVE
    assert BuildProfile.parse(" web ") is WEB
    assert BuildProfile.parse(WEB) is WEB
    with pytest.raises(ValueError):
        BuildProfile.parse("wasi")
