# workflow.py
# The canonical task table for a crate that ships both a native library and a
# wasm module for the web.
from __future__ import annotations

from typing import List

from .dag import TaskGraph
from .dsl import sh, task, watch, wf
from .model import Task

# Build outputs that must never retrigger a build
WATCH_EXCLUDES = ["pkg/**", "wasm/**", "target/**", ".git/**"]

WASM_OUT_DIR = "wasm/"
WASM_OUT_NAME = "wasm"


def workflow() -> List[Task]:
    return wf(
        task(
            "clean",
            sh("cargo clean --doc"),
            description="Remove generated documentation",
        ),
        task(
            "check",
            sh("cargo fix"),
            sh("cargo check"),
            sh("cargo clippy"),
            sh("cargo fmt"),
            sh("cargo +nightly udeps"),
            description="Fix, type-check, lint, format and look for unused deps",
        ),
        task(
            "checkdeny",
            sh("cargo deny check"),
            description="License / dependency policy check",
        ),
        task(
            "doc",
            sh("cargo doc --no-deps --document-private-items", interactive="--open"),
            description="Build API docs (opened in a browser when interactive)",
        ),
        task(
            "build",
            native=[sh("cargo build --release")],
            web=[
                sh(f"wasm-pack build --target web --out-name {WASM_OUT_NAME} --out-dir {WASM_OUT_DIR}"),
            ],
            description="Compile for the active profile",
        ),
        task(
            "test",
            native=[sh("cargo test")],
            web=[
                sh("cargo test"),
                sh("wasm-pack test --chrome --headless", opt_in=True),
            ],
            description="Run tests (headless browser tests with --browser-tests)",
        ),
        task(
            "all",
            needs=["clean", "check", "test", "build", "doc"],
            description="clean -> check -> test -> build -> doc",
        ),
        # not published yet; `cargo publish` stays out on purpose
        task(
            "publish",
            needs=["all"],
            description="Run the full pipeline (publishing itself is a placeholder)",
        ),
        watch(
            "watch",
            "build",
            exclude=WATCH_EXCLUDES,
            description="Rebuild on every source change",
        ),
        watch(
            "wtest",
            "test",
            exclude=WATCH_EXCLUDES,
            profile="web",
            opt_in=True,
            description="Re-run browser tests on every source change",
        ),
        task(
            "wtable",
            sh("trunk serve --release"),
            cwd="examples/table",
            description="Serve the bundled table example",
        ),
    )


def default_graph() -> TaskGraph:
    return TaskGraph(workflow())
