"""
Shared test fixtures and pytest configuration.

Markers:
    @pytest.mark.mcp  — Exercises the MCP tool server (skipped without the mcp package)

Run:
    pytest                    # everything
    pytest -m "not mcp"       # skip server tests
"""

from typing import Callable, List

import pytest

from import_migrator.models import ScriptRecord, ServerRecord


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "mcp: exercises the MCP tool server")


@pytest.fixture
def make_script() -> Callable[..., ScriptRecord]:
    """Factory for script records on the 'home' server."""

    def _make(filename: str, code: str = "", server: str = "home") -> ScriptRecord:
        return ScriptRecord(filename=filename, code=code, server=server)

    return _make


@pytest.fixture
def known_scripts(make_script) -> List[ScriptRecord]:
    """A small server layout: two root scripts and a nested directory."""
    return [
        make_script("helpers.js", "export function f() {}\n"),
        make_script("main.js"),
        make_script("scripts/main.js"),
        make_script("scripts/util.js", "export const util = 1;\n"),
        make_script("scripts/lib/deep.js"),
    ]


@pytest.fixture
def home_server(make_script) -> ServerRecord:
    """Server whose scripts exercise every resolution outcome."""
    return ServerRecord(
        hostname="home",
        scripts=[
            make_script("helpers.js", "export function f() {}\n"),
            make_script("main.js", 'import {f} from "./helpers.js";\nf();\n'),
            make_script("scripts/util.js", "export const util = 1;\n"),
            make_script("scripts/main.js", 'import {util} from "util.js";\n'),
            make_script("broken.js", "import {f from './helpers.js';\n"),
            make_script("notes.txt", 'import {f} from "./helpers.js";\n'),
        ],
    )
