"""Nox sessions for multi-version Python compatibility testing.

Usage:
    nox                     # run all sessions
    nox -s core             # unit tests
    nox -s lint             # lint only
    nox -l                  # list available sessions

Requires Python 3.11-3.14 installed locally (e.g. via pyenv or uv).
"""

import nox

PYTHON_VERSIONS = ["3.11", "3.12", "3.13", "3.14"]
CORE_TESTS = [
    "tests.test_models",
    "tests.test_text",
    "tests.test_parser",
    "tests.test_tree",
    "tests.test_exclusion",
    "tests.test_window",
    "tests.test_report",
    "tests.test_config",
    "tests.test_reddit_client",
    "tests.test_exporter",
    "tests.test_jsonrpc",
    "tests.test_mcp_server",
    "tests.test_cli",
]


@nox.session(python=PYTHON_VERSIONS)
def core(session: nox.Session) -> None:
    """Run unit tests (network mocked) across Python versions."""
    session.install("-e", ".[dev]")
    session.run("python", "-m", "unittest", *CORE_TESTS, "-v")


@nox.session(python=PYTHON_VERSIONS)
def lint(session: nox.Session) -> None:
    """Run ruff linter across Python versions."""
    session.install("ruff>=0.15")
    session.run("ruff", "check", "src/", "tests/")
