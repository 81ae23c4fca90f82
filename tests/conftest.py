"""Shared fixtures and helpers for tests."""

import json
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import pytest

from strict_type_args.core.cache import DEFAULT_REPORT_CACHE
from strict_type_args.syntax.tree_sitter_adapter import TreeSitterBackend


@pytest.fixture(autouse=True)
def _fresh_default_cache() -> Iterator[None]:
    """Start and end every test with an empty process-wide report cache."""
    DEFAULT_REPORT_CACHE.invalidate()
    yield
    DEFAULT_REPORT_CACHE.invalidate()


@pytest.fixture
def write_report(tmp_path: Path) -> Callable[..., str]:
    """Return a factory writing a Flow JSON report and returning its path."""

    def _write(entries: list[Any], name: str = "errors.json") -> str:
        report_path = tmp_path / name
        report_path.write_text(json.dumps({"passed": False, "errors": entries}), encoding="utf-8")
        return str(report_path)

    return _write


@pytest.fixture
def tsx_backend() -> TreeSitterBackend:
    """Return a tree-sitter backend using the TSX grammar."""
    return TreeSitterBackend("tsx")


@pytest.fixture
def typescript_backend() -> TreeSitterBackend:
    """Return a tree-sitter backend using the TypeScript grammar."""
    return TreeSitterBackend("typescript")
