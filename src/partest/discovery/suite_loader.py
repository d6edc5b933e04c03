"""Discovery of test suites and test methods below a path."""
from __future__ import annotations

import ast
import fnmatch
from pathlib import Path
from typing import List, Sequence

from partest.core.models import ExecutableUnit
from partest.errors import ConfigurationError

SUITE_PATTERNS = ("test_*.py", "*_test.py")


class SuiteLoader:
    """Finds suites (test files) and, in functional mode, single test methods."""

    def __init__(self, path: str | Path, *, functional: bool = False, filters: Sequence[str] = ()) -> None:
        self._root = Path(path)
        self._functional = functional
        self._filters = tuple(filters)
        self._suites: List[ExecutableUnit] = []
        self._methods: List[ExecutableUnit] = []
        self._loaded = False

    def load(self) -> None:
        if not self._root.exists():
            raise ConfigurationError(f"Test path not found: {self._root}")
        files = [self._root] if self._root.is_file() else self._discover_files(self._root)
        self._suites = [ExecutableUnit(path=path, kind="suite") for path in files]
        self._methods = []
        if self._functional:
            for path in files:
                self._methods.extend(
                    ExecutableUnit(path=path, name=name, kind="method") for name in _test_names(path)
                )
        self._loaded = True

    def suites(self) -> List[ExecutableUnit]:
        return self._filtered(self._suites)

    def test_methods(self) -> List[ExecutableUnit]:
        return self._filtered(self._methods)

    def units(self) -> List[ExecutableUnit]:
        if not self._loaded:
            self.load()
        return self.test_methods() if self._functional else self.suites()

    def _filtered(self, units: List[ExecutableUnit]) -> List[ExecutableUnit]:
        if not self._filters:
            return list(units)
        return [
            unit
            for unit in units
            if any(fnmatch.fnmatchcase(unit.identifier(), pattern) for pattern in self._filters)
        ]

    def _discover_files(self, root: Path) -> List[Path]:
        found = {
            path
            for pattern in SUITE_PATTERNS
            for path in root.rglob(pattern)
            if path.is_file() and not any(part.startswith(".") for part in path.relative_to(root).parts)
        }
        return sorted(found)


def _test_names(path: Path) -> List[str]:
    """Top-level ``test_*`` functions and ``Test*`` class methods, in source order."""

    try:
        tree = ast.parse(path.read_bytes(), filename=str(path))
    except (SyntaxError, ValueError) as exc:
        raise ConfigurationError(f"Cannot parse test file {path}: {exc}") from exc
    names: List[str] = []
    for node in tree.body:
        if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)) and node.name.startswith("test"):
            names.append(node.name)
        elif isinstance(node, ast.ClassDef) and node.name.startswith("Test"):
            for item in node.body:
                if isinstance(item, (ast.FunctionDef, ast.AsyncFunctionDef)) and item.name.startswith("test"):
                    names.append(f"{node.name}::{item.name}")
    return names
