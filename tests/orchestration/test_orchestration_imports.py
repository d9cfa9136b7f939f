"""The orchestration layer depends on the domain and application layers only."""

import ast
from pathlib import Path

import pytest

ORCHESTRATION_DIR = Path(__file__).resolve().parents[2] / "orchestration"


def _imported_modules(path: Path) -> list[str]:
    tree = ast.parse(path.read_text(encoding="utf-8"))
    modules = []
    for node in ast.walk(tree):
        if isinstance(node, ast.ImportFrom) and node.module and node.level == 0:
            modules.append(node.module)
        elif isinstance(node, ast.Import):
            modules.extend(alias.name for alias in node.names)
    return modules


@pytest.mark.parametrize("path", sorted(ORCHESTRATION_DIR.glob("*.py")), ids=lambda p: p.name)
def test_no_infrastructure_imports(path):
    offending = [m for m in _imported_modules(path) if m.startswith(("core.infrastructure", "api"))]

    assert offending == []
