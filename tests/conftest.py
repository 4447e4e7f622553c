"""Shared pytest configuration, marker assignment and source-tree fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Attach suite markers based on test file path."""
    del config
    for item in items:
        path = Path(str(item.fspath))
        parts = set(path.parts)
        if "e2e_tests" in parts:
            item.add_marker(pytest.mark.e2e)
        elif "integration_tests" in parts:
            item.add_marker(pytest.mark.integration)
        elif "unit_tests" in parts:
            item.add_marker(pytest.mark.unit)


SOURCE_FILES = {
    "src/index.js": "const fs = require('fs');\nmodule.exports = {};\n",
    "src/index.test.js": 'const assert = require("assert");\n',
    "src/util/helpers.js": "export const x = 1;\n",
    "lib/utils.js": "let path = require('path')\n",
    "node_modules/pkg/index.js": "module.exports = 1;\n",
    ".git/config": "[core]\n",
    "README.md": "# project\n",
}


@pytest.fixture
def source_tree(tmp_path: Path) -> Path:
    """Create a small JavaScript project with vendored and VCS folders."""
    root = tmp_path / "project"
    for relative, content in SOURCE_FILES.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return root
