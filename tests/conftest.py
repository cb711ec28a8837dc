# File: tests/conftest.py
# Shared pytest fixtures: ADL AST documents written to temporary files.

import json
from pathlib import Path
from typing import Any, Callable, Dict

import pytest
import yaml

from builders import person_module


@pytest.fixture
def write_ast(tmp_path: Path) -> Callable[..., Path]:
    """Write an AST document as JSON (or YAML) under tmp_path and return its path."""

    def _write(relative: str, content: Dict[str, Any]) -> Path:
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            if path.suffix == ".json":
                json.dump(content, f)
            else:
                yaml.safe_dump(content, f)
        return path

    return _write


@pytest.fixture
def person_file(write_ast) -> Path:
    return write_ast("test.json", person_module())
