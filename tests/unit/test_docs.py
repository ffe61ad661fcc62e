"""Unit tests keeping the Sphinx sources in step with the package."""

from __future__ import annotations

import importlib
import re
from pathlib import Path

DOCS_DIR = Path(__file__).resolve().parents[2] / "docs"


def test_docs_index_links_the_api_page() -> None:
    index = (DOCS_DIR / "index.rst").read_text(encoding="utf-8")

    assert "toctree" in index
    assert re.search(r"^\s+api$", index, flags=re.MULTILINE)


def test_every_documented_module_imports() -> None:
    api = (DOCS_DIR / "api.rst").read_text(encoding="utf-8")
    modules = re.findall(r"^\.\. automodule:: (\S+)$", api, flags=re.MULTILINE)

    assert "delayed_async_task.task" in modules
    for module in modules:
        importlib.import_module(module)
