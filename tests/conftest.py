"""Shared pytest fixtures for the bazaar-setup test suite.

Provides:
- A factory that lays out a template tree for any catalog
- A ready-made tree for the real catalog (TypeScript pages)
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from bazaar_setup.catalog import CATALOG, Catalog

from .helpers import build_template


@pytest.fixture
def make_template(tmp_path: Path) -> Callable[..., Path]:
    """Factory building a template tree under ``tmp_path``."""
    def _make(catalog: Catalog = CATALOG, ext: str = "tsx", name: str = "template") -> Path:
        root = tmp_path / name
        root.mkdir()
        return build_template(root, catalog, ext)
    return _make


@pytest.fixture
def template_dir(make_template) -> Path:
    """Template tree for the real catalog with ``.tsx`` pages."""
    return make_template()


@pytest.fixture
def sections_dir(template_dir: Path) -> Path:
    return template_dir / "src" / "pages-sections"


@pytest.fixture
def app_dir(template_dir: Path) -> Path:
    return template_dir / "src" / "app"
