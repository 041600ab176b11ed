from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from gdbridge.catalog import TypeCatalog, parse_native_api
from tests._fixtures.native_api import NATIVE_API_YAML
from tests._fixtures.project_builder import ProjectBuilder


@pytest.fixture
def project_builder(tmp_path: Path) -> ProjectBuilder:
    """Provide a reusable project builder rooted at the pytest tmp_path."""
    return ProjectBuilder(tmp_path)


@pytest.fixture
def native_types():
    return parse_native_api(yaml.safe_load(NATIVE_API_YAML))


@pytest.fixture
def catalog(native_types) -> TypeCatalog:
    """Catalog with the sample native API and no project types."""
    return TypeCatalog.build(native_types)
