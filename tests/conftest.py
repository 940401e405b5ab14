"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from hybridscan.registry.loader import default_registry, load_registry
from hybridscan.registry.models import SignatureRegistry


@pytest.fixture
def fixtures_dir() -> Path:
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def minimal_registry_path(fixtures_dir: Path) -> Path:
    return fixtures_dir / "minimal_registry.yaml"


@pytest.fixture
def extended_registry_path(fixtures_dir: Path) -> Path:
    return fixtures_dir / "extended_registry.yaml"


@pytest.fixture
def minimal_registry(minimal_registry_path: Path) -> SignatureRegistry:
    return load_registry(minimal_registry_path)


@pytest.fixture
def registry() -> SignatureRegistry:
    return default_registry()

