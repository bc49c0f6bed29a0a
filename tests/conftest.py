"""Pytest configuration and shared fixtures for panelcut tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from panelcut.application.commands import OptimizeCuttingCommand
from panelcut.domain.value_objects import StockSheet

FIXTURES_PATH = Path(__file__).parent / "fixtures" / "requests"


# =============================================================================
# Shared fixtures
# =============================================================================


@pytest.fixture
def fixtures_path() -> Path:
    """Directory holding the JSON request fixtures."""
    return FIXTURES_PATH


@pytest.fixture
def optimize_command() -> OptimizeCuttingCommand:
    """Create an OptimizeCuttingCommand with default services."""
    return OptimizeCuttingCommand()


@pytest.fixture
def standard_sheet() -> StockSheet:
    """2800x2070 mm particle board sheet with a 3 mm kerf."""
    return StockSheet(width=2800, height=2070, kerf=3)
