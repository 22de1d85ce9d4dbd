"""
Pytest configuration and shared fixtures.
"""
import random
import sys
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from minefield import Field, FieldConfig, Tile


# ============================================================================
# Field Fixtures
# ============================================================================

@pytest.fixture
def default_field() -> Field:
    """Create a default 9x9 field with 10 mines."""
    return Field(rng=random.Random(1234))


@pytest.fixture
def center_mine_field() -> Field:
    """Create a 3x3 field with its only mine in the center."""
    return Field(FieldConfig(3, 3, 1), mines=[(1, 1)])


@pytest.fixture
def empty_field() -> Field:
    """Create a field with no mines for flood-fill testing."""
    return Field(FieldConfig(5, 5, 0))


@pytest.fixture
def walled_field() -> Field:
    """
    Create a 5x5 field split by a column of mines.

    Mines fill column 2. Columns 0 and 4 hold empty clues, columns 1 and 3
    hold clues of 2 or 3 next to the wall.
    """
    return Field(
        FieldConfig(5, 5, 5),
        mines=[(row, 2) for row in range(5)],
    )


# ============================================================================
# Tile Fixtures
# ============================================================================

@pytest.fixture
def closed_clue() -> Tile:
    """Create a closed clue tile."""
    return Tile.clue(2)


@pytest.fixture
def mine_tile() -> Tile:
    """Create a closed mine tile."""
    return Tile.mine()


# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture
def valid_config() -> FieldConfig:
    """Create a valid field configuration."""
    return FieldConfig(9, 9, 10)


@pytest.fixture
def small_config() -> FieldConfig:
    """Create a small configuration for environment tests."""
    return FieldConfig(4, 4, 3)
