"""Shared pytest fixtures and configuration for all tests."""

import pytest
import sys
import os
import numpy as np

# Add parent directory to path so we can import modules
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from go_board import board_from_rows
from go_game import GoGame


@pytest.fixture
def game_9x9():
    """Fresh 9x9 session, Black to move."""
    return GoGame(9)


@pytest.fixture
def empty_board_9x9():
    """Fixture for empty 9x9 board."""
    return np.zeros((9, 9), dtype=np.int8)


@pytest.fixture
def empty_board_13x13():
    """Fixture for empty 13x13 board."""
    return np.zeros((13, 13), dtype=np.int8)


@pytest.fixture
def empty_board_19x19():
    """Fixture for empty 19x19 board."""
    return np.zeros((19, 19), dtype=np.int8)


@pytest.fixture
def capture_position():
    """Black stone at (4,4) surrounded on three sides; (4,5) is its last liberty."""
    return board_from_rows([
        '.........',
        '.........',
        '.........',
        '....W....',
        '...WB....',
        '....W....',
        '.........',
        '.........',
        '.........',
    ])


@pytest.fixture
def ko_position():
    """Classic ko shape: White at (4,4) can be taken by Black at (4,5)."""
    return board_from_rows([
        '.........',
        '.........',
        '.........',
        '....BW...',
        '...BW.W..',
        '....BW...',
        '.........',
        '.........',
        '.........',
    ])


@pytest.fixture
def small_board_size():
    """Small board size for quick tests."""
    return 9


@pytest.fixture
def large_board_size():
    """Large board size for performance tests."""
    return 19
