from pathlib import Path

import pytest

from model import PuzzleModel

PUZZLE_DIR = Path(__file__).resolve().parent.parent / "puzzles"

# Unique solution: [[2, 1, 2], [1, 1, 1]]
SMALL_ZONES = [[0, 0, 3], [1, 2, 3]]

# Two solutions: [[1, 2, 1, 2], [1, 1, 1, 1]] and [[2, 1, 2, 1], [1, 1, 1, 1]]
TWIN_ZONES = [[0, 0, 1, 1], [2, 3, 4, 5]]

# No completion exists under the pairing rule.
SPLIT_2X2_ZONES = [[0, 0], [1, 1]]


def values(grid):
    return [
        [grid.value_of((r, c)) for c in range(grid.model.cols)]
        for r in range(grid.model.rows)
    ]


@pytest.fixture
def small_model():
    return PuzzleModel(SMALL_ZONES)


@pytest.fixture
def twin_model():
    return PuzzleModel(TWIN_ZONES)
