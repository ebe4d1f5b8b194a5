from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Dict, Iterable, List, Sequence, Set, Tuple

from geometry import Cell

Candidates = Dict[Cell, Set[int]]
Given = Tuple[int, int, int]


class PuzzleConfigError(ValueError):
    """Raised for a malformed zone layout or an impossible given."""


def is_int(x) -> bool:
    return isinstance(x, int) and not isinstance(x, bool)


class PuzzleModel:
    def __init__(self, zones: Sequence[Sequence[int]], givens: Iterable[Given] = ()) -> None:
        if not zones or not zones[0]:
            raise PuzzleConfigError("Zone layout is empty")
        cols = len(zones[0])
        for r, row in enumerate(zones):
            if len(row) != cols:
                raise PuzzleConfigError(
                    f"Zone layout row {r} has {len(row)} cells, expected {cols}"
                )
        for row in zones:
            for z in row:
                if not is_int(z):
                    raise PuzzleConfigError(f"Zone label {z!r} is not an integer")
        self.zones: List[List[int]] = [list(row) for row in zones]
        self.rows = len(self.zones)
        self.cols = cols
        self.cells: List[Cell] = [
            (r, c) for r in range(self.rows) for c in range(self.cols)
        ]
        self._zone_cells: Dict[int, List[Cell]] = {}
        for cell in self.cells:
            self._zone_cells.setdefault(self.zone_of(cell), []).append(cell)
        self.zone_sizes: Dict[int, int] = {
            zone: len(cells) for zone, cells in self._zone_cells.items()
        }
        self.givens: List[Given] = []
        seen: Dict[Cell, int] = {}
        for given in givens:
            row, col, value = self._check_given(given)
            if seen.get((row, col), value) != value:
                raise PuzzleConfigError(
                    f"Cell r{row + 1}c{col + 1} given both {seen[(row, col)]} and {value}"
                )
            seen[(row, col)] = value
            self.givens.append((row, col, value))

    def _check_given(self, given: Given) -> Given:
        try:
            row, col, value = given
        except (TypeError, ValueError) as e:
            raise PuzzleConfigError(f"Malformed given {given!r}") from e
        if not (is_int(row) and is_int(col) and is_int(value)):
            raise PuzzleConfigError(f"Given {given!r} must hold three integers")
        if not (0 <= row < self.rows and 0 <= col < self.cols):
            raise PuzzleConfigError(
                f"Given {given!r} is outside the {self.rows}x{self.cols} grid"
            )
        size = self.zone_size(self.zones[row][col])
        if not 1 <= value <= size:
            raise PuzzleConfigError(
                f"Given {given!r} is outside 1..{size} for its zone"
            )
        return row, col, value

    @property
    def zone_ids(self) -> List[int]:
        return sorted(self._zone_cells)

    def zone_of(self, cell: Cell) -> int:
        return self.zones[cell[0]][cell[1]]

    def zone_size(self, zone: int) -> int:
        return self.zone_sizes[zone]

    def zone_cells(self, zone: int) -> List[Cell]:
        return self._zone_cells[zone]

    def value_range(self, zone: int) -> range:
        return range(1, self.zone_sizes[zone] + 1)

    def new_grid(self) -> "Grid":
        candidates: Candidates = {
            cell: set(self.value_range(self.zone_of(cell))) for cell in self.cells
        }
        for row, col, value in self.givens:
            candidates[(row, col)] = {value}
        return Grid(self, candidates)

    def to_dict(self) -> dict:
        return {
            "version": 1,
            "zones": [list(row) for row in self.zones],
            "givens": [list(g) for g in self.givens],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PuzzleModel":
        if not isinstance(data, dict) or "zones" not in data:
            raise PuzzleConfigError("Puzzle data has no 'zones' entry")
        givens = data.get("givens", [])
        if not isinstance(givens, list):
            raise PuzzleConfigError("'givens' must be a list of [row, col, value]")
        for given in givens:
            if not isinstance(given, (list, tuple)) or len(given) != 3:
                raise PuzzleConfigError(f"Malformed given {given!r}")
        return cls(data["zones"], [tuple(g) for g in givens])

    def __repr__(self) -> str:
        return (
            f"PuzzleModel(rows={self.rows}, cols={self.cols}, "
            f"zones={len(self.zone_sizes)}, givens={len(self.givens)})"
        )


def load_puzzle(path: str) -> PuzzleModel:
    with open(path, "r") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise PuzzleConfigError(f"{path} is not valid JSON: {e}") from e
    return PuzzleModel.from_dict(data)


def save_puzzle(model: PuzzleModel, path: str) -> None:
    with open(path, "w") as f:
        json.dump(model.to_dict(), f, indent=2)


@dataclass
class Grid:
    model: PuzzleModel
    candidates: Candidates

    def value_of(self, cell: Cell) -> int:
        """Return the cell's value if it is determined, else 0."""
        vals = self.candidates[cell]
        return next(iter(vals)) if len(vals) == 1 else 0

    def is_determined(self, cell: Cell) -> bool:
        return len(self.candidates[cell]) == 1

    def is_complete(self) -> bool:
        return all(len(vals) == 1 for vals in self.candidates.values())

    def is_contradicted(self) -> bool:
        return any(not vals for vals in self.candidates.values())

    def total_candidates(self) -> int:
        return sum(len(vals) for vals in self.candidates.values())

    def undetermined_cells(self) -> List[Cell]:
        return [cell for cell in self.model.cells if len(self.candidates[cell]) > 1]

    def remove(self, cell: Cell, value: int) -> bool:
        vals = self.candidates[cell]
        if value in vals:
            vals.discard(value)
            return True
        return False

    def restrict(self, cell: Cell, values: Set[int]) -> bool:
        vals = self.candidates[cell]
        kept = vals & values
        if kept != vals:
            self.candidates[cell] = kept
            return True
        return False

    def clone(self) -> "Grid":
        return Grid(self.model, {cell: set(vals) for cell, vals in self.candidates.items()})

    def assignment(self) -> Dict[Cell, int]:
        return {
            cell: next(iter(vals))
            for cell, vals in self.candidates.items()
            if len(vals) == 1
        }

    def snapshot(self) -> List[List[Tuple[int, List[int]]]]:
        return [
            [
                (self.model.zones[r][c], sorted(self.candidates[(r, c)]))
                for c in range(self.model.cols)
            ]
            for r in range(self.model.rows)
        ]

    def render(self) -> str:
        def label(vals: Set[int]) -> str:
            if not vals:
                return "!"
            sep = "" if max(vals) < 10 else ","
            text = sep.join(str(v) for v in sorted(vals))
            return text if len(vals) == 1 else f"[{text}]"

        labels = [
            [label(self.candidates[(r, c)]) for c in range(self.model.cols)]
            for r in range(self.model.rows)
        ]
        width = max(len(text) for row in labels for text in row)
        return "\n".join(" ".join(text.rjust(width) for text in row) for row in labels)
