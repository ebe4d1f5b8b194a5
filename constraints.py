from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List

from geometry import Cell, disk, ring, taxicab
from model import Grid, PuzzleModel


def has_partner(model: PuzzleModel, assignment: Dict[Cell, int], cell: Cell) -> bool:
    """True if a same-valued cell of another zone sits exactly ``value`` away."""
    value = assignment[cell]
    zone = model.zone_of(cell)
    return any(
        model.zone_of(other) != zone and assignment[other] == value
        for other in ring(cell, value, model.rows, model.cols)
    )


class Constraint:
    name: str = "constraint"

    def propagate(self, grid: Grid) -> bool:
        """Narrow candidate sets in place. Returns True if anything changed."""
        raise NotImplementedError

    def is_satisfied(self, assignment: Dict[Cell, int]) -> bool:
        """Return True if the fully assigned grid satisfies the constraint."""
        raise NotImplementedError


@dataclass
class ZoneExclusionConstraint(Constraint):
    model: PuzzleModel
    name: str = "zone-exclusion"

    def propagate(self, grid: Grid) -> bool:
        changed = False
        for cell in self.model.cells:
            val = grid.value_of(cell)
            if not val:
                continue
            for other in self.model.zone_cells(self.model.zone_of(cell)):
                if other != cell and grid.remove(other, val):
                    changed = True
        return changed

    def is_satisfied(self, assignment: Dict[Cell, int]) -> bool:
        for zone in self.model.zone_ids:
            vals = sorted(assignment[cell] for cell in self.model.zone_cells(zone))
            if vals != list(self.model.value_range(zone)):
                return False
        return True


@dataclass
class MinimumDistanceConstraint(Constraint):
    model: PuzzleModel
    name: str = "minimum-distance"

    def propagate(self, grid: Grid) -> bool:
        changed = False
        for cell in self.model.cells:
            val = grid.value_of(cell)
            if not val:
                continue
            for other in disk(cell, val, self.model.rows, self.model.cols):
                if grid.remove(other, val):
                    changed = True
        return changed

    def is_satisfied(self, assignment: Dict[Cell, int]) -> bool:
        by_value: Dict[int, List[Cell]] = {}
        for cell, val in assignment.items():
            by_value.setdefault(val, []).append(cell)
        for val, cells in by_value.items():
            for i, a in enumerate(cells):
                for b in cells[i + 1 :]:
                    if taxicab(a, b) < val:
                        return False
        return True


@dataclass
class UniquePartnerConstraint(Constraint):
    model: PuzzleModel
    name: str = "unique-partner"

    def propagate(self, grid: Grid) -> bool:
        changed = False
        for cell in self.model.cells:
            val = grid.value_of(cell)
            if not val:
                continue
            zone = self.model.zone_of(cell)
            partners = [
                other
                for other in ring(cell, val, self.model.rows, self.model.cols)
                if self.model.zone_of(other) != zone and val in grid.candidates[other]
            ]
            if len(partners) == 1 and grid.restrict(partners[0], {val}):
                changed = True
        return changed

    def is_satisfied(self, assignment: Dict[Cell, int]) -> bool:
        return all(has_partner(self.model, assignment, cell) for cell in assignment)


@dataclass
class HiddenSingleConstraint(Constraint):
    model: PuzzleModel
    name: str = "hidden-single"

    def propagate(self, grid: Grid) -> bool:
        changed = False
        for cell in self.model.cells:
            if len(grid.candidates[cell]) <= 1:
                continue
            mates = [
                other
                for other in self.model.zone_cells(self.model.zone_of(cell))
                if other != cell
            ]
            for val in sorted(grid.candidates[cell]):
                if not any(val in grid.candidates[other] for other in mates):
                    grid.restrict(cell, {val})
                    changed = True
                    break
        return changed

    def is_satisfied(self, assignment: Dict[Cell, int]) -> bool:
        for zone in self.model.zone_ids:
            present = {assignment[cell] for cell in self.model.zone_cells(zone)}
            if not set(self.model.value_range(zone)) <= present:
                return False
        return True


@dataclass
class PartnerExistenceConstraint(Constraint):
    model: PuzzleModel
    name: str = "partner-existence"

    def propagate(self, grid: Grid) -> bool:
        changed = False
        for cell in self.model.cells:
            zone = self.model.zone_of(cell)
            for val in sorted(grid.candidates[cell]):
                if not any(
                    self.model.zone_of(other) != zone and val in grid.candidates[other]
                    for other in ring(cell, val, self.model.rows, self.model.cols)
                ):
                    grid.remove(cell, val)
                    changed = True
        return changed

    def is_satisfied(self, assignment: Dict[Cell, int]) -> bool:
        return all(has_partner(self.model, assignment, cell) for cell in assignment)


def build_rules(model: PuzzleModel) -> List[Constraint]:
    return [
        ZoneExclusionConstraint(model),
        MinimumDistanceConstraint(model),
        UniquePartnerConstraint(model),
        HiddenSingleConstraint(model),
        PartnerExistenceConstraint(model),
    ]
