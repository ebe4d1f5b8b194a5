from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Set

from constraints import Constraint, build_rules
from geometry import Cell
from model import Grid, PuzzleModel

log = logging.getLogger(__name__)


@dataclass
class StepResult:
    changed: bool
    deltas: Dict[Cell, Set[int]] = field(default_factory=dict)
    ok: bool = True


@dataclass
class SolverResult:
    status: str
    solution: Optional[Grid]
    duration_ms: int
    nodes: int = 0
    backtracks: int = 0
    solutions_found: int = 0
    message: str = ""


def propagate(grid: Grid, rules: Optional[Sequence[Constraint]] = None) -> bool:
    """Apply every rule until a full pass removes no candidate.

    Returns False if some cell ends up with no candidates. Contradictions are
    never raised; the caller decides what an empty cell means.
    """
    rule_list = list(rules) if rules is not None else build_rules(grid.model)
    before = grid.total_candidates()
    while True:
        for rule in rule_list:
            rule.propagate(grid)
            if grid.is_contradicted():
                return False
        after = grid.total_candidates()
        if after == before:
            return True
        before = after


def propagation_step(
    grid: Grid, rules: Optional[Sequence[Constraint]] = None
) -> StepResult:
    before = {cell: set(vals) for cell, vals in grid.candidates.items()}
    ok = propagate(grid, rules)
    deltas = {}
    for cell, prev in before.items():
        removed = prev - grid.candidates[cell]
        if removed:
            deltas[cell] = removed
    return StepResult(changed=bool(deltas), deltas=deltas, ok=ok)


def verify_solution(grid: Grid, rules: Optional[Sequence[Constraint]] = None) -> List[str]:
    """Names of the rules a fully determined grid breaks."""
    if not grid.is_complete():
        raise ValueError("Grid is not fully determined")
    rule_list = list(rules) if rules is not None else build_rules(grid.model)
    assignment = grid.assignment()
    return [rule.name for rule in rule_list if not rule.is_satisfied(assignment)]


class ZoneSolver:
    def __init__(
        self,
        model: PuzzleModel,
        max_nodes: Optional[int] = None,
        timeout_seconds: Optional[float] = None,
    ) -> None:
        self.model = model
        self.max_nodes = max_nodes
        self.timeout_seconds = timeout_seconds
        self.rules = build_rules(model)
        self.nodes = 0
        self.backtracks = 0
        self.exhausted = False

    def step(self, grid: Grid) -> StepResult:
        return propagation_step(grid, self.rules)

    def solve(self, require_uniqueness: bool = False) -> SolverResult:
        return self.solve_grid(self.model.new_grid(), require_uniqueness)

    def solve_grid(self, grid: Grid, require_uniqueness: bool = False) -> SolverResult:
        start = time.time()
        self.nodes = 0
        self.backtracks = 0
        self.exhausted = False
        grid = grid.clone()
        if not propagate(grid, self.rules):
            return SolverResult(
                status="no-solution",
                solution=None,
                duration_ms=int((time.time() - start) * 1000),
                message="Contradiction in givens.",
            )
        solutions: List[Grid] = []
        max_solutions = 2 if require_uniqueness else 1
        last_report = [start]
        log.info("[solver] solve start: %s", self.model)
        self._search(grid, 0, solutions, max_solutions, start, last_report)
        duration_ms = int((time.time() - start) * 1000)
        log.info(
            "[solver] solve end in %d ms; %d nodes, %d backtracks; solutions found %d",
            duration_ms,
            self.nodes,
            self.backtracks,
            len(solutions),
        )
        result = SolverResult(
            status="solved",
            solution=solutions[0] if solutions else None,
            duration_ms=duration_ms,
            nodes=self.nodes,
            backtracks=self.backtracks,
            solutions_found=len(solutions),
            message="Solved successfully.",
        )
        if require_uniqueness and len(solutions) > 1:
            result.status = "multiple"
            result.message = "Multiple solutions exist."
        elif self.exhausted:
            result.status = "unknown"
            if solutions:
                result.message = "Search budget exhausted before uniqueness was confirmed."
            else:
                result.message = "Search budget exhausted."
        elif not solutions:
            result.status = "no-solution"
            result.message = "No solution found."
        return result

    def _out_of_budget(self, start_time: float) -> bool:
        if self.max_nodes is not None and self.nodes >= self.max_nodes:
            return True
        if (
            self.timeout_seconds is not None
            and time.time() - start_time >= self.timeout_seconds
        ):
            return True
        return False

    def _search(
        self,
        grid: Grid,
        depth: int,
        solutions: List[Grid],
        max_solutions: int,
        start_time: float,
        last_report: List[float],
    ) -> None:
        now = time.time()
        if now - last_report[0] >= 60:
            filled = sum(1 for cell in self.model.cells if grid.is_determined(cell))
            log.info(
                "[solver] %ds elapsed; filled %d/%d cells; %d nodes",
                int(now - start_time),
                filled,
                len(self.model.cells),
                self.nodes,
            )
            last_report[0] = now
        if grid.is_complete():
            solutions.append(grid)
            return
        cell = grid.undetermined_cells()[0]
        row, col = cell
        for val in sorted(grid.candidates[cell]):
            if self._out_of_budget(start_time):
                self.exhausted = True
                return
            self.nodes += 1
            if depth < 3:
                log.debug(
                    "Trying %d in %d, %d (depth: %d), of %s",
                    val,
                    row,
                    col,
                    depth,
                    sorted(grid.candidates[cell]),
                )
            branch = grid.clone()
            branch.restrict(cell, {val})
            if not propagate(branch, self.rules):
                self.backtracks += 1
                log.debug("Backtrack: r%dc%d != %d", row + 1, col + 1, val)
                continue
            self._search(branch, depth + 1, solutions, max_solutions, start_time, last_report)
            if len(solutions) >= max_solutions or self.exhausted:
                return
