from __future__ import annotations

from typing import List, Tuple

Cell = Tuple[int, int]


def taxicab(a: Cell, b: Cell) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def in_bounds(cell: Cell, rows: int, cols: int) -> bool:
    return 0 <= cell[0] < rows and 0 <= cell[1] < cols


def ring(origin: Cell, d: int, rows: int, cols: int) -> List[Cell]:
    """Cells at taxicab distance exactly ``d`` from ``origin``.

    Walks the perimeter of the diamond of radius ``d`` clockwise from its top
    vertex, then drops the points that fall off the grid.
    """
    if d < 0:
        return []
    if d == 0:
        return [origin] if in_bounds(origin, rows, cols) else []
    r0, c0 = origin
    points: List[Cell] = []
    r, c = r0 - d, c0
    dr, dc = 1, 1
    for _ in range(4 * d):
        points.append((r, c))
        if (r, c) == (r0, c0 + d):
            dr, dc = 1, -1
        elif (r, c) == (r0 + d, c0):
            dr, dc = -1, -1
        elif (r, c) == (r0, c0 - d):
            dr, dc = -1, 1
        r += dr
        c += dc
    return [p for p in points if in_bounds(p, rows, cols)]


def disk(origin: Cell, d: int, rows: int, cols: int) -> List[Cell]:
    """Cells strictly closer than ``d`` to ``origin``, excluding the origin."""
    r0, c0 = origin
    cells: List[Cell] = []
    for r in range(r0 - d + 1, r0 + d):
        for c in range(c0 - d + 1, c0 + d):
            dist = abs(r - r0) + abs(c - c0)
            if 0 < dist < d and in_bounds((r, c), rows, cols):
                cells.append((r, c))
    return cells
