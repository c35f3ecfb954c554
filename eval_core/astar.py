from heapq import heappop, heappush
from typing import Dict, List, Optional, Tuple

from common.grid import Cell, Grid, Point

DIRECTIONS = [(0, 1), (1, 0), (0, -1), (-1, 0)]
OPEN = int(Cell.OPEN)


def heuristic(a: Point, b: Point) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def _search(grid: Grid, start: Point, goal: Point) -> Tuple[Optional[int], Dict[Point, Point]]:
    """A* over 4-neighbors with unit step cost.

    Returns (length, parents). The start is always expanded, whatever its
    cell; every other cell, goal included, must be open to be entered.
    """
    start, goal = Point(*start), Point(*goal)
    if not grid.in_bounds(start):
        raise IndexError(f'index out of bounds: start {tuple(start)} not in {grid.rows}x{grid.cols} grid')
    if not grid.in_bounds(goal):
        raise IndexError(f'index out of bounds: goal {tuple(goal)} not in {grid.rows}x{grid.cols} grid')

    cells = grid.to_list()
    h, w = grid.rows, grid.cols
    g_score: Dict[Point, int] = {start: 0}
    parent: Dict[Point, Point] = {}
    frontier: List[Tuple[int, Point]] = [(heuristic(start, goal), start)]

    while frontier:
        priority, current = heappop(frontier)
        g = g_score[current]
        # stale entry: a cheaper route to this cell was queued after it
        if priority - heuristic(current, goal) > g:
            continue
        if current == goal:
            return g, parent
        r, c = current
        for dr, dc in DIRECTIONS:
            nr, nc = r + dr, c + dc
            if not (0 <= nr < h and 0 <= nc < w) or cells[nr][nc] != OPEN:
                continue
            nxt = Point(nr, nc)
            cost = g + 1
            if nxt not in g_score or cost < g_score[nxt]:
                g_score[nxt] = cost
                parent[nxt] = current
                heappush(frontier, (cost + heuristic(nxt, goal), nxt))
    return None, parent


def shortest_length(grid: Grid, start: Point, goal: Point) -> Optional[int]:
    """Length of the shortest open path from start to goal, None if unreachable."""
    length, _ = _search(grid, start, goal)
    return length


def shortest_path(grid: Grid, start: Point, goal: Point) -> List[Point]:
    length, parent = _search(grid, start, goal)
    if length is None:
        return []
    cur = Point(*goal)
    path = [cur]
    while cur != start:
        cur = parent[cur]
        path.append(cur)
    return list(reversed(path))
