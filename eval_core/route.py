from dataclasses import dataclass
from typing import List, Optional, Tuple

from common.grid import Grid, Point
from .astar import shortest_length, shortest_path


@dataclass(frozen=True)
class Route:
    entry: Point
    exit: Point
    touchpoints: Tuple[Point, Point]

    def waypoints(self) -> List[Point]:
        return [self.entry, self.touchpoints[0], self.touchpoints[1], self.exit]

    def segments(self) -> List[Tuple[Point, Point]]:
        pts = self.waypoints()
        return list(zip(pts, pts[1:]))

    def validate(self, rows: int, cols: int) -> None:
        names = ['entry', 'touchpoint 1', 'touchpoint 2', 'exit']
        for name, p in zip(names, self.waypoints()):
            r, c = p
            if not (0 <= r < rows and 0 <= c < cols):
                raise ValueError(f'{name} {tuple(p)} lies outside the {rows}x{cols} grid')


def make_route(entry, exit, touchpoints) -> Route:
    tp1, tp2 = touchpoints
    return Route(entry=Point(*entry), exit=Point(*exit), touchpoints=(Point(*tp1), Point(*tp2)))


def route_length(grid: Grid, route: Route) -> Optional[int]:
    # entry -> tp1 -> tp2 -> exit; no partial credit
    total = 0
    for a, b in route.segments():
        seg = shortest_length(grid, a, b)
        if seg is None:
            return None
        total += seg
    return total


def route_path(grid: Grid, route: Route) -> List[Point]:
    path: List[Point] = []
    for a, b in route.segments():
        seg = shortest_path(grid, a, b)
        if not seg:
            return []
        path.extend(seg[1:] if path else seg)
    return path
