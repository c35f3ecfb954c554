from dataclasses import dataclass, field
from typing import Callable, List, Optional, Set, Tuple
from tqdm import tqdm

from common.grid import Cell, Grid, Point
from eval_core.route import Route, route_length

UNREACHABLE = -1


def rank(length: Optional[int]) -> int:
    # unreachable sorts below every real length, including 0
    return UNREACHABLE if length is None else length


@dataclass
class HardenConfig:
    max_states: Optional[int] = None
    progress: bool = False
    should_stop: Optional[Callable[[], bool]] = None
    on_improve: Optional[Callable[[int, Grid], None]] = None
    on_accept: Optional[Callable[[Optional[int], Optional[int], Grid], None]] = None


@dataclass
class SearchResult:
    baseline: Optional[int]
    best_length: Optional[int]
    best_grid: Grid
    explored: int = 0
    accepted: int = 0
    rejected: int = 0
    completed: bool = True
    improvements: List[Tuple[int, int]] = field(default_factory=list)  # (explored, length)


class MazeHardener:
    """Exhaustive, memoized wall placement maximizing the route length.

    Walks the graph of grid states reachable by turning one open cell into a
    wall at a time, keeping only additions that do not shorten the route.
    Depth-first with an explicit stack; each distinct layout is expanded once.
    """

    def __init__(self, route: Route, cfg: Optional[HardenConfig] = None):
        self.route = route
        self.cfg = cfg or HardenConfig()

    def evaluate(self, grid: Grid) -> Optional[int]:
        return route_length(grid, self.route)

    def run(self, grid: Grid) -> SearchResult:
        self.route.validate(grid.rows, grid.cols)
        baseline = self.evaluate(grid)
        result = SearchResult(baseline=baseline, best_length=baseline, best_grid=grid.copy())
        seen: Set[str] = set()
        stack: List[Grid] = [grid.copy()]
        pbar = tqdm(desc='Hardening', unit='state', disable=not self.cfg.progress)
        try:
            while stack:
                if self._should_stop(result):
                    result.completed = False
                    break
                current = stack.pop()
                key = current.serialize()
                if key in seen:
                    continue
                seen.add(key)
                result.explored += 1
                pbar.update(1)
                self._expand(current, stack, result)
                pbar.set_postfix(best=result.best_length, pending=len(stack), refresh=False)
        finally:
            pbar.close()
        return result

    def _should_stop(self, result: SearchResult) -> bool:
        if self.cfg.max_states is not None and result.explored >= self.cfg.max_states:
            return True
        return bool(self.cfg.should_stop and self.cfg.should_stop())

    def _expand(self, current: Grid, stack: List[Grid], result: SearchResult) -> None:
        current_length = self.evaluate(current)
        for r, c, cell in current.enumerate():
            if cell is Cell.WALL:
                continue
            point = Point(r, c)
            current.set(point, Cell.WALL)
            new_length = self.evaluate(current)
            if rank(new_length) < rank(current_length):
                result.rejected += 1
                current.set(point, Cell.OPEN)
                continue
            result.accepted += 1
            if self.cfg.on_accept:
                self.cfg.on_accept(current_length, new_length, current.copy())
            if rank(new_length) > rank(result.best_length):
                result.best_length = new_length
                result.best_grid = current.copy()
                result.improvements.append((result.explored, new_length))
                if self.cfg.on_improve:
                    self.cfg.on_improve(new_length, result.best_grid)
            stack.append(current.copy())
            current.set(point, Cell.OPEN)


def harden(grid: Grid, route: Route, **kwargs) -> SearchResult:
    return MazeHardener(route, HardenConfig(**kwargs)).run(grid)
