from common.grid import Cell, Grid, Point
from eval_core.route import make_route, route_length
from search.hardener import HardenConfig, MazeHardener, UNREACHABLE, harden, rank


def _small_route():
    return make_route((0, 0), (0, 3), ((2, 1), (2, 3)))


def _tiny_route():
    return make_route((0, 0), (0, 2), ((2, 1), (2, 1)))


def test_rank_keeps_unreachable_below_zero():
    assert rank(None) == UNREACHABLE
    assert rank(None) < rank(0)
    assert rank(5) == 5


def test_tiny_scenario_terminates():
    res = harden(Grid.open(3, 3), _tiny_route())
    assert res.baseline == 6
    assert res.completed
    assert res.best_length >= 6
    assert route_length(res.best_grid, _tiny_route()) == res.best_length
    assert res.best_length == 8
    assert res.best_grid.serialize() == '....#...#'


def test_small_scenario_terminates():
    res = harden(Grid.open(4, 4), _small_route())
    assert res.baseline == 7
    assert res.completed
    assert res.best_length >= 7
    assert len(res.best_grid.serialize()) == 16
    assert res.best_length == 17
    assert res.best_grid.serialize() == '.....#.#..#.#...'
    assert route_length(res.best_grid, _small_route()) == res.best_length
    # a walled entry is still expanded as a start cell, so only goals must stay open
    for p in _small_route().waypoints()[1:]:
        assert res.best_grid.get(p) is Cell.OPEN


def test_best_length_only_grows():
    res = harden(Grid.open(4, 4), _small_route())
    lengths = [res.baseline] + [length for _, length in res.improvements]
    assert lengths == sorted(lengths)
    assert len(set(lengths)) == len(lengths)
    assert lengths[-1] == res.best_length


def test_accepted_layouts_never_shorten_the_route():
    seen = []

    def on_accept(parent, child, grid):
        seen.append((parent, child, grid.serialize()))

    route = _small_route()
    res = MazeHardener(route, HardenConfig(on_accept=on_accept)).run(Grid.open(4, 4))
    assert len(seen) == res.accepted > 0
    for parent, child, text in seen:
        assert rank(child) >= rank(parent)
        assert route_length(Grid.from_string(text, 4, 4), route) == child


def test_accepted_grids_outlive_the_callback():
    kept = []
    route = _tiny_route()
    harden(Grid.open(3, 3), route, on_accept=lambda parent, child, grid: kept.append((child, grid)))
    assert kept
    assert len({grid.serialize() for _, grid in kept}) > 1
    for child, grid in kept:
        assert grid.count(Cell.WALL) >= 1
        assert route_length(grid, route) == child


class RecordingHardener(MazeHardener):
    def __init__(self, route, cfg=None):
        super().__init__(route, cfg)
        self.expanded = []

    def _expand(self, current, stack, result):
        self.expanded.append(current.serialize())
        super()._expand(current, stack, result)


def test_each_layout_is_expanded_once():
    h = RecordingHardener(_small_route())
    res = h.run(Grid.open(4, 4))
    assert len(h.expanded) == len(set(h.expanded)) == res.explored
    assert h.expanded[0] == '.' * 16


def test_runs_are_deterministic():
    a = harden(Grid.open(4, 4), _small_route())
    b = harden(Grid.open(4, 4), _small_route())
    assert a.best_length == b.best_length
    assert a.best_grid == b.best_grid
    assert a.explored == b.explored


def test_input_grid_is_left_untouched():
    g = Grid.open(3, 3)
    harden(g, _tiny_route())
    assert g.serialize() == '.' * 9


def test_max_states_stops_early():
    res = harden(Grid.open(4, 4), _small_route(), max_states=1)
    assert not res.completed
    assert res.explored == 1
    assert res.best_length >= res.baseline


def test_should_stop_is_checked_before_each_pop():
    res = harden(Grid.open(4, 4), _small_route(), should_stop=lambda: True)
    assert not res.completed
    assert res.explored == 0
    assert res.best_length == res.baseline == 7
    assert res.best_grid == Grid.open(4, 4)


def test_on_improve_reports_every_new_best():
    found = []
    res = harden(Grid.open(3, 3), _tiny_route(), on_improve=lambda length, grid: found.append(length))
    assert found == [length for _, length in res.improvements]


def test_unreachable_start_never_becomes_best():
    g = Grid.open(2, 2)
    g.set(Point(1, 1), Cell.WALL)
    route = make_route((0, 0), (0, 1), ((1, 1), (1, 1)))
    res = harden(g, route)
    assert res.baseline is None
    assert res.best_length is None
    assert res.best_grid == g
    assert res.completed


def test_zero_length_route_is_not_mistaken_for_unreachable():
    route = make_route((0, 0), (0, 0), ((0, 0), (0, 0)))
    res = harden(Grid.open(1, 3), route)
    assert res.baseline == 0
    assert res.best_length == 0
    assert res.rejected == 0
    assert res.accepted > 0
