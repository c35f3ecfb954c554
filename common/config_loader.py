from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional
import os
import yaml

from common.grid import Point
from eval_core.route import Route, make_route

# Parameter sets the search was originally run with
DEFAULT_PRESETS: Dict[str, Dict] = {
    'classic': {'rows': 15, 'cols': 19, 'entry': [0, 4], 'exit': [0, 14], 'touchpoints': [[10, 4], [10, 14]]},
    'tiny': {'rows': 3, 'cols': 3, 'entry': [0, 0], 'exit': [0, 2], 'touchpoints': [[2, 1], [2, 1]]},
    'small': {'rows': 4, 'cols': 4, 'entry': [0, 0], 'exit': [0, 3], 'touchpoints': [[2, 1], [2, 3]]},
}

ENV_KEYS = ['preset', 'output_dir', 'max_states', 'capacity', 'progress']


@dataclass
class RunSpec:
    rows: int
    cols: int
    route: Route
    capacity: Optional[int] = None
    max_states: Optional[int] = None


def load_config(base_dir: str = 'config') -> Dict:
    base = Path(base_dir) / 'config.yaml'
    local = Path(base_dir) / 'local.yaml'
    cfg: Dict = {}
    if base.exists():
        cfg.update(yaml.safe_load(base.read_text(encoding='utf-8')) or {})
    if local.exists():
        loc = yaml.safe_load(local.read_text(encoding='utf-8')) or {}
        cfg.update(loc)
    # Pull overrides from environment
    for k in ENV_KEYS:
        env_name = 'HARDEN_' + k.upper()
        if os.getenv(env_name) is not None:
            cfg[k] = os.getenv(env_name)
    return cfg


def parse_point(value) -> Point:
    if isinstance(value, str):
        parts = [p for p in value.replace('(', '').replace(')', '').split(',') if p.strip()]
    else:
        try:
            parts = list(value)
        except TypeError:
            raise ValueError(f'expected a (row, col) pair, got {value!r}') from None
    if len(parts) != 2:
        raise ValueError(f'expected a (row, col) pair, got {value!r}')
    try:
        r, c = _whole(parts[0]), _whole(parts[1])
    except (TypeError, ValueError):
        raise ValueError(f'point coordinates must be integers, got {value!r}') from None
    if r < 0 or c < 0:
        raise ValueError(f'point coordinates must be non-negative, got {value!r}')
    return Point(r, c)


def _whole(value) -> int:
    # int() would silently truncate 2.5 to 2
    if isinstance(value, float) and not value.is_integer():
        raise ValueError(f'not a whole number: {value!r}')
    return int(value)


def _optional_int(value, name: str) -> Optional[int]:
    if value is None or value == '' or str(value).lower() in ('none', 'null'):
        return None
    try:
        return _whole(value)
    except (TypeError, ValueError):
        raise ValueError(f'{name} must be an integer, got {value!r}') from None


def as_bool(value, default: bool = True) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ('1', 'true', 'yes', 'on')


def resolve_run(cfg: Dict) -> RunSpec:
    """Merge the selected preset with explicit keys and validate the result."""
    presets = dict(DEFAULT_PRESETS)
    presets.update(cfg.get('presets') or {})
    name = cfg.get('preset') or 'small'
    if name not in presets:
        raise ValueError(f"unknown preset {name!r}, choose from {', '.join(sorted(presets))}")
    merged = dict(presets[name])
    for k in ('rows', 'cols', 'entry', 'exit', 'touchpoints'):
        if cfg.get(k) is not None:
            merged[k] = cfg[k]

    missing = [k for k in ('rows', 'cols', 'entry', 'exit', 'touchpoints') if merged.get(k) is None]
    if missing:
        raise ValueError(f"preset {name!r} is missing {', '.join(missing)}")
    rows = _optional_int(merged['rows'], 'rows')
    cols = _optional_int(merged['cols'], 'cols')
    if not rows or not cols or rows < 1 or cols < 1:
        raise ValueError(f'grid size must be positive, got {merged["rows"]}x{merged["cols"]}')
    tps = merged['touchpoints']
    if not isinstance(tps, (list, tuple)):
        raise ValueError(f'touchpoints must be a list of two (row, col) pairs, got {tps!r}')
    if len(tps) != 2:
        raise ValueError(f'exactly two touchpoints are required, got {len(tps)}')
    route = make_route(parse_point(merged['entry']), parse_point(merged['exit']),
                       (parse_point(tps[0]), parse_point(tps[1])))
    route.validate(rows, cols)

    capacity = _optional_int(cfg.get('capacity'), 'capacity')
    if capacity is not None and rows * cols != capacity:
        raise ValueError(f'grid must hold exactly {capacity} cells, got {rows}x{cols}={rows * cols}')
    max_states = _optional_int(cfg.get('max_states'), 'max_states')
    return RunSpec(rows=rows, cols=cols, route=route, capacity=capacity, max_states=max_states)
