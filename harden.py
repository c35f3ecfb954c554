import argparse
import json
import sys
from pathlib import Path
from typing import Dict, List, Optional

from common.config_loader import load_config, resolve_run, parse_point, as_bool, RunSpec
from common.grid import Grid
from common.pdf_export import export_summary_pdf
from report.generator import render_text, render_image, generate_report
from search.hardener import HardenConfig, MazeHardener, SearchResult
from eval_core.route import route_path


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description='Search for the wall layout that maximizes the entry-1-2-exit route.')
    ap.add_argument('--config-dir', default='config', help='directory holding config.yaml / local.yaml')
    ap.add_argument('--preset', help='named parameter set (classic, tiny, small, or one from config.yaml)')
    ap.add_argument('--size', help='grid size as ROWSxCOLS, e.g. 4x4')
    ap.add_argument('--entry', help='entry cell as r,c')
    ap.add_argument('--exit', help='exit cell as r,c')
    ap.add_argument('--touchpoints', nargs=2, metavar='R,C', help='the two ordered touchpoints')
    ap.add_argument('--max-states', type=int, help='stop after expanding this many distinct layouts')
    ap.add_argument('--outdir', help='where to write the report files')
    ap.add_argument('--no-progress', action='store_true', help='disable the progress bar')
    ap.add_argument('--no-report', action='store_true', help='only print the result, write no files')
    return ap


def apply_args(cfg: Dict, args: argparse.Namespace) -> Dict:
    cfg = dict(cfg)
    if args.preset:
        cfg['preset'] = args.preset
    if args.size:
        try:
            h, w = map(int, args.size.lower().split('x'))
        except ValueError:
            raise ValueError(f'size must look like ROWSxCOLS, got {args.size!r}') from None
        cfg['rows'], cfg['cols'] = h, w
    if args.entry:
        cfg['entry'] = parse_point(args.entry)
    if args.exit:
        cfg['exit'] = parse_point(args.exit)
    if args.touchpoints:
        cfg['touchpoints'] = [parse_point(t) for t in args.touchpoints]
    if args.max_states is not None:
        cfg['max_states'] = args.max_states
    if args.outdir:
        cfg['output_dir'] = args.outdir
    if args.no_progress:
        cfg['progress'] = False
    return cfg


def summarize(spec: RunSpec, result: SearchResult) -> Dict:
    route = spec.route
    return {
        'rows': spec.rows,
        'cols': spec.cols,
        'entry': list(route.entry),
        'exit': list(route.exit),
        'touchpoints': [list(t) for t in route.touchpoints],
        'baseline': result.baseline,
        'best_length': result.best_length,
        'best_maze': result.best_grid.serialize(),
        'grid': result.best_grid.to_list(),
        'rendered': render_text(result.best_grid, route),
        'explored': result.explored,
        'accepted': result.accepted,
        'rejected': result.rejected,
        'completed': result.completed,
        'improvements': [list(i) for i in result.improvements],
    }


def write_outputs(summary: Dict, result: SearchResult, spec: RunSpec, outdir: Path) -> None:
    outdir.mkdir(parents=True, exist_ok=True)
    (outdir / 'best_maze.txt').write_text('\n'.join(summary['rendered']) + '\n', encoding='utf-8')
    img = render_image(result.best_grid, spec.route, path=route_path(result.best_grid, spec.route))
    img_path = outdir / 'best_maze.png'
    img.save(img_path)
    (outdir / 'summary.json').write_text(json.dumps(summary, ensure_ascii=False, indent=2), encoding='utf-8')
    generate_report(str(outdir / 'report.html'), summary, img)
    export_summary_pdf(str(outdir / 'summary.pdf'), 'Hardest Maze Summary', summary, image_paths=[str(img_path)])


def run(spec: RunSpec, progress: bool = True) -> SearchResult:
    def _announce(length: int, grid: Grid):
        if not progress:
            print(f'New best length {length}: {grid.serialize()}')

    hardener = MazeHardener(spec.route, HardenConfig(max_states=spec.max_states, progress=progress, on_improve=_announce))
    return hardener.run(Grid.open(spec.rows, spec.cols, capacity=spec.capacity))


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        cfg = apply_args(load_config(args.config_dir), args)
        spec = resolve_run(cfg)
    except ValueError as e:
        print(f'error: {e}', file=sys.stderr)
        return 2
    progress = as_bool(cfg.get('progress'), default=True)
    print(f'Hardening {spec.rows}x{spec.cols} maze, entry {tuple(spec.route.entry)}, exit {tuple(spec.route.exit)}, '
          f'touchpoints {tuple(spec.route.touchpoints[0])} {tuple(spec.route.touchpoints[1])}')
    result = run(spec, progress=progress)
    summary = summarize(spec, result)
    for row in summary['rendered']:
        print(row)
    best = result.best_length if result.best_length is not None else 'unreachable'
    print(f'Best Path Length: {best}')
    if not result.completed:
        print(f'Search stopped after {result.explored} states; result may not be optimal')
    if not args.no_report:
        outdir = Path(cfg.get('output_dir') or 'outputs')
        write_outputs(summary, result, spec, outdir)
        print('Done. Reports saved to', outdir)
    return 0


if __name__ == '__main__':
    sys.exit(main())
