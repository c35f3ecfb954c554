from typing import Dict, List, Optional, Sequence
import base64
import io
import json
from pathlib import Path
from PIL import Image, ImageDraw

from common.grid import Cell, Grid, Point
from eval_core.route import Route

TEMPLATE_PATH = Path(__file__).parent / 'html_template.j2'


def _render(template: str, context: Dict[str, str]) -> str:
    out = template
    for k, v in context.items():
        out = out.replace(f"%%{k}%%", v)
    return out


def render_text(grid: Grid, route: Route) -> List[str]:
    """One string per row; waypoint markers override the cell symbol."""
    markers = {route.touchpoints[1]: '2', route.touchpoints[0]: '1', route.entry: 'o', route.exit: 'o'}
    rows = []
    for r in range(grid.rows):
        line = []
        for c in range(grid.cols):
            p = Point(r, c)
            line.append(markers.get(p) or grid.get(p).symbol)
        rows.append(''.join(line))
    return rows


def render_image(grid: Grid, route: Route, path: Optional[Sequence[Point]] = None, cell_px: int = 24) -> Image.Image:
    h, w = grid.rows, grid.cols
    img = Image.new('RGB', (w*cell_px, h*cell_px), (255,255,255))
    draw = ImageDraw.Draw(img)
    for r, c, cell in grid.enumerate():
        x0, y0 = c*cell_px, r*cell_px
        x1, y1 = x0+cell_px-1, y0+cell_px-1
        if cell is Cell.WALL:
            draw.rectangle([x0, y0, x1, y1], fill=(0,0,0))
        else:
            draw.rectangle([x0, y0, x1, y1], outline=(200,200,200))
    if path and len(path) > 1:
        half = cell_px // 2
        pts = [(c*cell_px+half, r*cell_px+half) for r, c in path]
        draw.line(pts, fill=(255,165,0), width=max(2, cell_px//8))
    marks = [(route.entry, (0,255,0)), (route.exit, (255,0,0)),
             (route.touchpoints[0], (0,0,255)), (route.touchpoints[1], (0,120,255))]
    for (r, c), color in marks:
        x, y = c*cell_px, r*cell_px
        draw.rectangle([x+2, y+2, x+cell_px-3, y+cell_px-3], fill=color)
    return img


def image_data_uri(img: Image.Image) -> str:
    buf = io.BytesIO()
    img.save(buf, format='PNG')
    b64 = base64.b64encode(buf.getvalue()).decode('utf-8')
    return f"data:image/png;base64,{b64}"


def generate_report(output_path: str, summary: Dict, img: Image.Image):
    html = TEMPLATE_PATH.read_text(encoding='utf-8')
    ctx = {
        'SIZE': f"{summary['rows']}x{summary['cols']}",
        'BASELINE': str(summary['baseline']),
        'BEST': str(summary['best_length']),
        'EXPLORED': str(summary['explored']),
        'ACCEPTED': str(summary['accepted']),
        'REJECTED': str(summary['rejected']),
        'COMPLETED': 'yes' if summary['completed'] else 'no (stopped early)',
        'ROUTE': json.dumps({k: summary[k] for k in ('entry', 'exit', 'touchpoints')}),
        'RENDERED': '\n'.join(summary['rendered']),
        'IMG_SRC': image_data_uri(img),
    }
    rendered = _render(html, ctx)
    Path(output_path).write_text(rendered, encoding='utf-8')
