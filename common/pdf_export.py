from typing import List, Dict
from pathlib import Path
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas
from reportlab.lib.units import cm


def export_summary_pdf(output_path: str, title: str, summary: Dict, image_paths: List[str] | None = None):
    p = canvas.Canvas(output_path, pagesize=A4)
    width, height = A4
    p.setFont("Helvetica-Bold", 16)
    p.drawString(2*cm, height-2*cm, title)
    p.setFont("Helvetica", 11)
    y = height - 3*cm
    lines = [
        f"Grid: {summary.get('rows')}x{summary.get('cols')}",
        f"Entry: {summary.get('entry')}  Exit: {summary.get('exit')}  Touchpoints: {summary.get('touchpoints')}",
        f"Baseline length: {summary.get('baseline')}",
        f"Best length: {summary.get('best_length')}",
        f"Explored: {summary.get('explored')}  accepted={summary.get('accepted')} rejected={summary.get('rejected')}",
        f"Complete: {summary.get('completed')}",
    ]
    for ln in lines:
        p.drawString(2*cm, y, ln)
        y -= 0.8*cm
    p.setFont("Courier", 12)
    for row in summary.get('rendered') or []:
        p.drawString(2*cm, y, row)
        y -= 0.5*cm
        if y < 2*cm:
            p.showPage()
            p.setFont("Courier", 12)
            y = height - 2*cm
    if image_paths:
        img = image_paths[0]
        if img and Path(img).exists():
            p.showPage()
            p.setFont("Helvetica", 11)
            p.drawString(2*cm, height-2*cm, "Best Maze")
            p.drawImage(img, 2*cm, 4*cm, width=16*cm, height=height-8*cm, preserveAspectRatio=True, mask='auto')
    p.save()
