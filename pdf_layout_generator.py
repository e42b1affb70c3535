"""
PDF cutting layout generator.
Draws one page per sheet with parts, edge banding, cut lines and remainders.
"""

import io
import logging
from typing import List, Optional

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import matplotlib.patches as patches
from matplotlib.backends.backend_pdf import PdfPages

from config import COLORS
from data_models import PlacementResult, SheetLayout, PlacedPart

logger = logging.getLogger(__name__)


class PDFLayoutGenerator:
    """Generate visual PDF cutting layouts."""

    def __init__(self):
        self.colors = [
            '#B2DFDB',  # Light teal
            '#FFF9C4',  # Light yellow
            '#F8BBD9',  # Light pink
            '#C8E6C9',  # Light green
            '#E1BEE7',  # Light purple
            '#FFCCBC',  # Light orange
            '#DCEDC8',  # Light lime
            '#B3E5FC',  # Light cyan
        ]

    def generate_cutting_layouts_pdf(self, result: PlacementResult, project_name: str = "",
                                     output_path: Optional[str] = None) -> bytes:
        """Generate the PDF, one page per sheet, and optionally save it."""
        pdf_buffer = io.BytesIO()

        with PdfPages(pdf_buffer) as pdf:
            for sheet_idx, sheet in enumerate(result.sheets):
                self._create_sheet_page(pdf, sheet, sheet_idx, len(result.sheets), project_name)

        pdf_bytes = pdf_buffer.getvalue()
        pdf_buffer.close()

        if output_path:
            with open(output_path, 'wb') as f:
                f.write(pdf_bytes)
            logger.info(f"PDF cutting layout saved to {output_path}")

        return pdf_bytes

    def _create_sheet_page(self, pdf: PdfPages, sheet: SheetLayout, sheet_idx: int,
                           sheet_count: int, project_name: str):
        chipboard = sheet.chipboard
        width = chipboard.dimensions.width
        height = chipboard.dimensions.height

        fig, ax = plt.subplots(1, 1, figsize=(11.69, 8.27))  # A4 landscape
        fig.patch.set_facecolor('white')

        header_lines = [
            f"Project: {project_name}" if project_name else "Cutting Layout",
            f"Sheet {sheet_idx + 1} of {sheet_count} - {chipboard.name} "
            f"({width:.0f} x {height:.0f} mm, {chipboard.thickness:g} mm)",
            f"Parts: {len(sheet.parts)}   Cuts: {len(sheet.cut_lines)}   "
            f"Utilization: {sheet.get_utilization_percentage():.1f}%   ↻ = rotated",
        ]
        for i, line in enumerate(header_lines):
            fig.text(0.5, 0.97 - i * 0.03, line, ha='center', va='top',
                     fontsize=10 if i == 0 else 9, fontweight='bold' if i == 0 else 'normal')

        ax.set_xlim(0, width)
        ax.set_ylim(0, height)
        ax.set_aspect('equal')

        ax.add_patch(patches.Rectangle((0, 0), width, height, linewidth=2,
                                       edgecolor='black', facecolor=COLORS['MARGIN']))
        usable = chipboard.usable_rect()
        ax.add_patch(patches.Rectangle((usable.x, usable.y), usable.width, usable.height,
                                       linewidth=0.5, edgecolor='black', facecolor='white'))

        for remainder in sheet.remainders:
            ax.add_patch(patches.Rectangle(
                (remainder.x, remainder.y), remainder.width, remainder.height,
                linewidth=0.5, edgecolor='grey', facecolor=COLORS['REMAINDER'], hatch='//', alpha=0.6))

        for i, part in enumerate(sheet.parts):
            self._place_part_on_layout(ax, part, i)

        for line in sheet.cut_lines:
            ax.plot([line.x1, line.x2], [line.y1, line.y2], color=COLORS['CUT_LINE'],
                    linestyle='--', linewidth=0.8, alpha=0.7)

        ax.set_xlabel('Width (mm)', fontsize=9)
        ax.set_ylabel('Height (mm)', fontsize=9)

        plt.tight_layout(rect=(0, 0, 1, 0.9))
        pdf.savefig(fig, dpi=200, facecolor='white')
        plt.close(fig)

    def _place_part_on_layout(self, ax, part: PlacedPart, index: int):
        face_color = self.colors[index % len(self.colors)]
        ax.add_patch(patches.Rectangle(
            (part.x, part.y), part.dimensions.width, part.dimensions.height,
            linewidth=1, edgecolor='black', facecolor=face_color))

        if part.pvc_edges is not None:
            self._draw_pvc_edges(ax, part)

        symbol = " ↻" if part.rotated else ""
        label = f"{part.name}{symbol}\n{part.dimensions.width:.0f}×{part.dimensions.height:.0f}"

        shorter_side = min(part.dimensions.width, part.dimensions.height)
        if shorter_side > 400:
            font_size = 8
        elif shorter_side > 200:
            font_size = 6
        else:
            font_size = 4

        ax.text(part.x + part.dimensions.width / 2, part.y + part.dimensions.height / 2, label,
                ha='center', va='center', fontsize=font_size,
                rotation=90 if part.dimensions.height > part.dimensions.width * 1.5 else 0)

    def _draw_pvc_edges(self, ax, part: PlacedPart):
        edges = part.pvc_edges
        segments: List[tuple] = []
        if edges.top:
            segments.append(((part.x, part.right), (part.top, part.top)))
        if edges.bottom:
            segments.append(((part.x, part.right), (part.y, part.y)))
        if edges.left:
            segments.append(((part.x, part.x), (part.y, part.top)))
        if edges.right:
            segments.append(((part.right, part.right), (part.y, part.top)))
        for xs, ys in segments:
            ax.plot(xs, ys, color=COLORS['PVC_EDGE'], linewidth=3, solid_capstyle='butt')


def generate_cutting_layout_pdf(result: PlacementResult, project_name: str = "",
                                output_path: Optional[str] = None) -> bytes:
    """Generate PDF cutting layouts for every sheet of a result."""
    generator = PDFLayoutGenerator()
    return generator.generate_cutting_layouts_pdf(result, project_name, output_path)
