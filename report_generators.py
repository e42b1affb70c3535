"""
Excel report generator for placement results.
"""

import io
import logging
from typing import List, Any

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill

from data_models import PlacementResult

logger = logging.getLogger(__name__)

HEADER_FILL = PatternFill(start_color="CCCCCC", end_color="CCCCCC", fill_type="solid")


def _write_headers(ws, headers: List[str], width: int = 18) -> None:
    for col, header in enumerate(headers, 1):
        cell = ws.cell(row=1, column=col, value=header)
        cell.font = Font(bold=True)
        cell.fill = HEADER_FILL
        ws.column_dimensions[cell.column_letter].width = width


def _write_rows(ws, rows: List[List[Any]], start_row: int = 2) -> None:
    for row_number, values in enumerate(rows, start_row):
        for col, value in enumerate(values, 1):
            ws.cell(row=row_number, column=col, value=value)


def create_summary_tab(ws, result: PlacementResult, project_name: str) -> None:
    ws['A1'] = f"Cutting Plan Summary - {project_name}" if project_name else "Cutting Plan Summary"
    ws['A1'].font = Font(size=16, bold=True)
    ws.merge_cells('A1:D1')

    stats = result.statistics
    metrics = [
        ("Sheets Used", stats.total_sheets),
        ("Parts Requested", stats.requested_parts),
        ("Parts Placed", stats.total_parts),
        ("Parts Unplaced", len(result.unplaced)),
        ("Efficiency (%)", stats.efficiency),
        ("Cut Operations", stats.total_cut_operations),
        ("Total Cut Length (mm)", stats.total_cut_length),
        ("Edge Banding (mm)", stats.total_pvc_length),
        ("Partial Plan", "Yes" if result.is_partial else "No"),
    ]

    for row, (metric, value) in enumerate(metrics, 3):
        ws[f'A{row}'] = metric
        ws[f'B{row}'] = value
        ws[f'A{row}'].font = Font(bold=True)
    ws.column_dimensions['A'].width = 28


def create_placements_tab(ws, result: PlacementResult) -> None:
    _write_headers(ws, ['Sheet', 'Piece ID', 'Part ID', 'Name', 'Width (mm)', 'Height (mm)',
                        'X (mm)', 'Y (mm)', 'Rotated'])
    rows = []
    for sheet_number, sheet in enumerate(result.sheets, 1):
        for part in sheet.parts:
            rows.append([sheet_number, part.id, part.part_id, part.name, part.dimensions.width,
                         part.dimensions.height, part.x, part.y, 'Yes' if part.rotated else 'No'])
    _write_rows(ws, rows)


def create_cut_lines_tab(ws, result: PlacementResult) -> None:
    _write_headers(ws, ['Sheet', 'Direction', 'X1', 'Y1', 'X2', 'Y2', 'Length (mm)'])
    rows = []
    for sheet_number, sheet in enumerate(result.sheets, 1):
        for line in sheet.cut_lines:
            rows.append([sheet_number, 'Vertical' if line.is_vertical else 'Horizontal',
                         line.x1, line.y1, line.x2, line.y2, round(line.length, 1)])
    _write_rows(ws, rows)


def create_remainders_tab(ws, result: PlacementResult) -> None:
    _write_headers(ws, ['Sheet', 'X', 'Y', 'Width (mm)', 'Height (mm)', 'Area (m²)', 'Created From'])
    rows = []
    for sheet_number, sheet in enumerate(result.sheets, 1):
        for remainder in sheet.remainders:
            rows.append([sheet_number, remainder.x, remainder.y, remainder.width, remainder.height,
                         round(remainder.area / 1_000_000, 3), remainder.created_from])
    _write_rows(ws, rows)


def create_edge_band_summary_tab(ws, result: PlacementResult) -> None:
    """Edge banding length per requested part, in mm and m."""
    _write_headers(ws, ['Part ID', 'Name', 'Pieces', 'Total Length (mm)', 'Total Length (m)'], width=20)

    edge_band_data = {}
    for sheet in result.sheets:
        for part in sheet.parts:
            length = part.banding_length()
            if length <= 0:
                continue
            entry = edge_band_data.setdefault(part.part_id, {'name': part.name, 'pieces': 0, 'length': 0.0})
            entry['pieces'] += 1
            entry['length'] += length

    rows = [[part_id, data['name'], data['pieces'], data['length'], round(data['length'] / 1000, 2)]
            for part_id, data in sorted(edge_band_data.items())]
    if not rows:
        rows = [["No edge banding required", "", 0, 0, 0.0]]
    _write_rows(ws, rows)


def create_unplaced_tab(ws, result: PlacementResult) -> None:
    _write_headers(ws, ['Piece ID', 'Part ID', 'Name', 'Width (mm)', 'Height (mm)', 'Reason'])
    _write_rows(ws, [[part.id, part.part_id, part.name, part.dimensions.width,
                      part.dimensions.height, part.reason] for part in result.unplaced])


def create_excel_report(result: PlacementResult, project_name: str = "") -> bytes:
    """
    Create the Excel workbook for a placement result.

    Returns:
        The .xlsx file content
    """
    try:
        wb = Workbook()
        wb.remove(wb.active)

        create_summary_tab(wb.create_sheet("Summary"), result, project_name)
        create_placements_tab(wb.create_sheet("Placements"), result)
        create_cut_lines_tab(wb.create_sheet("Cut Lines"), result)
        create_remainders_tab(wb.create_sheet("Remainders"), result)
        create_edge_band_summary_tab(wb.create_sheet("Edge Banding"), result)
        if result.unplaced:
            create_unplaced_tab(wb.create_sheet("Unplaced"), result)

        buffer = io.BytesIO()
        wb.save(buffer)
        return buffer.getvalue()

    except Exception as e:
        logger.error(f"Excel generation failed: {e}")
        raise
