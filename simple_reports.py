"""
Simple report generation for placement results.
Creates text and CSV reports without spreadsheet or plotting dependencies.
"""

import csv
import io
from typing import Dict

from data_models import PlacementResult
from utils import format_area, format_length, format_percentage


def generate_cutting_layout_text(result: PlacementResult, project_name: str = "") -> str:
    """
    Generate text-based cutting layout report.

    Args:
        result: Placement result to describe
        project_name: Project name to include in report header

    Returns:
        Formatted text report
    """
    report_lines = []

    if project_name:
        report_lines.append(f"CUTTING LAYOUT REPORT - PROJECT: {project_name}")
    else:
        report_lines.append("CUTTING LAYOUT REPORT")

    report_lines.append("=" * 60)
    report_lines.append("")

    stats = result.statistics
    report_lines.append("SUMMARY:")
    report_lines.append(f"Total Sheets: {stats.total_sheets}")
    report_lines.append(f"Parts Placed: {stats.total_parts}/{stats.requested_parts}")
    report_lines.append(f"Efficiency: {stats.efficiency:.2f}%")
    report_lines.append(f"Cut Operations: {stats.total_cut_operations}")
    report_lines.append(f"Total Cut Length: {format_length(stats.total_cut_length)}")
    report_lines.append(f"Edge Banding: {format_length(stats.total_pvc_length)}")
    if result.is_partial:
        report_lines.append("WARNING: sheet limit reached, the plan is incomplete")
    report_lines.append("")

    for i, sheet in enumerate(result.sheets, 1):
        chipboard = sheet.chipboard
        report_lines.append(f"SHEET {i}: {chipboard.name}")
        report_lines.append(f"Size: {chipboard.dimensions.width:g}mm x {chipboard.dimensions.height:g}mm"
                            f" (margin {chipboard.margin:g}mm)")
        report_lines.append(f"Utilization: {format_percentage(sheet.get_utilization_percentage())}")
        report_lines.append(f"Parts Count: {len(sheet.parts)}")
        report_lines.append("")

        if sheet.parts:
            report_lines.append("PARTS ON SHEET:")
            report_lines.append("Part ID".ljust(20) + "Dimensions".ljust(15) + "Position".ljust(15) + "Notes")
            report_lines.append("-" * 70)

            for part in sheet.parts:
                notes = []
                if part.rotated:
                    notes.append("Rotated")
                if part.pvc_edges is not None and part.pvc_edges.any():
                    notes.append(f"PVC {part.banding_length():.0f}mm")

                report_lines.append(
                    str(part.id)[:19].ljust(20) +
                    str(part.dimensions).ljust(15) +
                    f"({part.x:.0f},{part.y:.0f})".ljust(15) +
                    ", ".join(notes)
                )
            report_lines.append("")

        if sheet.cut_lines:
            report_lines.append(f"CUTS: {len(sheet.cut_lines)}")
            for line in sheet.cut_lines:
                direction = "V" if line.is_vertical else "H"
                report_lines.append(f"  {direction} ({line.x1:.1f},{line.y1:.1f}) -> "
                                    f"({line.x2:.1f},{line.y2:.1f})  {line.length:.1f}mm")
            report_lines.append("")

        if sheet.remainders:
            report_lines.append("REMAINDERS:")
            for remainder in sheet.remainders:
                report_lines.append(f"  {remainder.width:.0f} x {remainder.height:.0f} at "
                                    f"({remainder.x:.0f},{remainder.y:.0f})  {format_area(remainder.area)}")
            report_lines.append("")

        report_lines.append("-" * 60)
        report_lines.append("")

    if result.unplaced:
        report_lines.append("UNPLACED PARTS:")
        for part in result.unplaced:
            report_lines.append(f"  {part.id} ({part.dimensions}) - {part.reason}")

    return "\n".join(report_lines)


def generate_placement_csv(result: PlacementResult) -> str:
    """
    Generate CSV with one row per placed part, followed by the unplaced parts.

    Returns:
        CSV content as string
    """
    output = io.StringIO()
    writer = csv.writer(output)

    writer.writerow([
        'Sheet', 'Piece ID', 'Part ID', 'Name', 'Width (mm)', 'Height (mm)',
        'X Position (mm)', 'Y Position (mm)', 'Rotated', 'PVC Top', 'PVC Right',
        'PVC Bottom', 'PVC Left', 'PVC Length (mm)'
    ])

    for sheet_number, sheet in enumerate(result.sheets, 1):
        for part in sheet.parts:
            edges = part.pvc_edges
            writer.writerow([
                sheet_number,
                part.id,
                part.part_id,
                part.name,
                part.dimensions.width,
                part.dimensions.height,
                part.x,
                part.y,
                'Yes' if part.rotated else 'No',
                'Yes' if edges and edges.top else 'No',
                'Yes' if edges and edges.right else 'No',
                'Yes' if edges and edges.bottom else 'No',
                'Yes' if edges and edges.left else 'No',
                f"{part.banding_length():.0f}",
            ])

    if result.unplaced:
        output.write("\n# UNPLACED PARTS\n")
        writer.writerow(['Piece ID', 'Part ID', 'Name', 'Width (mm)', 'Height (mm)', 'Reason'])
        for part in result.unplaced:
            writer.writerow([part.id, part.part_id, part.name,
                             part.dimensions.width, part.dimensions.height, part.reason])

    return output.getvalue()


def generate_cut_lines_csv(result: PlacementResult) -> str:
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(['Sheet', 'Direction', 'X1', 'Y1', 'X2', 'Y2', 'Length (mm)'])
    for sheet_number, sheet in enumerate(result.sheets, 1):
        for line in sheet.cut_lines:
            writer.writerow([sheet_number, 'Vertical' if line.is_vertical else 'Horizontal',
                             line.x1, line.y1, line.x2, line.y2, f"{line.length:.1f}"])
    return output.getvalue()


def generate_remainders_csv(result: PlacementResult) -> str:
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(['Sheet', 'X', 'Y', 'Width (mm)', 'Height (mm)', 'Area (mm²)', 'Created From'])
    for sheet_number, sheet in enumerate(result.sheets, 1):
        for remainder in sheet.remainders:
            writer.writerow([sheet_number, remainder.x, remainder.y, remainder.width,
                             remainder.height, f"{remainder.area:.0f}", remainder.created_from])
    return output.getvalue()


def create_report_package(result: PlacementResult, project_name: str = "") -> Dict[str, str]:
    """
    Create a package of all text reports.

    Returns:
        Dictionary with report file names as keys and content as values
    """
    reports = {
        'cutting_layout.txt': generate_cutting_layout_text(result, project_name),
        'placements.csv': generate_placement_csv(result),
        'cut_lines.csv': generate_cut_lines_csv(result),
    }

    if any(sheet.remainders for sheet in result.sheets):
        reports['remainders.csv'] = generate_remainders_csv(result)

    return reports
