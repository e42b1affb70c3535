"""
Project file reader and writer.
A project CSV has three sections, each introduced by a "# NAME" line:
PROJECT (name and saw thickness), CHIPBOARD (sheet definition) and PARTS
(one row per requested part).
"""

import csv
import io
import logging
from typing import List, Dict, Tuple, Optional

from data_models import Dimensions, Chipboard, PvcEdges, PartSpec, Project
from validation import InvalidSpecError, part_spec_errors

logger = logging.getLogger(__name__)

PARTS_HEADER = ['ID', 'Name', 'Width', 'Height', 'CanRotate', 'Count',
                'PvcTop', 'PvcRight', 'PvcBottom', 'PvcLeft']

TRUE_VALUES = ['true', 'yes', '1', 'y']


def _bool(value: str) -> bool:
    return str(value).strip().lower() in TRUE_VALUES


def _flag(value: bool) -> str:
    return 'true' if value else 'false'


def export_project_csv(project: Project) -> str:
    """
    Serialize a project to the sectioned CSV format.

    Returns:
        CSV content as string
    """
    output = io.StringIO()
    writer = csv.writer(output, lineterminator='\n')

    output.write("# PROJECT\n")
    writer.writerow(['Name', project.name])
    writer.writerow(['SawThickness', f"{project.saw_thickness:g}"])
    output.write("\n")

    chipboard = project.chipboard
    output.write("# CHIPBOARD\n")
    writer.writerow(['ID', chipboard.id])
    writer.writerow(['Name', chipboard.name])
    writer.writerow(['Width', f"{chipboard.dimensions.width:g}"])
    writer.writerow(['Height', f"{chipboard.dimensions.height:g}"])
    writer.writerow(['Thickness', f"{chipboard.thickness:g}"])
    writer.writerow(['Margin', f"{chipboard.margin:g}"])
    output.write("\n")

    output.write("# PARTS\n")
    writer.writerow(PARTS_HEADER)
    for part in project.parts:
        edges = part.pvc_edges or PvcEdges()
        writer.writerow([
            part.id,
            part.name,
            f"{part.dimensions.width:g}",
            f"{part.dimensions.height:g}",
            _flag(part.can_rotate),
            part.count,
            _flag(edges.top),
            _flag(edges.right),
            _flag(edges.bottom),
            _flag(edges.left),
        ])

    return output.getvalue()


def _parse_part_row(values: List[str], line_number: int) -> Tuple[Optional[PartSpec], List[str]]:
    if len(values) < 6:
        return None, [f"Line {line_number}: expected at least 6 part columns, got {len(values)}"]

    try:
        width = float(values[2])
        height = float(values[3])
        count = int(values[5])
    except ValueError as e:
        return None, [f"Line {line_number}: {e}"]

    pvc_edges = None
    if len(values) >= 10:
        pvc_edges = PvcEdges(top=_bool(values[6]), right=_bool(values[7]),
                             bottom=_bool(values[8]), left=_bool(values[9]))
        if not pvc_edges.any():
            pvc_edges = None

    spec = PartSpec(
        id=values[0].strip(),
        name=values[1].strip(),
        dimensions=Dimensions(width, height),
        can_rotate=_bool(values[4]),
        count=count,
        pvc_edges=pvc_edges,
    )
    errors = [f"Line {line_number}: {error}" for error in part_spec_errors(spec)]
    if errors:
        return None, errors
    return spec, []


def import_project_csv(csv_content: str, project_id: str = "imported") -> Tuple[Project, List[str]]:
    """
    Parse a project from the sectioned CSV format.

    Args:
        csv_content: File content
        project_id: Id to give the imported project

    Returns:
        Tuple of (project, problems with individual part rows). Invalid part
        rows are left out of the project and described in the problem list.

    Raises:
        InvalidSpecError: If project or chipboard data is missing or malformed
    """
    section = ''
    project_data: Dict[str, str] = {}
    chipboard_data: Dict[str, str] = {}
    parts: List[PartSpec] = []
    errors: List[str] = []

    for line_number, raw_line in enumerate(csv_content.splitlines(), 1):
        line = raw_line.strip()
        if not line:
            continue
        if line.startswith('# '):
            section = line[2:].strip().upper()
            continue
        if line.startswith('#'):
            continue

        values = next(csv.reader([line]))
        if section == 'PROJECT' and len(values) >= 2:
            project_data[values[0]] = values[1]
        elif section == 'CHIPBOARD' and len(values) >= 2:
            chipboard_data[values[0]] = values[1]
        elif section == 'PARTS':
            if values and values[0] == 'ID':
                continue
            spec, row_errors = _parse_part_row(values, line_number)
            if spec is not None:
                parts.append(spec)
            errors.extend(row_errors)

    if not project_data.get('Name') or not project_data.get('SawThickness'):
        raise InvalidSpecError(["Invalid CSV: missing project data"])

    required = ['ID', 'Name', 'Width', 'Height', 'Thickness', 'Margin']
    missing = [key for key in required if key not in chipboard_data]
    if missing:
        raise InvalidSpecError([f"Invalid CSV: missing chipboard data {missing}"])

    try:
        saw_thickness = float(project_data['SawThickness'])
        chipboard = Chipboard(
            id=chipboard_data['ID'],
            name=chipboard_data['Name'],
            dimensions=Dimensions(float(chipboard_data['Width']), float(chipboard_data['Height'])),
            thickness=float(chipboard_data['Thickness']),
            margin=float(chipboard_data['Margin']),
        )
    except ValueError as e:
        raise InvalidSpecError([f"Invalid CSV: {e}"])

    for error in errors:
        logger.warning(error)
    logger.info(f"Imported project '{project_data['Name']}' with {len(parts)} part rows")

    return Project(id=project_id, name=project_data['Name'], saw_thickness=saw_thickness,
                   chipboard=chipboard, parts=parts), errors


def load_project(filepath: str, project_id: Optional[str] = None) -> Tuple[Project, List[str]]:
    try:
        with open(filepath, 'r', encoding='utf-8') as file:
            content = file.read()
    except FileNotFoundError:
        logger.error(f"Project file not found: {filepath}")
        raise
    return import_project_csv(content, project_id or filepath)


def save_project(project: Project, filepath: str) -> None:
    with open(filepath, 'w', encoding='utf-8', newline='') as file:
        file.write(export_project_csv(project))
    logger.info(f"Project '{project.name}' saved to {filepath}")
