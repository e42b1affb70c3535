"""
Command line entry point for the chipboard cut planner.

Usage:
    python main.py project.csv --output-dir out --pdf --excel
    python main.py --cutlist parts.xlsx --kerf 4
"""

import argparse
import logging
import os
import sys
from dataclasses import replace
from typing import List, Optional

from config import DEFAULT_CHIPBOARD, DEFAULT_KERF, DEFAULT_LOG_LEVEL, MAX_SHEETS
from data_models import Chipboard, Dimensions, Project
from optimization_core import place_all
from packing_strategies import STRATEGIES, get_strategy
from parsers import load_part_specs
from parsers_csv import load_project
from simple_reports import create_report_package, generate_cutting_layout_text
from utils import setup_logging
from validation import CutPlannerError

logger = logging.getLogger(__name__)

EXIT_INVALID_INPUT = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Plan guillotine cuts of parts on chipboard sheets.")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("project", nargs="?", help="Project CSV with project, chipboard and parts sections")
    source.add_argument("--cutlist", help="Excel or CSV cutlist, placed on the default chipboard")
    parser.add_argument("--kerf", type=float, default=None,
                        help=f"Saw kerf in mm (project value, or {DEFAULT_KERF:g} for cutlists)")
    parser.add_argument("--margin", type=float, default=None,
                        help="Edge trim in mm, overrides the project chipboard margin")
    parser.add_argument("--max-sheets", type=int, default=MAX_SHEETS, help="Upper bound on sheets used")
    parser.add_argument("--strategy", choices=sorted(STRATEGIES), default="aligned",
                        help="Single-sheet packing strategy")
    parser.add_argument("--log-level", default=DEFAULT_LOG_LEVEL,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])
    parser.add_argument("--output-dir", help="Write text and CSV reports to this directory")
    parser.add_argument("--pdf", action="store_true", help="Also write the PDF cutting layout")
    parser.add_argument("--excel", action="store_true", help="Also write the Excel report")
    return parser


def _project_from_cutlist(path: str, kerf: Optional[float], margin: Optional[float]) -> Project:
    specs, errors = load_part_specs(path)
    if errors:
        raise CutPlannerError(f"{len(errors)} invalid cutlist rows: " + "; ".join(errors))
    chipboard = Chipboard(
        id=DEFAULT_CHIPBOARD['id'],
        name=DEFAULT_CHIPBOARD['name'],
        dimensions=Dimensions(DEFAULT_CHIPBOARD['width'], DEFAULT_CHIPBOARD['height']),
        thickness=DEFAULT_CHIPBOARD['thickness'],
        margin=DEFAULT_CHIPBOARD['margin'] if margin is None else margin,
    )
    name = os.path.splitext(os.path.basename(path))[0]
    return Project(id=name, name=name, saw_thickness=DEFAULT_KERF if kerf is None else kerf,
                   chipboard=chipboard, parts=specs)


def _load(args: argparse.Namespace) -> Project:
    if args.cutlist:
        return _project_from_cutlist(args.cutlist, args.kerf, args.margin)

    project, errors = load_project(args.project)
    if errors:
        raise CutPlannerError(f"{len(errors)} invalid part rows: " + "; ".join(errors))
    if args.kerf is not None:
        project.saw_thickness = args.kerf
    if args.margin is not None:
        project.chipboard = replace(project.chipboard, margin=args.margin)
    return project


def _write_outputs(project: Project, output_dir: str, pdf: bool, excel: bool) -> None:
    os.makedirs(output_dir, exist_ok=True)
    result = project.placement_result

    for filename, content in create_report_package(result, project.name).items():
        with open(os.path.join(output_dir, filename), 'w', encoding='utf-8', newline='') as f:
            f.write(content)

    if excel:
        from report_generators import create_excel_report
        with open(os.path.join(output_dir, 'cutting_plan.xlsx'), 'wb') as f:
            f.write(create_excel_report(result, project.name))

    if pdf:
        from pdf_layout_generator import generate_cutting_layout_pdf
        generate_cutting_layout_pdf(result, project.name, os.path.join(output_dir, 'cutting_layout.pdf'))

    logger.info(f"Reports written to {output_dir}")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    try:
        project = _load(args)
        project.placement_result = place_all(project.chipboard, project.parts, project.saw_thickness,
                                             strategy=get_strategy(args.strategy),
                                             max_sheets=args.max_sheets)
    except FileNotFoundError as e:
        logger.error(f"Cannot read input: {e}")
        return EXIT_INVALID_INPUT
    except ValueError as e:
        logger.error(f"Invalid input: {e}")
        return EXIT_INVALID_INPUT

    print(generate_cutting_layout_text(project.placement_result, project.name))

    if args.output_dir:
        _write_outputs(project, args.output_dir, args.pdf, args.excel)

    return 1 if project.placement_result.unplaced else 0


if __name__ == "__main__":
    sys.exit(main())
