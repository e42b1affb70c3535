"""
Cutlist loader for the chipboard cut planner.
Reads part requirements from Excel or CSV spreadsheets.
"""

import logging
import os
from typing import List, Tuple, Any

import pandas as pd

from data_models import Dimensions, PvcEdges, PartSpec
from validation import part_spec_errors

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ['Part ID', 'Width (mm)', 'Height (mm)', 'Quantity']
EDGE_COLUMNS = ['EB Top', 'EB Right', 'EB Bottom', 'EB Left']


def _read_table(filepath: str) -> pd.DataFrame:
    extension = os.path.splitext(filepath)[1].lower()
    if extension in ['.xlsx', '.xls']:
        return pd.read_excel(filepath)
    return pd.read_csv(filepath)


def _flag(value: Any, default: bool = False) -> bool:
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return default
    if isinstance(value, str):
        return value.strip().lower() in ['yes', 'true', '1', 'y', 'x']
    return bool(value)


def load_part_specs(filepath: str) -> Tuple[List[PartSpec], List[str]]:
    """
    Load part specifications from a cutlist spreadsheet.

    Args:
        filepath: Path to the cutlist (.xlsx, .xls or .csv)

    Returns:
        Tuple of (part specifications, problems found in skipped rows)

    Expected columns:
        - Part ID: Unique identifier for the part
        - Name: Display name (optional)
        - Width (mm), Height (mm): Part size
        - Quantity: Number of pieces needed
        - Can Rotate: yes/no, defaults to yes (optional)
        - EB Top, EB Right, EB Bottom, EB Left: edge banding flags (optional)

    Raises:
        ValueError: If required columns are missing
    """
    specs: List[PartSpec] = []
    errors: List[str] = []

    try:
        df = _read_table(filepath)
    except FileNotFoundError:
        logger.error(f"Cutlist file not found: {filepath}")
        raise

    missing_columns = [col for col in REQUIRED_COLUMNS if col not in df.columns]
    if missing_columns:
        raise ValueError(f"Missing required columns in cutlist: {missing_columns}")

    logger.info(f"Loading {len(df)} cutlist rows from {filepath}")
    has_edges = all(col in df.columns for col in EDGE_COLUMNS)

    for index, row in df.iterrows():
        row_label = f"Row {int(index) + 2}"
        try:
            part_id = str(row['Part ID']).strip()
            name = str(row['Name']).strip() if 'Name' in df.columns and not pd.isna(row['Name']) else part_id
            width = float(row['Width (mm)'])
            height = float(row['Height (mm)'])
            quantity = int(row['Quantity'])
        except (ValueError, TypeError) as e:
            errors.append(f"{row_label}: {e}")
            continue

        can_rotate = _flag(row['Can Rotate'], default=True) if 'Can Rotate' in df.columns else True

        pvc_edges = None
        if has_edges:
            pvc_edges = PvcEdges(*(_flag(row[col]) for col in EDGE_COLUMNS))
            if not pvc_edges.any():
                pvc_edges = None

        spec = PartSpec(id=part_id, name=name, dimensions=Dimensions(width, height),
                        can_rotate=can_rotate, count=quantity, pvc_edges=pvc_edges)

        problems = part_spec_errors(spec)
        if problems:
            errors.extend(f"{row_label}: {problem}" for problem in problems)
            continue
        specs.append(spec)

    for error in errors:
        logger.warning(f"Skipping cutlist entry - {error}")
    logger.info(f"Loaded {len(specs)} part specifications ({sum(s.count for s in specs)} pieces)")
    return specs, errors
