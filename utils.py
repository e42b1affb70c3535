"""
Utility functions for the chipboard cut planner.
"""

import logging

from config import DEFAULT_LOG_LEVEL


def setup_logging(log_level: str = DEFAULT_LOG_LEVEL) -> None:
    """
    Set up logging configuration for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format=log_format,
        handlers=[
            logging.StreamHandler(),
        ]
    )

    # Set specific logger levels
    logging.getLogger('matplotlib').setLevel(logging.WARNING)
    logging.getLogger('PIL').setLevel(logging.WARNING)


def format_area(area_mm2: float) -> str:
    """
    Format area for display with appropriate units.

    Args:
        area_mm2: Area in square millimeters

    Returns:
        Formatted area string
    """
    if area_mm2 >= 1_000_000:
        return f"{area_mm2 / 1_000_000:.2f} m²"
    elif area_mm2 >= 100:
        return f"{area_mm2 / 100:.1f} cm²"
    else:
        return f"{area_mm2:.0f} mm²"


def format_length(length_mm: float) -> str:
    """Format a length in mm, switching to meters from one meter up."""
    if length_mm >= 1_000:
        return f"{length_mm / 1_000:.2f} m"
    return f"{length_mm:.0f} mm"


def format_percentage(value: float) -> str:
    """
    Format percentage for display.

    Args:
        value: Percentage value (0-100)

    Returns:
        Formatted percentage string
    """
    return f"{value:.1f}%"
