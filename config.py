"""
Configuration defaults for the chipboard cut planner.
Values here are defaults only; every entry point accepts keyword overrides.
"""

# Saw blade kerf in mm
DEFAULT_KERF = 3.0

# Uniform edge trim in mm
DEFAULT_MARGIN = 0.0

# Hard ceiling on sheets per placement run. The orchestrator stops earlier
# when a fresh sheet makes no progress.
MAX_SHEETS = 2000

# Score reduction per aligned axis when choosing a free rectangle
ALIGNMENT_BONUS = 1000.0

# Geometric tolerance in mm
EPSILON = 1e-6

DEFAULT_LOG_LEVEL = "INFO"

DEFAULT_CHIPBOARD = {
    'id': 'standard',
    'name': 'Chipboard 2800x2070',
    'width': 2800.0,
    'height': 2070.0,
    'thickness': 18.0,
    'margin': DEFAULT_MARGIN,
}

COLORS = {
    'REMAINDER': '#E0E0E0',
    'CUT_LINE': 'darkred',
    'PVC_EDGE': '#1565C0',
    'MARGIN': '#BDBDBD',
}
