"""
Target geometry, round layout and presentation constants for Artemis.

Target ring layout follows the standard 10-ring archery face: ten equal
width scoring bands, two per colour, worth 10 (centre) down to 1 (edge).
"""

# =============================================================================
# Target Geometry
# =============================================================================

RING_COUNT = 10                # Equal-width concentric scoring rings
MAX_SCORE = 10                 # Score of the innermost ring
MISS_SCORE = 0                 # Score of a shot outside the target face

# Physical units per normalized radius. A shot at normalized distance 0.5
# sits 5 units from the centre of the face.
TARGET_RADIUS_UNITS = 10.0

# =============================================================================
# Round Layout
# =============================================================================

SHOTS_PER_END = 3              # Arrows shot and scored together
DEFAULT_ENDS_PER_ROUND = 10
MIN_ENDS = 1
MAX_ENDS = 12

# =============================================================================
# Presentation
# =============================================================================

# Colour bands from the centre outwards: gold, red, blue, black, white.
RING_BAND_COLORS = ["#e6d100", "#e4442c", "#23a0d6", "#484239", "#d3c5b3"]
RINGS_PER_BAND = 2

# Per-practice marker colours for the all-shots overlay, cycled by index
PRACTICE_COLORS = [
    "#3b82f6",  # blue
    "#10b981",  # green
    "#f59e0b",  # amber
    "#ef4444",  # red
    "#8b5cf6",  # purple
    "#ec4899",  # pink
    "#06b6d4",  # cyan
    "#f97316",  # orange
    "#14b8a6",  # teal
    "#a855f7",  # violet
]

CSV_HEADERS = [
    "Practice Number",
    "Date",
    "Total Score",
    "Number of Ends",
    "Average Score per End",
    "Best End",
    "Average Precision",
    "Notes",
]

EXPORT_FILENAME_PREFIX = "artemis-practice-stats"
