"""
Drill Team Choreographer - Constants and Configuration

This module contains all constant values used throughout the application:
- Arena dimensions and layout padding
- Gait speeds, colors and arrow sizing
- Horse dimensions
- History, zoom and playback limits
- Interaction thresholds and handle geometry
"""

import math

# ======================================================================
# ARENA
# ======================================================================
# Arena coordinates are meters measured from the arena center.
# +x runs along the long side, +y runs down the canvas.

ARENA_LENGTH = 80.0  # meters
ARENA_WIDTH = 40.0   # meters
ARENA_ASPECT_RATIO = ARENA_LENGTH / ARENA_WIDTH

# Vertical grid lines split the length into quarters
ARENA_LENGTH_DIVISIONS = 4

# Layout padding around the arena inside its container (pixels)
ARENA_PADDING = 20
MANEUVER_LABEL_SPACE = 40
ARENA_BOTTOM_PADDING = ARENA_PADDING + MANEUVER_LABEL_SPACE

# ======================================================================
# GAITS
# ======================================================================
# Order matters: walk < trot < canter

GAIT_SPEEDS = {
    'walk': 1.0,    # m/s
    'trot': 2.0,
    'canter': 3.0,
}

GAIT_COLORS = {
    'walk': '#10B981',
    'trot': '#F59E0B',
    'canter': '#EF4444',
}

# Direction arrow length as a multiple of horse length
GAIT_ARROW_MULTIPLIERS = {
    'walk': 1.0,
    'trot': 1.5,
    'canter': 2.0,
}

# Arrow length (in horse lengths) below which the gait is walk / trot
ARROW_WALK_THRESHOLD = 1.25
ARROW_TROT_THRESHOLD = 1.75

# ======================================================================
# HORSES
# ======================================================================

HORSE_LENGTH_METERS = 2.7
HORSE_WIDTH_RATIO = 0.4  # width as a fraction of length
HORSE_HIT_RADIUS = 12  # pixels

# ======================================================================
# FRAMES
# ======================================================================

DEFAULT_FRAME_DURATION = 5.0  # seconds
MIN_FRAME_DURATION = 0.5
MAX_FRAME_DURATION = 120.0

# ======================================================================
# HISTORY
# ======================================================================

MAX_HISTORY_ENTRIES = 100

# ======================================================================
# VIEW
# ======================================================================

MIN_ZOOM = 0.5
MAX_ZOOM = 3.0
DEFAULT_ZOOM = 1.0

# ======================================================================
# INTERACTION
# ======================================================================

# Pointer travel (pixels) before a press becomes a drag instead of a click
DRAG_DISTANCE_THRESHOLD = 3

# Group transform handles (pixels)
BOUNDING_CIRCLE_PADDING = 20
HANDLE_OFFSET = 15
HANDLE_RADIUS = 8
ARROW_HANDLE_RADIUS = 8

ANGLE_SNAP_INCREMENT = math.pi / 4

# Circle distribution rotation sweep
CIRCLE_DISTRIBUTION_STEP = math.radians(5)

# ======================================================================
# PLAYBACK
# ======================================================================

PLAYBACK_SPEEDS = [0.5, 1.0, 1.5, 2.0]
DEFAULT_PLAYBACK_SPEED = 1.0
PLAYBACK_TICK_MS = 16

# ======================================================================
# FILES
# ======================================================================

DRILL_FILE_VERSION = '1.0.0'
DRILL_FILE_FORMAT = 'drill-json'
DRILL_FILE_EXTENSION = '.drill.json'
MAX_RECENT_FILES = 10
