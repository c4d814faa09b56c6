# constants.py
"""
Application-level constants.

These values are static and do not change between runs. They describe the
circuit layout (the rail rectangle and the battery/switch/bulb regions),
the default engine timings, and rendering properties. Anything that is part
of the experimental setup lives in config.json and merely defaults to the
values below.
"""

# --- Loop geometry (screen units, y grows downward) ---
RAIL_LEFT = 50.0
RAIL_RIGHT = 685.0
RAIL_TOP = 50.0
RAIL_BOTTOM = 435.0
# Segment lengths in traversal order. Top is split at its center because
# the loop starts at top-center.
SEGMENT_TOP = RAIL_RIGHT - RAIL_LEFT        # 635
SEGMENT_RIGHT = RAIL_BOTTOM - RAIL_TOP      # 385
SEGMENT_BOTTOM = SEGMENT_TOP                # 635
SEGMENT_LEFT = SEGMENT_RIGHT                # 385
TRACK_LENGTH = SEGMENT_TOP + SEGMENT_RIGHT + SEGMENT_BOTTOM + SEGMENT_LEFT  # 2040

# Numeric side codes, shared by the numba kernels and the string tags.
SIDE_TOP = 0
SIDE_RIGHT = 1
SIDE_BOTTOM = 2
SIDE_LEFT = 3
SIDE_NAMES = ("top", "right", "bottom", "left")

# --- Battery (sits on the top rail) ---
BATTERY_RECT = (250.0, 20.0, 400.0, 130.0)   # x0, y0, x1, y1
# Horizontal window on the top rail where no field markers are drawn.
FIELD_EXCLUSION_X = (250.0, 400.0)
# Region inside the battery where released electrons appear.
SPAWN_REGION = (262.0, 66.0, 312.0, 114.0)
# Negative terminal, where released electrons head to.
SPAWN_TARGET = (250.0, 50.0)
ION_GRID_COLUMNS = 15
ION_GRID_ROWS = 5
ION_GRID_ORIGIN = (322.0, 70.0)
ION_GRID_SPACING = 5.0
ELECTROLYTE_RECT = (258.0, 40.0, 392.0, 125.0)

# --- Switch (top rail, right half) ---
SWITCH_RECT = (500.0, 35.0, 560.0, 65.0)

# --- Bulb (bottom rail, center) ---
BULB_CENTER = (367.5, 435.0)
BULB_RADIUS = 18

# --- Engine defaults (overridable from config.json) ---
DEFAULT_PARTICLE_COUNT = 1000
DEFAULT_SPEED = 20.0                 # units per second
DEFAULT_LATERAL_OFFSET_MAX = 3.0     # half the wire width
PHASE_DELAY_RANGE = (0.0, 2.0)       # seconds
PHASE_DURATION_RANGE = (0.5, 1.5)    # seconds
DEFAULT_VIBRATION_AMPLITUDE = 1.5
DEFAULT_DEPLETION_INTERVAL_MS = 1000
DEFAULT_SPAWN_INTERVAL_MS = 200
DEFAULT_SPAWN_LIFETIME_MS = 1000
DEFAULT_ELECTROLYTE_LEVEL = 75.0
DEFAULT_ION_COUNT = 75
DEFAULT_DEPLETION_STEP = 5
DEFAULT_FIELD_LINE_STEP = 40.0

# --- Visualization settings ---
FULLSCREEN = False
WINDOW_WIDTH = 735
WINDOW_HEIGHT = 600
FPS = 60
BACKGROUND_COLOR = (0, 0, 0)
WIRE_COLOR = (120, 120, 120)
WIRE_WIDTH = 8
ELECTRON_COLOR = (220, 38, 38)       # red
ION_COLOR = (37, 99, 235)            # blue "+"
ELECTROLYTE_COLOR = (37, 99, 235)
ZINC_COLOR = (107, 114, 128)
COPPER_COLOR = (244, 114, 182)
FIELD_COLOR = (147, 51, 234)         # purple
FIELD_MARKER_LENGTH = 10
BULB_OFF_COLOR = (70, 70, 40)
BULB_ON_COLOR = (255, 230, 90)
SWITCH_COLOR = (200, 200, 200)
TEXT_COLOR = (255, 255, 255)
