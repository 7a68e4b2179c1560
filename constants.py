# =========================================================
# Config defaults (applied once, in beam_config.py)
# =========================================================
DEFAULT_COVER_DEPTH = 40.0
DEFAULT_GAP_FACTOR = 2.0  # gap = factor * main rebar diameter
DEFAULT_WEB_DIAMETER = 10.0
DEFAULT_TEXT_HEIGHT = 100.0

DEFAULT_LAYER_CONCRETE = "RC大梁"
DEFAULT_LAYER_REBAR = "RC鉄筋"
DEFAULT_LAYER_TEXT = "注釈"

# =========================================================
# Drafting constants
# =========================================================
SIDE_REBAR_MARGIN = 10.0   # web bar offset from the cover line, and its mark size
CROSS_EXTRA = 1.0          # rebar cross-mark sticks out of the circle by this much
TEXT_BASE_Y = -1000.0      # first annotation line, below the section

FILL_ALTERNATE = "alternate"
FILL_SEQUENTIAL = "sequential"
FILL_ORDERS = (FILL_ALTERNATE, FILL_SEQUENTIAL)

# =========================================================
# DXF layer colours (AutoCAD Color Index)
# =========================================================
COLOR_CONCRETE = 2  # yellow
COLOR_REBAR = 4     # cyan
COLOR_TEXT = 7      # white
COLOR_DEFAULT = 7
