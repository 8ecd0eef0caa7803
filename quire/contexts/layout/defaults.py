"""
Default values for the layout solver.

Lengths are CSS pixels at 96 DPI. An A4 page is 1122.52 px tall; with 40 px
top and bottom margins the printable height is 1042.5 px. These mirror the
packaged configs/layout.yaml so the pure functions have usable defaults when
called without settings.
"""

PAGE_HEIGHT = 1042.5

# Headings may not start in the last STRICT_DANGER_ZONE px of a page
STRICT_DANGER_ZONE = 100.0
RELAXED_DANGER_ZONE = 60.0

# Bullet allocation
MIN_BULLETS = 3
FIRST_JOB_SEED = 6
OTHER_JOB_SEED = 4

LAST_PAGE_FILL_WARNING = 0.15

# Gaps at or below this are measurement noise
MIN_GAP_PX = 1.0
