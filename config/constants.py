"""
Centralized constants for Doc Composer.
All layout magic numbers live here.
"""

# ===========================================
# UNITS
# ===========================================
POINTS_PER_INCH = 72.0                # layout engine works in points
FLOAT_TOLERANCE = 1e-6                # fit comparisons

# ===========================================
# PAGE GEOMETRY (inches, portrait)
# ===========================================
PAGE_SIZES = {
    "Letter": (8.5, 11.0),
    "A4": (8.27, 11.69),
    "Legal": (8.5, 14.0),
    "Tabloid": (11.0, 17.0),
}
HEADER_RESERVATION_IN = 0.5           # reserved when hasHeader
FOOTER_RESERVATION_IN = 0.5           # reserved when hasFooter
MIN_COLUMNS = 1
MAX_COLUMNS = 3

# ===========================================
# DEFAULT PAGE MASTER
# ===========================================
DEFAULT_PAGE_SIZE = "Letter"
DEFAULT_MARGIN_IN = 1.0
DEFAULT_COLUMN_GAP_IN = 0.25
DEFAULT_GRID_SPACING_PT = 12.0        # 6 lines per inch

# ===========================================
# MEASUREMENT
# ===========================================
DEFAULT_LINE_HEIGHT_PT = 14.0
CHARS_PER_LINE = 80                   # at a 6.5in column
REFERENCE_COLUMN_WIDTH_PT = 468.0     # 6.5in, the column CHARS_PER_LINE refers to
FIGURE_HEIGHT_PT = 216.0              # 3in placeholder for images
CHART_HEIGHT_PT = 252.0
TABLE_COLUMN_WIDTH_PT = 72.0          # natural width per table column
MIN_FRAGMENT_HEIGHT_PT = 24.0         # two lines, for split blocks

# ===========================================
# TABLE OF CONTENTS
# ===========================================
HEADING_LEVELS = 6
TOC_TEXT_WIDTH = 80                   # characters per rendered line
TOC_LINES_PER_PAGE = 40
TOC_CONTINUED_SUFFIX = "(continued)"

# ===========================================
# CONTRACTS
# ===========================================
CONTRACT_VERSION = "1.0"
CHECKSUM_LENGTH = 16

# ===========================================
# LOGGING
# ===========================================
LOG_LEVEL = 'INFO'
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_MAX_SIZE_MB = 10
LOG_BACKUP_COUNT = 5
