"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

# Grid layout used when roles are seeded from the catalog.
GRID_COLUMNS = 4
GRID_COLUMN_WIDTH = 250
GRID_ROW_HEIGHT = 150
GRID_ORIGIN_X = 100
GRID_ORIGIN_Y = 100

ROLE_ID_PREFIX = "role"
EDGE_ID_PREFIX = "edge"

DEFAULT_WORKFLOW_ID = "default"
DEFAULT_ADMIN_POLICY = "admin.panel"
DEFAULT_REQUEST_TIMEOUT = 30

CYCLE_REJECTED_REASON = "would create a cycle"
