"""Constants shared across the project."""

# Number of projection views
NUM_VIEWS = 3

# View enumerators
U_VIEW = 0
V_VIEW = 1
W_VIEW = 2

# View labels, in enumeration order
VIEW_LABELS = ("u", "v", "w")

# Columns of a 2D hit position: drift coordinate and wire coordinate
X_COL = 0
WIRE_COL = 1

# Default wire angles of the U, V and W planes w.r.t. the vertical (rad)
WIRE_ANGLES = (1.0471976, -1.0471976, 0.0)

# Default cluster list names, one per view
CLUSTER_LIST_NAMES = {"u": "clusters_u", "v": "clusters_v", "w": "clusters_w"}

# Invalid index placeholder
INVAL_ID = -1
