"""Simple module which define logging module style and returns it."""

import logging
import sys
import warnings

# Configure the formatting of the logger
logging.basicConfig(format="%(message)s", stream=sys.stdout)
# logging.basicConfig(format='[%(levelname)s][%(name)s] %(message)s')

# Capture warning messages and redirect them through the logger
logging.captureWarnings(True)

# Initialize logger
logger = logging.getLogger("trimatch")

# Only issue each distinct warning once
warnings.simplefilter("once")

# Numba emits a cache warning when the package is installed read-only
warnings.filterwarnings("ignore", message=".*cannot cache function.*")
