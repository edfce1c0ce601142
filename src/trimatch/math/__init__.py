"""Module with fast, Numba-accelerated, compiled math routines.

- `distance.py` includes radius queries on 2D view positions
"""

from . import distance
