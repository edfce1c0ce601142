"""Module with a data class object which represents a 2D hit."""

from dataclasses import dataclass

import numpy as np

from trimatch.utils.globals import INVAL_ID, WIRE_COL, X_COL

from .base import DataBase

__all__ = ["Hit"]


@dataclass(eq=False)
class Hit(DataBase):
    """Position and charge sample recorded in one projection view.

    Attributes
    ----------
    id : int
        Index of the hit in the event arena
    view : int
        Projection view the hit was recorded in (0, 1 or 2 for U, V or W)
    position : np.ndarray
        (2) Position of the hit as (drift coordinate, wire coordinate)
    charge : float
        Charge deposited in the hit
    """

    id: int = INVAL_ID
    view: int = INVAL_ID
    position: np.ndarray = None
    charge: float = 0.0

    # Fixed-length attributes
    _fixed_length_attrs = (("position", 2),)

    @property
    def x(self):
        """Drift coordinate of the hit.

        Returns
        -------
        float
            Position along the drift direction
        """
        return self.position[X_COL]

    @property
    def wire(self):
        """Coordinate of the hit along the view wire-number axis.

        Returns
        -------
        float
            Position along the wire-number direction
        """
        return self.position[WIRE_COL]
