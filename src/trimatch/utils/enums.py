"""Module which contains enumerated variables shared across the project."""

from enum import IntEnum

from .globals import *

__all__ = ["ViewEnum", "SampleStatus"]


class ViewEnum(IntEnum):
    """Enumerates the three projection views."""

    U = U_VIEW
    V = V_VIEW
    W = W_VIEW

    @property
    def label(self):
        """Lower-case label of the view (used in list names and configs)."""
        return VIEW_LABELS[self.value]


class SampleStatus(IntEnum):
    """Enumerates the outcomes of a single trajectory sample query."""

    OK = 0
    OUT_OF_RANGE = 1
    UNRESOLVABLE = 2
