"""Typed exceptions raised by the reconstruction algorithms.

Per-candidate rejections (insufficient overlap, span, proximity or
coverage) are ordinary negative outcomes and never raise.
"""


class ReconstructionError(Exception):
    """Base exception for all reconstruction errors."""


class ClusterNotFoundError(ReconstructionError, LookupError):
    """Raised when a mandatory cluster list is missing or has no available
    cluster. Stops the processing of the current event, but is not fatal."""

    def __init__(self, list_name):
        """Initialize with the name of the offending list.

        Parameters
        ----------
        list_name : str
            Name of the cluster list
        """
        self.list_name = list_name
        super().__init__(f"No available cluster in list `{list_name}`.")


class InvariantViolationError(ReconstructionError, RuntimeError):
    """Raised when the hit ownership invariant is violated (a hit owned by
    no cluster or by more than one cluster). Non-recoverable."""


class FitError(ReconstructionError, ValueError):
    """Raised when a trajectory cannot be fitted to a cluster."""
