"""Base class of all reconstruction algorithms."""

__all__ = ["RecoBase"]


class RecoBase:
    """Parent class of all reconstruction algorithms.

    A reconstruction algorithm takes the data products of one event,
    modifies the event cluster store in place and returns a dictionary of
    new data products (or nothing).

    Attributes
    ----------
    name : str
        Name of the algorithm, as specified in the configuration
    aliases : Tuple[str]
        Alternative names of the algorithm
    need_geometry : bool
        Whether the algorithm must be provided with the detector geometry
    keys : Dict[str, bool]
        Data products needed by the algorithm, and whether they are required
    """

    name = ""
    aliases = ()
    need_geometry = False

    def __init__(self):
        """Initialize the list of required data products."""
        self.keys = {"store": True}

    def __call__(self, data):
        """Check that the required data products exist, run the algorithm.

        Parameters
        ----------
        data : dict
            Dictionary of data products

        Returns
        -------
        dict
            Update to the dictionary of data products
        """
        for key, required in self.keys.items():
            if required and key not in data:
                raise KeyError(
                    f"Algorithm `{self.name}` requires the `{key}` data product."
                )

        return self.process(data)

    def process(self, data):
        """Placeholder to be defined by the daughter class."""
        raise NotImplementedError
