"""Construct a reconstruction algorithm class from its name."""

from trimatch.utils.factory import instantiate, module_dict

from . import track_matching

# Build a dictionary of available reconstruction algorithms
RECO_DICT = {}
for module in [track_matching]:
    RECO_DICT.update(**module_dict(module))

__all__ = ["reco_algorithm_factory"]


def reco_algorithm_factory(name, cfg, geometry=None):
    """Instantiates a reconstruction algorithm from a configuration dictionary.

    Parameters
    ----------
    name : str
        Name of the reconstruction algorithm
    cfg : dict
        Reconstruction algorithm configuration
    geometry : object, optional
        Detector geometry, provided to the algorithms which need one

    Returns
    -------
    object
         Initialized reconstruction algorithm
    """
    cfg = dict(cfg or {})
    cfg["name"] = name

    if name in RECO_DICT and RECO_DICT[name].need_geometry and geometry is not None:
        if "geometry" not in cfg:
            return instantiate(RECO_DICT, cfg, geometry=geometry)

    return instantiate(RECO_DICT, cfg)
