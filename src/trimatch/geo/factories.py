"""Construct a detector geometry class from its name."""

from trimatch.utils.factory import instantiate, module_dict

from . import wire

GEO_DICT = module_dict(wire)

__all__ = ["geo_factory"]


def geo_factory(geo_cfg):
    """Instantiates a detector geometry from a configuration dictionary.

    Parameters
    ----------
    geo_cfg : Union[str, dict]
        Geometry configuration (or simply the geometry name)

    Returns
    -------
    object
        Initialized geometry object
    """
    return instantiate(GEO_DICT, geo_cfg)
