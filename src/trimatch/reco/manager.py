"""Manages the operation of reconstruction algorithms."""

from collections import OrderedDict
from copy import deepcopy

import numpy as np

from trimatch.utils.logger import logger

from .factories import reco_algorithm_factory

__all__ = ["RecoManager"]


class RecoManager:
    """Manager in charge of handling reconstruction algorithms.

    It loads all the algorithm objects once and feeds them events.
    """

    def __init__(self, cfg, geometry=None):
        """Initialize the reconstruction manager.

        Parameters
        ----------
        cfg : dict
            Reconstruction algorithm configurations
        geometry : object, optional
            Detector geometry, shared by all the algorithms which need one
        """
        # Loop over the algorithms and get their priorities
        cfg = deepcopy(cfg)
        keys = np.array(list(cfg.keys()))
        priorities = -np.ones(len(keys), dtype=np.int32)
        for i, key in enumerate(keys):
            if cfg[key] is not None and "priority" in cfg[key]:
                priorities[i] = cfg[key].pop("priority")

        # Add the algorithms in decreasing order of priority
        self.modules = OrderedDict()
        for key in keys[np.argsort(-priorities, kind="stable")]:
            self.modules[key] = reco_algorithm_factory(key, cfg[key], geometry)

    def __call__(self, data):
        """Pass one event through the reconstruction algorithms.

        Parameters
        ----------
        data : dict
            Dictionary of data products, updated in place
        """
        for key, module in self.modules.items():
            logger.debug("Running reconstruction algorithm `%s`.", key)
            result = module(data)
            if result is not None:
                data.update(result)
