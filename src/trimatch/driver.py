"""trimatch driver class.

Takes care of everything in one centralized place:
- Data loading
- Reconstruction algorithms
- Writing output to file
"""

import subprocess as sc
import time

import yaml

from .geo import geo_factory
from .io import reader_factory, writer_factory
from .reco import RecoManager
from .utils.logger import logger
from .version import __version__

__all__ = ["Driver"]


class Driver:
    """Central trimatch driver.

    Processes global configuration and runs the appropriate modules:
      1. Load one event
      2. Run the reconstruction algorithms on it
      3. Write the event to file

    It takes a configuration dictionary of the form:

    .. code-block:: yaml

        base:
          <Base driver configuration>
        geo:
          <Detector geometry>
        io:
          <Input/output configuration>
        reco:
          <Reconstruction algorithms>
    """

    def __init__(self, cfg):
        """Initializes the class attributes.

        Parameters
        ----------
        cfg : dict
            Global configuration dictionary
        """
        # Process the full configuration dictionary and store it
        base, geo, io, reco = self.process_config(**cfg)

        # Initialize the base driver configuration parameters
        self.iterations = base.get("iterations", None)
        self.log_step = base.get("log_step", 1)

        # Initialize the detector geometry, shared by all algorithms
        self.geo = None
        if geo is not None:
            self.geo = geo_factory(geo)

        # Initialize the input/output
        self.initialize_io(**io)

        # Initialize the reconstruction algorithms
        self.reco = None
        if reco is not None:
            self.reco = RecoManager(reco, geometry=self.geo)

    def process_config(self, io, base=None, geo=None, reco=None):
        """Reads the configuration and dumps it to the logger.

        Parameters
        ----------
        io : dict
            I/O configuration dictionary
        base : dict, optional
            Base driver configuration dictionary
        geo : dict, optional
            Detector geometry configuration dictionary
        reco : dict, optional
            Reconstruction algorithm configuration dictionary

        Returns
        -------
        dict
            Processed configuration
        """
        # If there is no base configuration, make it empty (will use defaults)
        if base is None:
            base = {}

        # Set the verbosity of the logger
        verbosity = base.get("verbosity", "info")
        logger.setLevel(verbosity.upper())

        # Rebuild global configuration dictionary
        self.cfg = {"base": base, "io": io}
        if geo is not None:
            self.cfg["geo"] = geo
        if reco is not None:
            self.cfg["reco"] = reco

        # Log environment information
        logger.info("Release version: %s\n", __version__)

        system_info = sc.getstatusoutput("uname -a")[1]
        logger.info("Configuration processed at: %s\n", system_info)

        # Log configuration
        logger.info(yaml.dump(self.cfg, default_flow_style=None, sort_keys=False))

        return base, geo, io, reco

    def initialize_io(self, reader, writer=None):
        """Initializes the input/output scripts.

        Parameters
        ----------
        reader : dict
            Reader configuration dictionary
        writer : dict, optional
            Writer configuration dictionary
        """
        self.reader = reader_factory(reader)

        self.writer = None
        if writer is not None:
            self.writer = writer_factory(writer)

    def __len__(self):
        """Returns the number of events to process.

        Returns
        -------
        int
            Number of events
        """
        if self.iterations is None or self.iterations < 0:
            return len(self.reader)

        return min(self.iterations, len(self.reader))

    def run(self):
        """Loop over the requested number of events, process them."""
        num_events = len(self)
        start = time.time()
        for entry in range(num_events):
            data = self.process(entry)
            if self.log_step and (entry % self.log_step == 0):
                self.log(data, entry, num_events)

        logger.info(
            "Processed %d event(s) in %.2f s.", num_events, time.time() - start
        )

    def process(self, entry):
        """Process one event.

        Parameters
        ----------
        entry : int
            Entry number in the list of events to process

        Returns
        -------
        dict
            Data products of the event
        """
        data = self.reader[entry]

        if self.reco is not None:
            self.reco(data)

        if self.writer is not None:
            self.writer(data)

        return data

    @staticmethod
    def log(data, entry, num_events):
        """Log the outcome of one event.

        Parameters
        ----------
        data : dict
            Data products of the event
        entry : int
            Entry number in the list of events to process
        num_events : int
            Total number of events to process
        """
        msg = f"Event {entry + 1}/{num_events}"
        if "match_status" in data:
            msg += f" | status: {data['match_status']}"
        for label, result in data.get("match_summary", {}).items():
            msg += (
                f" | {label}: +{len(result['created'])}"
                f" -{len(result['deleted'])} ~{len(result['modified'])}"
            )

        logger.info(msg)
