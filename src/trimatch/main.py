"""Main function that calls the Driver class.

This is the first module called when launching the binary script under the
`bin` directory. It sets up the `Driver` object used to read events, run the
reconstruction algorithms and write their output.
"""

from .driver import Driver


def run(cfg):
    """Process every requested event once.

    Parameters
    ----------
    cfg : dict
        Full driver configuration
    """
    driver = Driver(cfg)
    driver.run()
