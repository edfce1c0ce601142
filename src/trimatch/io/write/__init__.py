"""Data writers."""

from .csv import CSVWriter
from .hdf5 import HDF5Writer
