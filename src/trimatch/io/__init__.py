"""Readers and writers of clustered hit data.

**Readers** (`io.reader`):
- `hdf5`: Hits, charges and cluster labels stored per event in HDF5 files

**Writers** (`io.writer`):
- `hdf5`: Re-partitioned events, in the same layout as the reader input
- `csv`: One row per event with the matching status and summary
"""

from .factories import reader_factory, writer_factory
from .read import HDF5Reader
from .write import CSVWriter, HDF5Writer
