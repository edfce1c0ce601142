"""Utility functions and tools used across the trimatch package.

**Core Utilities:**
- `factory`: Generic factory pattern implementations
- `logger`: Logging configuration
- `globals`: Global constants
- `enums`: View and sampling status enumerations
- `errors`: Reconstruction exceptions

**Track Matching:**
- `fit`: Sliding linear fits of 2D clusters, and their cache
- `match`: Cross-view projection, hit association and consistency checks
- `cluster`: Re-partitioning of the clusters of one view
"""
