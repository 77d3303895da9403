"""trainlog - reconcile and merge personal workout-history exports.

This package provides:
- Exercise-name normalization and cross-vocabulary matching
- Unit-safe conversion of raw effort records into typed sets
- Session grouping, cross-source merging and per-year export
"""

__version__ = "0.3.0"
