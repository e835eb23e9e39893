"""Pure analysis package for the OpenChemFacts dashboard.

This package decodes EC10eq datasets, validates CAS numbers and computes log
axis ticks. It operates on in-memory inputs only and must not import Django or
perform any I/O.
"""

from .ec10eq_dataset import Ec10eqDataset, Observation, parse_dataset

__all__ = ["Ec10eqDataset", "Observation", "parse_dataset"]
