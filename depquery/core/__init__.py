"""
Core module: data models and exceptions.

This module provides the foundational types:

Models (models.py):
    - Record: One package fact (import path, name, imports, deps)
    - GraphStats: Package counts of a built graph
    - ROOT_LABEL/PLACEHOLDER: Markers used in reconstructed chains

Exceptions (exceptions.py):
    - DepQueryError: Base exception for all depquery errors
    - DecodeError: The record stream could not be decoded
    - DepsFileNotFoundError: The dependency file doesn't exist

Graph (graph/):
    - DepGraph and the query algorithms over it
"""

from depquery.core.exceptions import (
    DecodeError,
    DepQueryError,
    DepsFileNotFoundError,
)
from depquery.core.models import PLACEHOLDER, ROOT_LABEL, GraphStats, Record

__all__ = [
    # Models
    "Record",
    "GraphStats",
    "ROOT_LABEL",
    "PLACEHOLDER",
    # Exceptions
    "DepQueryError",
    "DecodeError",
    "DepsFileNotFoundError",
]
