"""Temporal graph store.

Vertices and edges with half-open validity intervals. Deletion closes an
interval; nothing is ever physically removed during a run.
"""
from .entities import TemporalEdge, TemporalProperty, TemporalVertex
from .store import (
    DuplicateVertex,
    GraphError,
    IntervalError,
    TemporalGraph,
    UnknownEdge,
    UnknownVertex,
)

__all__ = [
    "TemporalGraph",
    "TemporalVertex",
    "TemporalEdge",
    "TemporalProperty",
    "GraphError",
    "DuplicateVertex",
    "UnknownVertex",
    "UnknownEdge",
    "IntervalError",
]
