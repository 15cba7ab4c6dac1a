"""
tempograph - earliest arrival times over an evolving temporal graph.

A temporal graph whose vertices and edges live in half-open validity
intervals is mutated one time-step batch at a time; after each batch the
earliest time every vertex can be reached from a source is recomputed.
"""

__version__ = "0.1.0"

from tempograph.core.receipt import StopRule, dual_hash, emit_receipt
from tempograph.graph import TemporalEdge, TemporalGraph, TemporalVertex
from tempograph.mutation import MutationRecord, MutationType, apply_batch, parse_line
from tempograph.algorithms import ArrivalResult, earliest_arrival

__all__ = [
    "dual_hash",
    "emit_receipt",
    "StopRule",
    "TemporalGraph",
    "TemporalVertex",
    "TemporalEdge",
    "MutationType",
    "MutationRecord",
    "parse_line",
    "apply_batch",
    "ArrivalResult",
    "earliest_arrival",
    "__version__",
]
