"""Traversal algorithms over the temporal graph."""
from .earliest_arrival import ArrivalResult, earliest_arrival, traversal_time

__all__ = ["ArrivalResult", "earliest_arrival", "traversal_time"]
