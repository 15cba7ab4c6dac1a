"""Temporal vertex and edge records.

Both carry a half-open validity interval [start, end). Only ``end`` ever
changes after creation: deletion closes the interval instead of removing
the record.
"""
from dataclasses import dataclass

from tempograph.constants import OPEN_ENDED


class TemporalProperty:
    """Interval helpers shared by vertices and edges."""

    start: int
    end: int

    def is_open_at(self, t: int) -> bool:
        """True if ``t`` falls inside [start, end)."""
        return self.start <= t < self.end

    @property
    def is_closed(self) -> bool:
        return self.end != OPEN_ENDED


@dataclass
class TemporalVertex(TemporalProperty):
    """A vertex in the temporal graph."""
    vertex_id: int
    start: int
    end: int = OPEN_ENDED


@dataclass
class TemporalEdge(TemporalProperty):
    """A directed edge, stored in its source vertex's adjacency."""
    source: int
    destination: int
    start: int
    end: int = OPEN_ENDED
