"""Temporal graph store.

Holds the current snapshot of vertices and edges, each with a half-open
validity interval. Backed by a NetworkX DiGraph: node ``v`` carries its
TemporalVertex under the ``vertex`` attribute and edge ``(u, v)`` carries
its TemporalEdge under the ``edge`` attribute.

Deletion never removes anything. Removing a vertex or an edge closes its
interval, so vertex ids stay valid for the whole run and reachability
through a closed entry is decided by interval checks at traversal time.
"""
import json
from types import MappingProxyType
from typing import Iterator, Mapping, Optional

import networkx as nx

from tempograph.constants import OPEN_ENDED
from tempograph.core.receipt import StopRule

from .entities import TemporalEdge, TemporalVertex


class GraphError(StopRule):
    """Base class for store operations that cannot be applied."""
    pass


class DuplicateVertex(GraphError):
    def __init__(self, vertex_id: int):
        super().__init__(f"Vertex {vertex_id} already exists")
        self.vertex_id = vertex_id


class UnknownVertex(GraphError):
    def __init__(self, vertex_id: int):
        super().__init__(f"Vertex {vertex_id} not present")
        self.vertex_id = vertex_id


class UnknownEdge(GraphError):
    def __init__(self, source: int, destination: int):
        super().__init__(f"Edge {source}->{destination} not present")
        self.source = source
        self.destination = destination


class IntervalError(GraphError):
    """Closing an interval before it starts."""

    def __init__(self, what: str, start: int, time: int):
        super().__init__(f"Cannot close {what} at {time}: interval starts at {start}")
        self.start = start
        self.time = time


class TemporalGraph:
    """Vertices and per-source adjacency with validity intervals.

    Args:
        allow_overwrite: Re-adding an existing vertex replaces it and
            resets its out-edges instead of raising DuplicateVertex.
    """

    def __init__(self, allow_overwrite: bool = False):
        self.allow_overwrite = allow_overwrite
        self._graph = nx.DiGraph()
        self._vertex_index: dict[int, TemporalVertex] = {}

    # ------------------------------------------------------------------
    # Mutation primitives
    # ------------------------------------------------------------------

    def add_vertex(self, vertex_id: int, start: int, end: int = OPEN_ENDED) -> TemporalVertex:
        """Insert a vertex with an empty adjacency."""
        if vertex_id in self._vertex_index:
            if not self.allow_overwrite:
                raise DuplicateVertex(vertex_id)
            self._graph.remove_edges_from(list(self._graph.out_edges(vertex_id)))

        vertex = TemporalVertex(vertex_id, start, end)
        self._graph.add_node(vertex_id, vertex=vertex)
        self._vertex_index[vertex_id] = vertex
        return vertex

    def add_edge(self, source: int, destination: int, start: int, end: int = OPEN_ENDED) -> TemporalEdge:
        """Insert or overwrite the edge source -> destination."""
        if source not in self._vertex_index:
            raise UnknownVertex(source)
        if destination not in self._vertex_index:
            raise UnknownVertex(destination)

        edge = TemporalEdge(source, destination, start, end)
        self._graph.add_edge(source, destination, edge=edge)
        return edge

    def remove_vertex(self, vertex_id: int, time: int) -> TemporalVertex:
        """Close a vertex's interval at ``time``. Adjacency is left in place."""
        vertex = self._vertex_index.get(vertex_id)
        if vertex is None:
            raise UnknownVertex(vertex_id)
        if time < vertex.start:
            raise IntervalError(f"vertex {vertex_id}", vertex.start, time)

        vertex.end = time
        return vertex

    def remove_edge(self, source: int, destination: int, time: int) -> TemporalEdge:
        """Close an edge's interval at ``time``."""
        if source not in self._vertex_index:
            raise UnknownVertex(source)
        if destination not in self._vertex_index:
            raise UnknownVertex(destination)

        edge = self.get_edge(source, destination)
        if edge is None:
            raise UnknownEdge(source, destination)
        if time < edge.start:
            raise IntervalError(f"edge {source}->{destination}", edge.start, time)

        edge.end = time
        return edge

    # ------------------------------------------------------------------
    # Read views
    # ------------------------------------------------------------------

    @property
    def vertices(self) -> Mapping[int, TemporalVertex]:
        """Read-only view of vertex id -> vertex, in insertion order."""
        return MappingProxyType(self._vertex_index)

    def adjacency(self) -> Mapping[int, Mapping[int, TemporalEdge]]:
        """Read-only mapping of vertex id -> (destination id -> edge)."""
        return MappingProxyType({
            u: MappingProxyType({v: data["edge"] for v, data in nbrs.items()})
            for u, nbrs in self._graph.adjacency()
        })

    def out_edges(self, vertex_id: int) -> Iterator[TemporalEdge]:
        """Outgoing edges of a vertex, closed ones included."""
        if vertex_id not in self._vertex_index:
            raise UnknownVertex(vertex_id)
        for data in self._graph.adj[vertex_id].values():
            yield data["edge"]

    def get_vertex(self, vertex_id: int) -> Optional[TemporalVertex]:
        return self._vertex_index.get(vertex_id)

    def get_edge(self, source: int, destination: int) -> Optional[TemporalEdge]:
        data = self._graph.get_edge_data(source, destination)
        return data["edge"] if data else None

    def has_vertex(self, vertex_id: int) -> bool:
        return vertex_id in self._vertex_index

    def vertex_count(self) -> int:
        """Total vertices, closed ones included."""
        return len(self._vertex_index)

    def edge_count(self) -> int:
        """Total edges, closed ones included."""
        return self._graph.number_of_edges()

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def dump(self) -> str:
        """Tab-separated snapshot: ``id start end [dst start end]...`` per vertex."""
        lines = []
        for vertex_id, vertex in self._vertex_index.items():
            fields = [vertex_id, vertex.start, vertex.end]
            for edge in self.out_edges(vertex_id):
                fields.extend([edge.destination, edge.start, edge.end])
            lines.append("\t".join(str(f) for f in fields))
        return "".join(line + "\n" for line in lines)

    def to_dict(self) -> dict:
        """Export graph to dictionary format."""
        return {
            "vertices": [
                {"id": v.vertex_id, "start": v.start, "end": v.end}
                for v in self._vertex_index.values()
            ],
            "edges": [
                {
                    "source": u,
                    "target": v,
                    "start": data["edge"].start,
                    "end": data["edge"].end,
                }
                for u, v, data in self._graph.edges(data=True)
            ],
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)

    def __str__(self) -> str:
        return self.dump()
