"""Earliest arrival time over a temporal graph.

Label-setting (Dijkstra-style) search from a single source. Leaving a
vertex reached at ``a`` over an edge opening at ``start`` reaches the far
end at

    r = max(a, start) + 1

The edge is usable only if start < r < end and r <= horizon. The far
vertex must be open at r, and the near vertex must still be open when the
path leaves it at max(a, start). The source is exempt from its own
interval. Since r > a, labels strictly increase along any path and each
vertex settles with its minimum label once.

Every call recomputes from scratch over the current snapshot. Labels live
in a mapping local to the call; the store is only read.
"""
import heapq
import time
from dataclasses import dataclass, field
from typing import Optional

from tempograph.constants import COMPUTE_MAX_SETTLED, OPEN_ENDED, SOURCE_ARRIVAL
from tempograph.core.receipt import emit_receipt
from tempograph.graph.store import TemporalGraph


@dataclass
class ArrivalResult:
    """Arrival label per vertex for one source and horizon.

    When ``truncated`` is set the search stopped on its settle budget: labels
    of vertices that were never settled are upper bounds, not final arrivals,
    and vertices the search never got to read as unreachable.
    """
    source: int
    horizon: int
    arrivals: dict[int, int] = field(default_factory=dict)
    settled: int = 0
    truncated: bool = False
    elapsed_ms: float = 0.0

    def arrival(self, vertex_id: int) -> int:
        """Arrival time, OPEN_ENDED if unreachable."""
        return self.arrivals.get(vertex_id, OPEN_ENDED)

    def is_reachable(self, vertex_id: int) -> bool:
        return self.arrival(vertex_id) != OPEN_ENDED

    def reachable(self) -> dict[int, int]:
        return {v: a for v, a in self.arrivals.items() if a != OPEN_ENDED}


def traversal_time(arrived_at: int, edge_start: int) -> int:
    """Time the far end of an edge is reached when leaving at ``arrived_at``."""
    return max(arrived_at, edge_start) + 1


def stoprule_missing_source(source: int, horizon: int, tenant_id: str = "default") -> None:
    """Emit anomaly receipt for a source absent from the store. Non-fatal."""
    emit_receipt("anomaly", {
        "metric": "earliest_arrival_source",
        "classification": "degradation",
        "action": "skip",
        "source": source,
        "horizon": horizon,
        "error": "Source vertex not present",
    }, tenant_id)


def stoprule_settle_budget(source: int, horizon: int, budget: int, tenant_id: str = "default") -> None:
    """Emit anomaly receipt when the search stops on its settle budget. Non-fatal."""
    emit_receipt("anomaly", {
        "metric": "earliest_arrival_budget",
        "classification": "degradation",
        "action": "truncate",
        "source": source,
        "horizon": horizon,
        "baseline": budget,
    }, tenant_id)


def earliest_arrival(
    graph: TemporalGraph,
    source: int,
    horizon: int,
    max_settled: Optional[int] = COMPUTE_MAX_SETTLED,
    tenant_id: str = "default",
) -> Optional[ArrivalResult]:
    """Compute the earliest arrival time of every vertex from ``source``.

    Args:
        graph: Current snapshot; must not be mutated during the call
        source: Source vertex id, reachable at time 0 whatever its interval
        horizon: Inclusive upper bound on reaching times
        max_settled: Stop after settling this many vertices (None = unbounded)
        tenant_id: Tenant identifier

    Returns:
        ArrivalResult, or None if the source is not in the store
    """
    t0 = time.perf_counter()

    if not graph.has_vertex(source):
        stoprule_missing_source(source, horizon, tenant_id)
        return None

    vertices = graph.vertices
    labels = dict.fromkeys(vertices, OPEN_ENDED)
    labels[source] = SOURCE_ARRIVAL

    pq = [(SOURCE_ARRIVAL, source)]
    seen: set[int] = set()
    truncated = False

    while pq:
        label, u = heapq.heappop(pq)
        if u in seen:
            continue
        if max_settled is not None and len(seen) >= max_settled:
            truncated = True
            break
        seen.add(u)

        departs_by = OPEN_ENDED if u == source else vertices[u].end

        for edge in graph.out_edges(u):
            if max(label, edge.start) >= departs_by:
                continue
            r = traversal_time(label, edge.start)
            if r > horizon or not edge.start < r < edge.end:
                continue
            v = edge.destination
            if not vertices[v].is_open_at(r):
                continue
            if r < labels[v]:
                labels[v] = r
                heapq.heappush(pq, (r, v))

    if truncated:
        stoprule_settle_budget(source, horizon, max_settled, tenant_id)

    result = ArrivalResult(
        source=source,
        horizon=horizon,
        arrivals=labels,
        settled=len(seen),
        truncated=truncated,
        elapsed_ms=(time.perf_counter() - t0) * 1000,
    )

    emit_receipt("earliest_arrival", {
        "source": source,
        "horizon": horizon,
        "vertices": len(labels),
        "reachable": len(result.reachable()),
        "settled": result.settled,
        "truncated": truncated,
        "elapsed_ms": round(result.elapsed_ms, 3),
    }, tenant_id)

    return result
