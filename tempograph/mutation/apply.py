"""Apply one time step's batch of mutations to the temporal graph.

Records are applied in a fixed type order regardless of read order:

    ADD_VERTEX -> ADD_EDGE -> DEL_EDGE -> DEL_VERTEX

so an edge added in the same batch as its endpoints always finds them,
and deletions (which only close intervals) never affect same-batch
additions. Within a type group read order is kept.
"""
import time
from dataclasses import dataclass, field
from typing import Iterable, Optional

from tempograph.constants import OPEN_ENDED
from tempograph.core.receipt import StopRule, emit_receipt
from tempograph.graph.store import GraphError, TemporalGraph, UnknownEdge, UnknownVertex

from .records import (
    MutationRecord,
    MutationType,
    stoprule_malformed_record,
    stoprule_unknown_mutation_type,
)


class MutationError(StopRule):
    """A record referencing state the store does not have."""

    def __init__(
        self,
        mutation_type: MutationType,
        vertex_id,
        time_step: int,
        cause: GraphError,
        origin: Optional[str] = None,
    ):
        message = f"Operation {mutation_type.name}, VID {vertex_id}, time step {time_step}: {cause}"
        if origin:
            message += f" ({origin})"
        super().__init__(message)
        self.mutation_type = mutation_type
        self.vertex_id = vertex_id
        self.time_step = time_step
        self.cause = cause
        self.origin = origin


@dataclass
class ApplyResult:
    """Outcome of one apply_batch call."""
    records: int = 0
    operations: dict[str, int] = field(default_factory=dict)
    vertices: int = 0
    edges: int = 0
    elapsed_ms: float = 0.0


def _offending_id(error: GraphError, operation: tuple[int, ...]):
    if isinstance(error, UnknownVertex):
        return error.vertex_id
    if isinstance(error, UnknownEdge):
        return (error.source, error.destination)
    return operation[0] if len(operation) == 1 else operation


def stoprule_mutation(record: MutationRecord, operation: tuple[int, ...], error: GraphError) -> None:
    """Emit anomaly receipt then raise MutationError."""
    vertex_id = _offending_id(error, operation)
    emit_receipt("anomaly", {
        "metric": "mutation_apply",
        "classification": "violation",
        "action": "halt",
        "mutation_type": record.mutation_type.name,
        "vertex_id": list(vertex_id) if isinstance(vertex_id, tuple) else vertex_id,
        "time_step": record.time_step,
        "origin": record.origin,
        "error": str(error),
    })
    raise MutationError(record.mutation_type, vertex_id, record.time_step, error, record.origin) from error


def _normalize(records: Iterable[MutationRecord]) -> list[MutationRecord]:
    """Coerce type codes, failing the whole batch before anything is applied."""
    normalized = []
    for record in records:
        try:
            mutation_type = MutationType(record.mutation_type)
        except ValueError:
            stoprule_unknown_mutation_type(record.mutation_type, record.origin)
        if len(record.operands) % mutation_type.arity:
            stoprule_malformed_record(
                f"{mutation_type.name} needs operands in pairs, got {len(record.operands)}", record.origin
            )
        if mutation_type is not record.mutation_type:
            record = MutationRecord(record.time_step, mutation_type, tuple(record.operands), record.origin)
        normalized.append(record)
    return normalized


def order_batch(records: Iterable[MutationRecord]) -> list[MutationRecord]:
    """Stable sort into ADD_VERTEX, ADD_EDGE, DEL_EDGE, DEL_VERTEX groups."""
    return sorted(_normalize(records), key=lambda r: int(r.mutation_type))


def _apply_operation(graph: TemporalGraph, record: MutationRecord, operation: tuple[int, ...]) -> None:
    t = record.time_step
    mutation_type = record.mutation_type

    if mutation_type == MutationType.ADD_VERTEX:
        graph.add_vertex(operation[0], t, OPEN_ENDED)
    elif mutation_type == MutationType.ADD_EDGE:
        graph.add_edge(operation[0], operation[1], t, OPEN_ENDED)
    elif mutation_type == MutationType.DEL_EDGE:
        graph.remove_edge(operation[0], operation[1], t)
    else:
        graph.remove_vertex(operation[0], t)


def apply_batch(
    graph: TemporalGraph,
    records: Iterable[MutationRecord],
    tenant_id: str = "default",
) -> ApplyResult:
    """Apply a batch of records to the graph in type order.

    Args:
        graph: Store to mutate
        records: Records of one time step, in any order
        tenant_id: Tenant identifier

    Returns:
        ApplyResult with per-type operation counts and store totals

    Raises:
        UnknownMutationType: A record has a type code outside {0, 1, 2, 3}
        MutationError: A record references a missing vertex or edge
    """
    t0 = time.perf_counter()
    ordered = order_batch(records)
    counts = {mt.name: 0 for mt in MutationType}

    for record in ordered:
        for operation in record.operations():
            try:
                _apply_operation(graph, record, operation)
            except GraphError as e:
                stoprule_mutation(record, operation, e)
            counts[record.mutation_type.name] += 1

    result = ApplyResult(
        records=len(ordered),
        operations=counts,
        vertices=graph.vertex_count(),
        edges=graph.edge_count(),
        elapsed_ms=(time.perf_counter() - t0) * 1000,
    )

    emit_receipt("mutation_apply", {
        "records": result.records,
        "operations": result.operations,
        "vertices": result.vertices,
        "edges": result.edges,
        "elapsed_ms": round(result.elapsed_ms, 3),
    }, tenant_id)

    return result
