"""Loop Module - per-time-step driver.

For each step in [start_step, end_step):
1. APPLY   - read the step's shards and apply them in type order
2. COMPUTE - earliest arrival from the source, horizon = step
3. WRITE   - arrivals CSV on the write cadence
4. EMIT    - time_step receipt with counts and phase timings

Apply always completes before compute starts and nothing mutates the
graph while compute runs. A missing source skips compute and write for
that step only. Fatal errors (StopRule) end the run.
"""
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from tempograph.config import features
from tempograph.constants import COMPUTE_MAX_SETTLED, OUTPUT_DIR, WRITE_EVERY
from tempograph.core.receipt import emit_receipt
from tempograph.algorithms.earliest_arrival import ArrivalResult, earliest_arrival
from tempograph.graph.store import TemporalGraph
from tempograph.mutation.apply import apply_batch
from tempograph.mutation.reader import read_batch
from tempograph.output.writer import should_write, write_arrivals


@dataclass
class StepMetrics:
    """Counts and phase timings of one time step."""
    time_step: int
    vertices: int
    edges: int
    apply_ms: float
    compute_ms: float
    write_ms: float
    computed: bool
    written: Optional[str] = None


@dataclass
class RunSummary:
    """Outcome of a full run."""
    start_step: int
    end_step: int
    source: int
    steps: list[StepMetrics] = field(default_factory=list)
    last_result: Optional[ArrivalResult] = None
    skipped_steps: list[int] = field(default_factory=list)
    written: list[str] = field(default_factory=list)


def _ms(since: float) -> float:
    return round((time.perf_counter() - since) * 1000, 3)


def apply_step(
    graph: TemporalGraph,
    input_dir: str | Path,
    time_step: int,
    strict: Optional[bool] = None,
    workers: Optional[int] = None,
    tenant_id: str = "default",
):
    """APPLY phase for one step."""
    records = read_batch(input_dir, time_step, strict=strict, workers=workers, tenant_id=tenant_id)
    return apply_batch(graph, records, tenant_id=tenant_id)


def build_graph(
    input_dir: str | Path,
    end_step: int,
    start_step: int = 0,
    allow_overwrite: Optional[bool] = None,
    strict: Optional[bool] = None,
    workers: Optional[int] = None,
    tenant_id: str = "default",
) -> TemporalGraph:
    """Apply every step in [start_step, end_step) without computing."""
    if allow_overwrite is None:
        allow_overwrite = features.FEATURE_VERTEX_OVERWRITE_ENABLED
    graph = TemporalGraph(allow_overwrite=allow_overwrite)
    for step in range(start_step, end_step):
        apply_step(graph, input_dir, step, strict=strict, workers=workers, tenant_id=tenant_id)
    return graph


def run(
    input_dir: str | Path,
    start_step: int,
    end_step: int,
    source: int,
    output_dir: str | Path = OUTPUT_DIR,
    write_every: int = WRITE_EVERY,
    graph: Optional[TemporalGraph] = None,
    allow_overwrite: Optional[bool] = None,
    strict: Optional[bool] = None,
    workers: Optional[int] = None,
    max_settled: Optional[int] = COMPUTE_MAX_SETTLED,
    tenant_id: str = "default",
) -> RunSummary:
    """Drive apply/compute/write over [start_step, end_step).

    Args:
        input_dir: Root holding the ``time=<N>`` directories
        start_step: First step, inclusive
        end_step: Last step, exclusive
        source: Source vertex id
        output_dir: Where arrival CSVs go
        write_every: Write cadence (0 disables writing)
        graph: Existing store to continue from (default: new, empty)
        allow_overwrite: Duplicate vertex policy (default: feature flag)
        strict: Fail on unreadable shards (default: feature flag)
        workers: Shards read concurrently per step
        max_settled: Per-step compute budget (None = unbounded)
        tenant_id: Tenant identifier

    Returns:
        RunSummary with per-step metrics and the last computed result

    Raises:
        StopRule: Malformed input or a record the store cannot apply
    """
    if graph is None:
        if allow_overwrite is None:
            allow_overwrite = features.FEATURE_VERTEX_OVERWRITE_ENABLED
        graph = TemporalGraph(allow_overwrite=allow_overwrite)

    emit_receipt("run_start", {
        "input_dir": str(input_dir),
        "start_step": start_step,
        "end_step": end_step,
        "source": source,
    }, tenant_id)

    summary = RunSummary(start_step=start_step, end_step=end_step, source=source)

    for step in range(start_step, end_step):
        # APPLY
        phase_start = time.perf_counter()
        apply_step(graph, input_dir, step, strict=strict, workers=workers, tenant_id=tenant_id)
        apply_ms = _ms(phase_start)

        # COMPUTE
        phase_start = time.perf_counter()
        result = earliest_arrival(graph, source, step, max_settled=max_settled, tenant_id=tenant_id)
        compute_ms = _ms(phase_start)

        # WRITE
        write_ms = 0.0
        written = None
        if result is None:
            summary.skipped_steps.append(step)
        else:
            summary.last_result = result
            if should_write(step, write_every):
                phase_start = time.perf_counter()
                written = str(write_arrivals(result, graph, output_dir, step))
                write_ms = _ms(phase_start)
                summary.written.append(written)

        # EMIT
        metrics = StepMetrics(
            time_step=step,
            vertices=graph.vertex_count(),
            edges=graph.edge_count(),
            apply_ms=apply_ms,
            compute_ms=compute_ms,
            write_ms=write_ms,
            computed=result is not None,
            written=written,
        )
        summary.steps.append(metrics)
        emit_receipt("time_step", {
            "time_step": step,
            "vertices": metrics.vertices,
            "edges": metrics.edges,
            "apply_ms": apply_ms,
            "compute_ms": compute_ms,
            "write_ms": write_ms,
            "computed": metrics.computed,
        }, tenant_id)

    emit_receipt("run_summary", {
        "start_step": start_step,
        "end_step": end_step,
        "source": source,
        "steps": len(summary.steps),
        "skipped_steps": summary.skipped_steps,
        "files_written": len(summary.written),
        "vertices": graph.vertex_count(),
        "edges": graph.edge_count(),
    }, tenant_id)

    return summary
