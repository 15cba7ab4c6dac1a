"""Periodic arrival-time output.

One CSV per written time step, ``vertices-<N>.csv``, one
``<vertexId>,<arrivalTime>`` line per vertex in store order. Unreachable
vertices are written as OPEN_ENDED.
"""
from pathlib import Path

from tempograph.constants import OPEN_ENDED, OUTPUT_FILE_TEMPLATE, WRITE_EVERY
from tempograph.algorithms.earliest_arrival import ArrivalResult
from tempograph.graph.store import TemporalGraph


def should_write(time_step: int, every: int = WRITE_EVERY) -> bool:
    """Write cadence: every ``every``-th step, never step 0."""
    return every > 0 and time_step != 0 and time_step % every == 0


def format_arrivals(result: ArrivalResult, graph: TemporalGraph) -> str:
    lines = [
        f"{vertex_id},{result.arrivals.get(vertex_id, OPEN_ENDED)}"
        for vertex_id in graph.vertices
    ]
    return "".join(line + "\n" for line in lines)


def write_arrivals(
    result: ArrivalResult,
    graph: TemporalGraph,
    output_dir: str | Path,
    time_step: int,
) -> Path:
    """Write one step's arrivals, overwriting any previous file.

    Returns:
        Path of the written file
    """
    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)
    path = out / OUTPUT_FILE_TEMPLATE.format(step=time_step)
    with open(path, "w") as f:
        f.write(format_arrivals(result, graph))
    return path
