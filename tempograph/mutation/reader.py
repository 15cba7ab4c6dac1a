"""Mutation shard discovery and reading.

Input layout:

    <input_dir>/time=<N>/<worker>/.../part-00000.txt

Every file named SHARD_FILENAME under a time step's directory belongs to
that step's batch. Worker directories are visited in sorted order, but
the applier sorts the whole batch by type anyway, so shard order does not
change the result. Shards may be read concurrently; records are always
collected completely before anything is applied.
"""
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Optional

from tempograph.config import features
from tempograph.constants import SHARD_FILENAME, SHARD_READ_WORKERS, TIME_DIR_PREFIX
from tempograph.core.receipt import StopRule, emit_receipt

from .records import MutationRecord, parse_line


class ShardReadError(StopRule):
    def __init__(self, path: Path, error: Exception):
        super().__init__(f"Error reading file: {path} {error}")
        self.path = path
        self.error = error


def batch_dir(input_dir: str | Path, time_step: int) -> Path:
    return Path(input_dir) / f"{TIME_DIR_PREFIX}{time_step}"


def list_shards(input_dir: str | Path, time_step: int) -> list[Path]:
    """All shard files of one time step. Empty if the step has no directory."""
    root = batch_dir(input_dir, time_step)
    if not root.is_dir():
        return []

    shards = []
    for entry in sorted(root.iterdir()):
        if entry.is_file():
            if entry.name == SHARD_FILENAME:
                shards.append(entry)
        elif entry.is_dir():
            shards.extend(p for p in sorted(entry.rglob(SHARD_FILENAME)) if p.is_file())
    return shards


def read_shard(path: Path, strict: bool, tenant_id: str = "default") -> list[MutationRecord]:
    """Parse every line of one shard.

    An unreadable shard is dropped with an anomaly receipt, or raises
    ShardReadError when ``strict``. Malformed lines always raise.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        emit_receipt("anomaly", {
            "metric": "shard_read",
            "classification": "violation" if strict else "degradation",
            "action": "halt" if strict else "drop",
            "path": str(path),
            "error": str(e),
        }, tenant_id)
        if strict:
            raise ShardReadError(path, e) from e
        return []

    records = []
    for lineno, line in enumerate(text.splitlines(), start=1):
        record = parse_line(line, origin=f"{path}:{lineno}")
        if record is not None:
            records.append(record)
    return records


def read_batch(
    input_dir: str | Path,
    time_step: int,
    strict: Optional[bool] = None,
    workers: Optional[int] = None,
    tenant_id: str = "default",
) -> list[MutationRecord]:
    """Collect every record of one time step.

    Args:
        input_dir: Root holding the ``time=<N>`` directories
        time_step: Step to read
        strict: Fail on unreadable shards (default: feature flag)
        workers: Shards read concurrently (default: SHARD_READ_WORKERS)
        tenant_id: Tenant identifier

    Returns:
        Records in shard order, then line order
    """
    if strict is None:
        strict = features.FEATURE_STRICT_SHARD_READ_ENABLED
    if workers is None:
        workers = SHARD_READ_WORKERS

    shards = list_shards(input_dir, time_step)

    if workers > 1 and len(shards) > 1:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            per_shard = list(pool.map(lambda p: read_shard(p, strict, tenant_id), shards))
    else:
        per_shard = [read_shard(p, strict, tenant_id) for p in shards]

    return [record for records in per_shard for record in records]
