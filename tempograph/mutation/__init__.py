"""Mutation batches: record parsing, shard reading, type-ordered application."""
from .apply import ApplyResult, MutationError, apply_batch, order_batch
from .reader import ShardReadError, list_shards, read_batch
from .records import (
    MalformedMutation,
    MutationRecord,
    MutationType,
    UnknownMutationType,
    parse_line,
)

__all__ = [
    "MutationType",
    "MutationRecord",
    "parse_line",
    "MalformedMutation",
    "UnknownMutationType",
    "apply_batch",
    "order_batch",
    "ApplyResult",
    "MutationError",
    "read_batch",
    "list_shards",
    "ShardReadError",
]
