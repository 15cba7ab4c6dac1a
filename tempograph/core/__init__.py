"""Core subpackage for tempograph receipt primitives."""
from .receipt import dual_hash, emit_receipt, StopRule

__all__ = [
    "dual_hash",
    "emit_receipt",
    "StopRule",
]
