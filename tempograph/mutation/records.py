"""Mutation records and their line format.

One record per line, whitespace separated:

    <timeStep> <mutationType> <operand>...

mutationType is one of {0, 1, 2, 3} = {add vertex, add edge, del edge,
del vertex}. Vertex mutations carry vertex ids, edge mutations carry
(source, destination) pairs. The token ``inf`` in any integer field
stands for OPEN_ENDED.
"""
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional

from tempograph.constants import INF_TOKEN, OPEN_ENDED
from tempograph.core.receipt import StopRule, emit_receipt


class MutationType(IntEnum):
    ADD_VERTEX = 0
    ADD_EDGE = 1
    DEL_EDGE = 2
    DEL_VERTEX = 3

    @property
    def arity(self) -> int:
        """Operands consumed per operation."""
        return 2 if self in (MutationType.ADD_EDGE, MutationType.DEL_EDGE) else 1


class MalformedMutation(StopRule):
    """A record line that cannot be parsed."""

    def __init__(self, message: str, origin: Optional[str] = None):
        super().__init__(f"{message} ({origin})" if origin else message)
        self.origin = origin


class UnknownMutationType(StopRule):
    def __init__(self, mutation_type: int, origin: Optional[str] = None):
        message = f"Invalid mutation type: {mutation_type}"
        super().__init__(f"{message} ({origin})" if origin else message)
        self.mutation_type = mutation_type
        self.origin = origin


@dataclass(frozen=True)
class MutationRecord:
    """One parsed input line."""
    time_step: int
    mutation_type: MutationType
    operands: tuple[int, ...] = ()
    origin: Optional[str] = None  # "path:line" for diagnostics

    def operations(self) -> list[tuple[int, ...]]:
        """Split operands into per-operation groups (ids or id pairs)."""
        n = self.mutation_type.arity
        return [self.operands[i:i + n] for i in range(0, len(self.operands), n)]


def stoprule_malformed_record(message: str, origin: Optional[str] = None) -> None:
    """Emit anomaly receipt then raise MalformedMutation."""
    emit_receipt("anomaly", {
        "metric": "mutation_record",
        "classification": "violation",
        "action": "halt",
        "error": message,
        "origin": origin,
    })
    raise MalformedMutation(message, origin)


def stoprule_unknown_mutation_type(mutation_type: int, origin: Optional[str] = None) -> None:
    """Emit anomaly receipt then raise UnknownMutationType."""
    emit_receipt("anomaly", {
        "metric": "mutation_type",
        "classification": "violation",
        "action": "halt",
        "mutation_type": mutation_type,
        "origin": origin,
    })
    raise UnknownMutationType(mutation_type, origin)


def parse_int(token: str) -> int:
    """Parse an integer field, mapping ``inf`` to OPEN_ENDED."""
    if token == INF_TOKEN:
        return OPEN_ENDED
    return int(token)


def parse_line(line: str, origin: Optional[str] = None) -> Optional[MutationRecord]:
    """Parse one input line.

    Args:
        line: Raw line, trailing newline allowed
        origin: Location used in error messages

    Returns:
        MutationRecord, or None for a blank line

    Raises:
        MalformedMutation: Unparseable field or wrong operand count
        UnknownMutationType: Type code outside {0, 1, 2, 3}
    """
    tokens = line.split()
    if not tokens:
        return None
    if len(tokens) < 2:
        stoprule_malformed_record(f"Expected '<timeStep> <mutationType> ...', got {line.strip()!r}", origin)

    try:
        fields = [parse_int(token) for token in tokens]
    except ValueError as e:
        stoprule_malformed_record(f"Unparseable field in {line.strip()!r}: {e}", origin)

    time_step, type_code, operands = fields[0], fields[1], tuple(fields[2:])

    try:
        mutation_type = MutationType(type_code)
    except ValueError:
        stoprule_unknown_mutation_type(type_code, origin)

    if len(operands) % mutation_type.arity:
        stoprule_malformed_record(
            f"{mutation_type.name} needs operands in pairs, got {len(operands)}", origin
        )

    return MutationRecord(time_step, mutation_type, operands, origin)
