"""Tests for mutation record parsing."""
from io import StringIO
from unittest.mock import patch

import pytest

from tempograph.constants import OPEN_ENDED
from tempograph.mutation.records import (
    MalformedMutation,
    MutationRecord,
    MutationType,
    UnknownMutationType,
    parse_line,
)


class TestParseLine:
    """Tests for parse_line."""

    def test_add_vertex_line(self):
        record = parse_line("3 0 10 11 12\n")

        assert record.time_step == 3
        assert record.mutation_type is MutationType.ADD_VERTEX
        assert record.operands == (10, 11, 12)

    def test_tab_separated(self):
        record = parse_line("4\t1\t1\t2")

        assert record.mutation_type is MutationType.ADD_EDGE
        assert record.operations() == [(1, 2)]

    def test_inf_token(self):
        record = parse_line("inf 3 5")
        assert record.time_step == OPEN_ENDED

    def test_blank_line(self):
        assert parse_line("   \n") is None

    def test_origin_kept(self):
        record = parse_line("0 0 1", origin="shard:1")
        assert record.origin == "shard:1"

    def test_unparseable_field(self):
        with patch('sys.stdout', new=StringIO()):
            with pytest.raises(MalformedMutation) as exc:
                parse_line("0 0 x", origin="shard:7")
        assert "shard:7" in str(exc.value)

    def test_missing_type(self):
        with patch('sys.stdout', new=StringIO()):
            with pytest.raises(MalformedMutation):
                parse_line("5")

    def test_unknown_type(self):
        with patch('sys.stdout', new=StringIO()):
            with pytest.raises(UnknownMutationType) as exc:
                parse_line("0 4 1")
        assert exc.value.mutation_type == 4

    def test_edge_operands_in_pairs(self):
        with patch('sys.stdout', new=StringIO()):
            with pytest.raises(MalformedMutation):
                parse_line("0 2 1 2 3")

    def test_malformed_emits_anomaly(self, capsys):
        with pytest.raises(MalformedMutation):
            parse_line("0 0 ?")
        assert '"receipt_type": "anomaly"' in capsys.readouterr().out


class TestMutationRecord:
    """Tests for operand grouping."""

    def test_vertex_operations(self):
        record = MutationRecord(0, MutationType.DEL_VERTEX, (1, 2, 3))
        assert record.operations() == [(1,), (2,), (3,)]

    def test_edge_operations(self):
        record = MutationRecord(0, MutationType.DEL_EDGE, (1, 2, 3, 4))
        assert record.operations() == [(1, 2), (3, 4)]

    def test_no_operands(self):
        assert MutationRecord(0, MutationType.ADD_EDGE).operations() == []
