"""Tests for type-ordered batch application."""
from io import StringIO
from unittest.mock import patch

import pytest

from tempograph.constants import OPEN_ENDED
from tempograph.graph.store import DuplicateVertex, TemporalGraph, UnknownVertex
from tempograph.mutation.apply import MutationError, apply_batch, order_batch
from tempograph.mutation.records import (
    MalformedMutation,
    MutationRecord,
    MutationType,
    UnknownMutationType,
    parse_line,
)


def batch(*lines: str) -> list[MutationRecord]:
    return [parse_line(line) for line in lines]


def quiet_apply(graph, records):
    with patch('sys.stdout', new=StringIO()):
        return apply_batch(graph, records)


class TestOrdering:
    """Tests for the ADD_VERTEX -> ADD_EDGE -> DEL_EDGE -> DEL_VERTEX order."""

    def test_groups_in_type_order(self):
        ordered = order_batch(batch("1 3 1", "1 2 1 2", "1 1 1 2", "1 0 1 2"))

        assert [r.mutation_type for r in ordered] == [
            MutationType.ADD_VERTEX,
            MutationType.ADD_EDGE,
            MutationType.DEL_EDGE,
            MutationType.DEL_VERTEX,
        ]

    def test_read_order_kept_within_group(self):
        ordered = order_batch(batch("0 0 5", "0 1 5 6", "0 0 6"))

        assert [r.operands for r in ordered] == [(5,), (6,), (5, 6)]

    def test_int_type_codes_accepted(self):
        ordered = order_batch([MutationRecord(0, 1, (1, 2)), MutationRecord(0, 0, (1, 2))])
        assert ordered[0].mutation_type is MutationType.ADD_VERTEX


class TestApplyBatch:
    """Tests for apply_batch."""

    def test_empty_batch_changes_nothing(self, scenario_graph):
        before = (scenario_graph.vertex_count(), scenario_graph.edge_count())

        result = quiet_apply(scenario_graph, [])

        assert (scenario_graph.vertex_count(), scenario_graph.edge_count()) == before
        assert result.records == 0

    def test_edge_before_endpoints_in_raw_order(self, graph):
        """An AddEdge read before its endpoints' AddVertex still succeeds."""
        result = quiet_apply(graph, batch("0 1 1 2", "0 0 1 2"))

        assert graph.edge_count() == 1
        edge = graph.get_edge(1, 2)
        assert (edge.start, edge.end) == (0, OPEN_ENDED)
        assert result.operations["ADD_EDGE"] == 1
        assert result.operations["ADD_VERTEX"] == 2

    def test_additions_use_record_time(self, graph):
        quiet_apply(graph, batch("4 0 1 2", "4 1 1 2"))

        assert graph.get_vertex(1).start == 4
        assert graph.get_edge(1, 2).start == 4

    def test_delete_and_add_same_batch(self, graph):
        """Deletes run after adds, so a same-batch delete closes the new edge."""
        quiet_apply(graph, batch("0 0 1 2"))
        quiet_apply(graph, batch("3 2 1 2", "3 1 1 2"))

        assert graph.get_edge(1, 2).end == 3

    def test_delete_vertex(self, scenario_graph):
        quiet_apply(scenario_graph, batch("5 3 2"))

        assert scenario_graph.vertices[2].end == 5
        assert scenario_graph.vertex_count() == 3

    def test_multiple_pairs_per_record(self, graph):
        quiet_apply(graph, batch("0 0 1 2 3", "0 1 1 2 2 3"))
        assert graph.edge_count() == 2

    def test_result_counts(self, graph):
        result = quiet_apply(graph, batch("0 0 1 2", "0 1 1 2", "0 2 1 2", "0 3 2"))

        assert result.records == 4
        assert result.operations == {
            "ADD_VERTEX": 2, "ADD_EDGE": 1, "DEL_EDGE": 1, "DEL_VERTEX": 1,
        }
        assert result.vertices == 2
        assert result.edges == 1

    def test_emits_receipt(self, graph, capsys):
        apply_batch(graph, batch("0 0 1"))
        assert '"receipt_type": "mutation_apply"' in capsys.readouterr().out


class TestApplyErrors:
    """Tests for fatal application errors."""

    def test_edge_to_unknown_vertex(self, graph):
        with pytest.raises(MutationError) as exc:
            quiet_apply(graph, batch("2 0 1", "2 1 1 9"))

        assert exc.value.mutation_type is MutationType.ADD_EDGE
        assert exc.value.vertex_id == 9
        assert exc.value.time_step == 2

    def test_delete_unknown_vertex(self, graph):
        with pytest.raises(MutationError) as exc:
            quiet_apply(graph, batch("1 3 8"))

        assert exc.value.mutation_type is MutationType.DEL_VERTEX
        assert exc.value.vertex_id == 8

    def test_delete_unknown_edge(self, scenario_graph):
        with pytest.raises(MutationError) as exc:
            quiet_apply(scenario_graph, batch("4 2 3 1"))

        assert exc.value.mutation_type is MutationType.DEL_EDGE
        assert exc.value.vertex_id == (3, 1)

    def test_delete_edge_to_unknown_vertex(self, scenario_graph):
        with pytest.raises(MutationError) as exc:
            quiet_apply(scenario_graph, batch("4 2 1 42"))

        assert exc.value.mutation_type is MutationType.DEL_EDGE
        assert exc.value.vertex_id == 42
        assert isinstance(exc.value.cause, UnknownVertex)

    def test_duplicate_vertex(self, scenario_graph):
        with pytest.raises(MutationError) as exc:
            quiet_apply(scenario_graph, batch("1 0 2"))
        assert isinstance(exc.value.cause, DuplicateVertex)

    def test_duplicate_vertex_with_overwrite(self):
        g = TemporalGraph(allow_overwrite=True)
        quiet_apply(g, batch("0 0 1"))
        quiet_apply(g, batch("1 0 1"))
        assert g.get_vertex(1).start == 1

    def test_unknown_type_aborts_whole_batch(self, graph):
        records = batch("0 0 1 2") + [MutationRecord(0, 7, (1,))]

        with pytest.raises(UnknownMutationType):
            quiet_apply(graph, records)

        assert graph.vertex_count() == 0

    def test_odd_edge_operands(self, graph):
        with pytest.raises(MalformedMutation):
            quiet_apply(graph, [MutationRecord(0, MutationType.ADD_EDGE, (1, 2, 3))])

    def test_error_emits_anomaly(self, graph, capsys):
        with pytest.raises(MutationError):
            apply_batch(graph, batch("0 3 1"))
        out = capsys.readouterr().out
        assert '"receipt_type": "anomaly"' in out
        assert '"mutation_type": "DEL_VERTEX"' in out
