"""Tests for the tempo command line."""
import json

from click.testing import CliRunner

from conftest import write_shard
from tempograph_cli.main import cli

runner = CliRunner()


class TestRunCommand:
    """Tests for tempo run."""

    def test_run(self, input_dir, tmp_path):
        out = tmp_path / "out"

        result = runner.invoke(cli, ["run", str(input_dir), "0", "11", "1", "-o", str(out)])

        assert result.exit_code == 0, result.output
        assert "Run Complete" in result.output
        assert (out / "vertices-10.csv").exists()

    def test_run_fatal_input(self, input_dir, tmp_path):
        write_shard(input_dir, 1, ["1 9 1"], worker="worker-9")

        result = runner.invoke(cli, ["run", str(input_dir), "0", "3", "1",
                                     "--write-every", "0"])

        assert result.exit_code == 2
        assert "STOPRULE" in result.output

    def test_run_missing_source(self, input_dir, tmp_path):
        result = runner.invoke(cli, ["run", str(input_dir), "0", "3", "77",
                                     "-o", str(tmp_path / "out")])

        assert result.exit_code == 0
        assert "Skipped Steps: 3" in result.output

    def test_version(self):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0


class TestGraphCommands:
    """Tests for tempo graph status and dump."""

    def test_status(self, input_dir):
        result = runner.invoke(cli, ["graph", "status", str(input_dir), "12"])

        assert result.exit_code == 0, result.output
        assert "Vertices: 3" in result.output
        assert "Closed Edges: 1" in result.output

    def test_dump_json(self, input_dir, tmp_path):
        target = tmp_path / "graph.json"

        result = runner.invoke(cli, ["graph", "dump", str(input_dir), "3",
                                     "--format", "json", "-o", str(target)])

        assert result.exit_code == 0, result.output
        data = json.loads(target.read_text())
        assert len(data["vertices"]) == 3
        assert len(data["edges"]) == 2

    def test_duplicate_vertex_needs_overwrite(self, input_dir):
        write_shard(input_dir, 4, ["4 0 1"])

        failed = runner.invoke(cli, ["graph", "status", str(input_dir), "5"])
        allowed = runner.invoke(cli, ["graph", "status", str(input_dir), "5", "--allow-overwrite"])

        assert failed.exit_code == 2
        assert allowed.exit_code == 0, allowed.output

    def test_dump_duplicate_vertex_needs_overwrite(self, input_dir):
        write_shard(input_dir, 4, ["4 0 1"])

        failed = runner.invoke(cli, ["graph", "dump", str(input_dir), "5"])
        allowed = runner.invoke(cli, ["graph", "dump", str(input_dir), "5", "--allow-overwrite"])

        assert failed.exit_code == 2
        assert "STOPRULE" in failed.output
        assert allowed.exit_code == 0, allowed.output
        assert "1\t4\t" in allowed.output

    def test_unreadable_shard_fails_only_when_strict(self, input_dir):
        write_shard(input_dir, 3, [], worker="worker-1").write_bytes(b"3 0 9\xff\n")

        for command in ("status", "dump"):
            lenient = runner.invoke(cli, ["graph", command, str(input_dir), "4"])
            strict = runner.invoke(cli, ["graph", command, str(input_dir), "4", "--strict"])

            assert lenient.exit_code == 0, lenient.output
            assert strict.exit_code == 2
            assert "STOPRULE" in strict.output
