"""Test configuration and fixtures.

Fixtures: empty and pre-built temporal graphs, an on-disk mutation
directory, and feature flags pinned to their defaults.
"""
from pathlib import Path

import pytest

from tempograph.constants import OPEN_ENDED
from tempograph.graph.store import TemporalGraph


def write_shard(root: Path, time_step: int, lines: list[str], worker: str = "worker-0",
                name: str = "part-00000.txt") -> Path:
    """Write one shard file under root/time=<step>/<worker>/."""
    shard_dir = root / f"time={time_step}" / worker
    shard_dir.mkdir(parents=True, exist_ok=True)
    path = shard_dir / name
    path.write_text("".join(line + "\n" for line in lines))
    return path


@pytest.fixture
def graph() -> TemporalGraph:
    """Provide an empty TemporalGraph."""
    return TemporalGraph()


@pytest.fixture
def scenario_graph() -> TemporalGraph:
    """Vertices 1, 2, 3 open from 0; 1->2 open from 0; 2->3 open on [1, 3)."""
    g = TemporalGraph()
    for v in (1, 2, 3):
        g.add_vertex(v, 0, OPEN_ENDED)
    g.add_edge(1, 2, 0, OPEN_ENDED)
    g.add_edge(2, 3, 1, 3)
    return g


@pytest.fixture
def input_dir(tmp_path: Path) -> Path:
    """Mutation directory for steps 0..11.

    step 0:  add vertices 1 2 3
    step 1:  add edge 1->2
    step 2:  add edge 2->3
    step 11: delete edge 2->3
    """
    root = tmp_path / "input"
    write_shard(root, 0, ["0 0 1 2 3"])
    write_shard(root, 1, ["1 1 1 2"])
    write_shard(root, 2, ["2 1 2 3"])
    write_shard(root, 11, ["11 2 2 3"])
    return root


@pytest.fixture(autouse=True)
def default_features(monkeypatch):
    """Pin feature flags to their shipped defaults."""
    import tempograph.config.features as features
    monkeypatch.setattr(features, 'FEATURE_VERTEX_OVERWRITE_ENABLED', False)
    monkeypatch.setattr(features, 'FEATURE_STRICT_SHARD_READ_ENABLED', False)
