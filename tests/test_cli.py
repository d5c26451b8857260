"""Tests for the command-line interface."""

import pytest
from click.testing import CliRunner

from notegraph.cli import main


@pytest.fixture
def vault(tmp_path):
    notes = {
        "A": "[[B]] [[C]]",
        "B": "[[A]] [[C]]",
        "C": "[[A]]",
        "D": "[[E]] [[E]]",
        "E": "[[D]]",
        "F": "nothing here",
    }
    for name, body in notes.items():
        (tmp_path / f"{name}.md").write_text(body)
    return tmp_path


def test_map_with_clusters(vault):
    result = CliRunner().invoke(main, ["map", str(vault), "--clusters", "2"])
    assert result.exit_code == 0, result.output
    assert "Loaded 6 notes" in result.output
    assert "Resolved 8 links" in result.output
    assert "Cluster" in result.output


def test_map_laplacian_three_dims(vault):
    result = CliRunner().invoke(
        main, ["map", str(vault), "--source", "laplacian", "--dims", "3", "--scale"]
    )
    assert result.exit_code == 0, result.output
    assert "x2" in result.output


def test_map_reports_reduction_error(vault):
    result = CliRunner().invoke(main, ["map", str(vault), "--dims", "10"])
    assert result.exit_code == 1
    assert "cannot exceed" in result.output


def test_map_reports_too_many_clusters(vault):
    result = CliRunner().invoke(main, ["map", str(vault), "--clusters", "9"])
    assert result.exit_code == 1
    assert "Insufficient data" in result.output


def test_map_bad_env_config(vault, monkeypatch):
    monkeypatch.setenv("NOTEGRAPH_MAX_ITERATIONS", "lots")
    result = CliRunner().invoke(main, ["map", str(vault)])
    assert result.exit_code == 1
    assert "NOTEGRAPH_MAX_ITERATIONS" in result.output


def test_stats(vault):
    result = CliRunner().invoke(main, ["stats", str(vault)])
    assert result.exit_code == 0, result.output
    assert "Notes: 6" in result.output
    assert "Links: 8" in result.output
    assert "Distinct linked pairs: 7" in result.output
    assert "Weakly connected components: 3" in result.output
    assert "Isolated notes (no links): 1" in result.output
