"""Artifact Exporter — tests for independent artifact writes and operator hints.

Tests cover:
    - Every artifact written as JSON under the output directory
    - Hints name the absolute artifact path
    - A failing write is collected as ArtifactWriteError, the rest still written,
      and its temp file removed
    - Missing output directory is created
"""

import io
import json

from builders import agency_dump, plan_collection
from clusterlint.core.analyzer_registry import run_analysis
from clusterlint.core.remediation import build_artifacts
from clusterlint.core.snapshot import load_snapshot
from clusterlint.services.artifact_exporter import export_artifacts


def _artifacts():
    dump = agency_dump(
        plan_collections={"db": {"1": plan_collection("1", "c", {})}},
        current_coordinators=["C9"],
    )
    return build_artifacts(run_analysis(load_snapshot(dump)).findings)


def test_writes_every_artifact_and_prints_hints(tmp_path):
    out = io.StringIO()
    artifacts = _artifacts()

    result = export_artifacts(artifacts, tmp_path, "./repair", out)

    assert result.ok
    assert [p.name for p in result.written] == [a.filename for a in artifacts]
    coordinators = tmp_path / "zombie-coordinators.json"
    assert json.loads(coordinators.read_text()) == ["C9"]
    assert f" ./repair remove-zombie-coordinators {coordinators.resolve()}" in out.getvalue()


def test_failed_write_does_not_stop_the_others(tmp_path):
    (tmp_path / "zombie-coordinators.json").mkdir()
    out = io.StringIO()
    artifacts = _artifacts()

    result = export_artifacts(artifacts, tmp_path, "./repair", out)

    assert [e.filename for e in result.failed] == ["zombie-coordinators.json"]
    assert result.failed[0].code == "ARTIFACT_WRITE_ERROR"
    assert len(result.written) == len(artifacts) - 1
    assert (tmp_path / "collectionIntegrity.json").is_file()
    assert "Cannot write artifact 'zombie-coordinators.json'" in out.getvalue()


def test_output_directory_created(tmp_path):
    target = tmp_path / "nested" / "out"
    result = export_artifacts(_artifacts(), target, "./repair", io.StringIO())
    assert result.ok
    assert (target / "collectionIntegrity.json").is_file()


def test_failed_write_leaves_no_temp_file(tmp_path):
    (tmp_path / "zombie-coordinators.json").mkdir()
    export_artifacts(_artifacts(), tmp_path, "./repair", io.StringIO())
    assert list(tmp_path.glob("*.tmp")) == []
