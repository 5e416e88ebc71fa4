"""Remediation Artifacts — tests for artifact selection, payload shapes and operator hints.

Tests cover:
    - Clean findings produce no artifacts
    - Artifacts appear in fixed order with fixed filenames, only when non-empty
    - Cleaned failover payload maps path -> [corrected, original]
    - Out-of-sync payload carries riskPerServer
    - Force-failover payload keyed by group, hints list ranked candidates
    - Hints with and without a repair task
"""

import json

from builders import agency_dump, current_shards, health_of, plan_collection
from clusterlint.core.analyzer_registry import run_analysis
from clusterlint.core.domain_types import FindingKind, RepairTarget
from clusterlint.core.findings import CleanedFailoverPatch, Findings
from clusterlint.core.remediation import ARTIFACT_SPECS, build_artifacts, hint_lines
from clusterlint.core.snapshot import load_snapshot


def _artifacts(dump: dict) -> dict:
    return {a.filename: a for a in build_artifacts(run_analysis(load_snapshot(dump)).findings)}


def test_clean_findings_produce_no_artifacts(healthy_dump):
    assert build_artifacts(run_analysis(load_snapshot(healthy_dump)).findings) == []


def test_artifact_filenames_unique_and_every_kind_covered():
    filenames = [s.filename for s in ARTIFACT_SPECS]
    assert len(filenames) == len(set(filenames))
    covered = {kind for spec in ARTIFACT_SPECS for kind in spec.kinds}
    assert covered == set(FindingKind)


def test_zombie_coordinators_artifact():
    artifacts = _artifacts(agency_dump(
        plan_coordinators=["C1"], current_coordinators=["C1", "C2"],
    ))
    artifact = artifacts["zombie-coordinators.json"]
    assert json.loads(artifact.serialize()) == ["C2"]
    assert artifact.task == "remove-zombie-coordinators"
    assert artifact.target is RepairTarget.LEADER_AGENT


def test_cleaned_failover_payload():
    findings = Findings(by_kind={FindingKind.CLEANED_FAILOVER_CANDIDATES: (
        CleanedFailoverPatch("arango/Current/Collections/db/1/s1/failoverCandidates", ("Y",), ("X", "Y")),
    )})
    [artifact] = build_artifacts(findings)
    assert artifact.filename == "cleaned-failovers.json"
    assert artifact.payload == {
        "arango/Current/Collections/db/1/s1/failoverCandidates": [["Y"], ["X", "Y"]],
    }


def test_out_of_sync_payload_has_risk_per_server():
    artifacts = _artifacts(agency_dump(
        plan_collections={"db": {"1": plan_collection("1", "c", {"s1": ["A", "B"]})}},
        current_collections={"db": {"1": current_shards({"s1": ["A"]})}},
        health=health_of("A", "B"),
    ))
    payload = artifacts["out-of-sync-followers.json"].payload
    assert payload["riskPerServer"] == {"A": 1}
    assert payload["outOfSyncFollowers"][0]["shard"] == "s1"
    assert artifacts["out-of-sync-followers.json"].task is None


def test_artifact_order_is_fixed():
    findings = run_analysis(load_snapshot(agency_dump(
        plan_collections={"db": {"1": plan_collection("1", "c", {"s1": ["A", "DEAD"]})}},
        current_collections={"db": {"1": current_shards({"s1": ["A"]}), "9": {}}},
        health=health_of("A"),
        current_coordinators=["C9"],
    ))).findings
    keys = [a.key for a in build_artifacts(findings)]
    ordered_keys = [s.key for s in ARTIFACT_SPECS]
    assert keys == [k for k in ordered_keys if k in keys]
    assert keys[0] == "collection_integrity"


def test_force_failover_payload_and_hints():
    dump = agency_dump(
        plan_collections={"db": {
            "1": plan_collection("1", "c1", {"s10": ["A", "B"]}),
            "2": plan_collection("2", "c2", {"s20": ["A", "B"]}, distributeShardsLike="1"),
        }},
        current_collections={"db": {
            "1": current_shards({"s10": ["A"]}),
            "2": current_shards({"s20": ["A", "B"]}),
        }},
        health=health_of("B", failed=("A",)),
    )
    artifact = _artifacts(dump)["forceFailover.json"]
    assert set(artifact.payload) == {"1"}
    assert artifact.payload["1"]["db"] == "db"
    assert artifact.payload["1"]["plan"]["2"] == [{"shard": "s20", "servers": ["A", "B"]}]

    lines = hint_lines(artifact, "/tmp/forceFailover.json", "./repair")
    assert lines[0] == "List of potential failover candidates for 1/s10, first has most in sync:"
    assert lines[-2] == " ./repair force-failover /tmp/forceFailover.json B 1 0"


def test_task_hint_names_task_target_and_path():
    artifacts = _artifacts(agency_dump(current_coordinators=["C2"]))
    lines = hint_lines(artifacts["zombie-coordinators.json"], "/out/zombie-coordinators.json", "./r")
    assert lines[0] == (
        "To remedy the zombie coordinators issue please run the task "
        "`remove-zombie-coordinators` against the leader AGENT, e.g.:"
    )
    assert lines[1] == " ./r remove-zombie-coordinators /out/zombie-coordinators.json"


def test_taskless_hint_only_names_path():
    artifacts = _artifacts(agency_dump(
        plan_collections={"db": {"1": plan_collection("1", "c", {})}},
    ))
    lines = hint_lines(artifacts["collectionIntegrity.json"], "/out/collectionIntegrity.json", "./r")
    assert lines[0] == "Wrote collection integrity details to /out/collectionIntegrity.json"
