"""Analyzer Registry — tests for pipeline order, coverage and purity.

Tests cover:
    - Every FindingKind is produced by exactly one registered analyzer
    - Empty snapshot yields no findings
    - Healthy cluster yields no findings
    - Repeated runs over one snapshot give equal Findings and byte-identical
      finding JSON and artifacts
    - Analysis options flow through to the missing-collection check
    - Dead follower with no Current entry: placement reported, sync check skipped
"""

import json
from collections import Counter

from builders import agency_dump, current_shards, health_of, plan_collection
from clusterlint.core.analyzer_registry import ANALYZERS, run_analysis
from clusterlint.core.domain_types import FindingKind
from clusterlint.core.remediation import build_artifacts
from clusterlint.core.snapshot import load_snapshot


def test_every_kind_owned_by_exactly_one_analyzer():
    owners = Counter(kind for analyzer in ANALYZERS for kind in analyzer.kinds)
    assert set(owners) == set(FindingKind)
    assert all(count == 1 for count in owners.values())


def test_analyzer_names_unique():
    names = [a.name for a in ANALYZERS]
    assert len(names) == len(set(names)) == 11


def test_empty_snapshot_has_no_findings():
    result = run_analysis(load_snapshot({}))
    assert not result.infected
    assert all(count == 0 for count in result.findings.counts().values())


def test_healthy_cluster_has_no_findings(healthy_dump):
    result = run_analysis(load_snapshot(healthy_dump))
    assert result.findings.counts() == {kind.value: 0 for kind in FindingKind}
    assert not result.infected


def test_repeated_runs_are_equal():
    dump = agency_dump(
        plan_collections={"db": {"1": plan_collection("1", "c", {"s1": ["A", "B"]})}},
        current_collections={"db": {"1": current_shards({"s1": ["A"]})}},
        health=health_of(failed=("A",), bad=("B",)),
        current_coordinators=["CRDN-9"],
    )
    snapshot = load_snapshot(dump)
    first, second = run_analysis(snapshot), run_analysis(snapshot)
    assert first.findings == second.findings
    assert first.infected


def test_required_system_collections_option_applied():
    dump = agency_dump(
        plan_collections={"db": {"1": plan_collection("1", "_apps", {"s1": ["A"]})}},
        health=health_of("A"),
    )
    snapshot = load_snapshot(dump)
    assert run_analysis(snapshot, required_system_collections=["_apps"]).findings[
        FindingKind.MISSING_COLLECTIONS
    ] == ()
    assert run_analysis(snapshot).findings[FindingKind.MISSING_COLLECTIONS] != ()


def test_follower_on_failed_server_without_current_entry():
    dump = agency_dump(
        plan_collections={"db": {"C1": plan_collection("C1", "c", {"s1": ["A", "B"]})}},
        health=health_of("A", failed=("B",)),
    )
    findings = run_analysis(load_snapshot(dump)).findings
    assert findings[FindingKind.LEADER_ON_DEAD_SERVER] == ()
    [follower] = findings[FindingKind.FOLLOWER_ON_DEAD_SERVER]
    assert (follower.shard, follower.server) == ("s1", "B")
    assert findings[FindingKind.OUT_OF_SYNC_FOLLOWERS] == ()


def test_repeated_runs_serialize_identically():
    dump = agency_dump(
        plan_collections={"db": {
            "1": plan_collection("1", "c1", {"s10": ["A", "B"]}),
            "2": plan_collection("2", "c2", {"s20": ["A", "B"]}, distributeShardsLike="1"),
            "3": plan_collection("3", "edges", {"s30": ["B"]}, type=3, indexes=[
                {"id": "0", "type": "primary", "name": "primary", "fields": ["_key"]},
                {"id": "1", "type": "edge", "name": "edge", "fields": ["_from", "_to"]},
            ]),
        }},
        current_collections={"db": {
            "1": current_shards({"s10": ["A"]}),
            "2": current_shards({"s20": ["A", "B"]}),
            "3": current_shards({"s30": ["B"]}),
        }},
        current_databases={"db": {"A": {"id": "1"}, "B": {"id": "1"}}},
        health=health_of("B", failed=("A",)),
    )
    snapshot = load_snapshot(dump)
    first, second = run_analysis(snapshot).findings, run_analysis(snapshot).findings
    for kind in (
        FindingKind.DEAD_PRIMARIES,
        FindingKind.BROKEN_EDGE_INDEXES,
        FindingKind.NO_INSYNC_AND_DEAD_LEADER,
    ):
        assert first[kind] != ()

    assert json.dumps(first.to_jsonable()) == json.dumps(second.to_jsonable())
    assert [a.serialize() for a in build_artifacts(first)] == [
        a.serialize() for a in build_artifacts(second)
    ]
