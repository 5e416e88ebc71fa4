"""Remediation Artifacts — machine-consumable repair inputs derived from findings.

Invariants:
    - One artifact per ArtifactSpec whose finding collections are not all empty
    - Artifact order is ARTIFACT_SPECS order; filenames are fixed per ArtifactSpec
    - Payloads are JSON-safe and byte-stable for equal findings
    - Payload shapes of artifacts with a repair task match what that task reads

Design Decisions:
    - Building payloads is pure; writing them is services/artifact_exporter.py, so the API
      can return artifacts without touching the filesystem
    - Several finding collections may share one artifact (collection integrity, distribution)
"""

import json
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from clusterlint.core.analyze_replication import count_risk_per_server
from clusterlint.core.domain_types import FindingKind, RepairTarget
from clusterlint.core.findings import FailoverRecommendation, Findings, to_jsonable


@dataclass(frozen=True)
class ArtifactSpec:
    key: str
    filename: str
    issue: str
    task: str | None
    target: RepairTarget
    kinds: tuple[FindingKind, ...]
    build: Callable[[Findings], Any]


@dataclass(frozen=True)
class RemediationArtifact:
    key: str
    filename: str
    issue: str
    task: str | None
    target: RepairTarget
    kinds: tuple[FindingKind, ...]
    payload: Any
    recommendations: tuple[FailoverRecommendation, ...] = ()

    def serialize(self) -> str:
        return json.dumps(self.payload)

    def to_dict(self) -> dict:
        return {
            "key": self.key,
            "filename": self.filename,
            "task": self.task,
            "target": self.target.value,
            "payload": self.payload,
        }


# ─── Payload builders ────────────────────────────────────────────

def _records(findings: Findings, kind: FindingKind) -> list:
    return [to_jsonable(r) for r in findings[kind]]


def _bundle(*kinds: FindingKind) -> Callable[[Findings], dict]:
    def build(findings: Findings) -> dict:
        return {kind.value: _records(findings, kind) for kind in kinds}
    return build


def _single(kind: FindingKind) -> Callable[[Findings], list]:
    def build(findings: Findings) -> list:
        return _records(findings, kind)
    return build


def _cleaned_failovers(findings: Findings) -> dict:
    return {
        patch.path: [list(patch.corrected), list(patch.original)]
        for patch in findings[FindingKind.CLEANED_FAILOVER_CANDIDATES]
    }


def _force_failover_groups(findings: Findings) -> dict:
    groups: dict[str, dict] = {}
    for rec in findings[FindingKind.NO_INSYNC_AND_DEAD_LEADER]:
        if rec.search not in groups:
            groups[rec.search] = rec.group.to_dict()
    return groups


def _out_of_sync(findings: Findings) -> dict:
    records = findings[FindingKind.OUT_OF_SYNC_FOLLOWERS]
    return {
        FindingKind.OUT_OF_SYNC_FOLLOWERS.value: [r.to_dict() for r in records],
        "riskPerServer": count_risk_per_server(records),
    }


_INTEGRITY_KINDS = (
    FindingKind.NO_PLAN_DATABASES, FindingKind.NO_SHARD_COLLECTIONS,
    FindingKind.REAL_LEADER_MISSING, FindingKind.LEADER_ON_DEAD_SERVER,
    FindingKind.FOLLOWER_ON_DEAD_SERVER,
)
_DISTRIBUTION_KINDS = (
    FindingKind.VIOLATED_DIST_SHARD_LIKE, FindingKind.UNPLANNED_LEADER,
    FindingKind.NO_INSYNC_FOLLOWER,
)

ARTIFACT_SPECS: tuple[ArtifactSpec, ...] = (
    ArtifactSpec(
        "collection_integrity", "collectionIntegrity.json", "collection integrity",
        None, RepairTarget.NONE, _INTEGRITY_KINDS, _bundle(*_INTEGRITY_KINDS),
    ),
    ArtifactSpec(
        "zombies", "zombies.json", "zombies", "remove-zombies",
        RepairTarget.LEADER_AGENT, (FindingKind.ZOMBIES,), _single(FindingKind.ZOMBIES),
    ),
    ArtifactSpec(
        "zombie_coordinators", "zombie-coordinators.json", "zombie coordinators",
        "remove-zombie-coordinators", RepairTarget.LEADER_AGENT,
        (FindingKind.ZOMBIE_COORDINATORS,), _single(FindingKind.ZOMBIE_COORDINATORS),
    ),
    ArtifactSpec(
        "dead_primaries", "dead-primaries.json", "dead primaries", "remove-dead-primaries",
        RepairTarget.LEADER_AGENT, (FindingKind.DEAD_PRIMARIES,),
        _single(FindingKind.DEAD_PRIMARIES),
    ),
    ArtifactSpec(
        "force_failover", "forceFailover.json", "dead leader without insync follower",
        "force-failover", RepairTarget.LEADER_AGENT,
        (FindingKind.NO_INSYNC_AND_DEAD_LEADER,), _force_failover_groups,
    ),
    ArtifactSpec(
        "skeleton_databases", "skeleton-databases.json", "skeleton databases",
        "remove-skeleton-databases", RepairTarget.LEADER_AGENT,
        (FindingKind.EMPTY_DATABASES,), _single(FindingKind.EMPTY_DATABASES),
    ),
    ArtifactSpec(
        "missing_collections", "missing-collections.json", "missing collections",
        "create-missing-collections", RepairTarget.COORDINATOR,
        (FindingKind.MISSING_COLLECTIONS,), _single(FindingKind.MISSING_COLLECTIONS),
    ),
    ArtifactSpec(
        "cleaned_failovers", "cleaned-failovers.json", "cleaned out failover db servers",
        "remove-cleaned-failovers", RepairTarget.LEADER_AGENT,
        (FindingKind.CLEANED_FAILOVER_CANDIDATES,), _cleaned_failovers,
    ),
    ArtifactSpec(
        "broken_edge_indexes", "broken-edge-indexes.json", "broken-edge-index",
        "repair-broken-edge-indexes", RepairTarget.COORDINATOR,
        (FindingKind.BROKEN_EDGE_INDEXES,), _single(FindingKind.BROKEN_EDGE_INDEXES),
    ),
    ArtifactSpec(
        "out_of_sync_followers", "out-of-sync-followers.json", "out of sync followers",
        None, RepairTarget.NONE, (FindingKind.OUT_OF_SYNC_FOLLOWERS,), _out_of_sync,
    ),
    ArtifactSpec(
        "distribution_groups", "distribution-groups.json", "distribution group",
        None, RepairTarget.NONE, _DISTRIBUTION_KINDS, _bundle(*_DISTRIBUTION_KINDS),
    ),
    ArtifactSpec(
        "zombie_callbacks", "zombie-callbacks.json", "zombies callback",
        "remove-zombie-callbacks", RepairTarget.LEADER_AGENT,
        (FindingKind.ZOMBIE_CALLBACKS,), _single(FindingKind.ZOMBIE_CALLBACKS),
    ),
)


def build_artifacts(findings: Findings) -> list[RemediationArtifact]:
    """One artifact per ArtifactSpec with at least one non-empty finding collection. Pure, no IO."""
    artifacts = []
    for spec in ARTIFACT_SPECS:
        if not any(findings[kind] for kind in spec.kinds):
            continue
        artifacts.append(RemediationArtifact(
            key=spec.key,
            filename=spec.filename,
            issue=spec.issue,
            task=spec.task,
            target=spec.target,
            kinds=spec.kinds,
            payload=spec.build(findings),
            recommendations=(
                findings[FindingKind.NO_INSYNC_AND_DEAD_LEADER]
                if spec.key == "force_failover" else ()
            ),
        ))
    return artifacts


def hint_lines(artifact: RemediationArtifact, path: str, repair_command: str) -> list[str]:
    """Operator hint naming the repair task and the artifact's absolute path."""
    if artifact.task is None:
        return [f"Wrote {artifact.issue} details to {path}", ""]
    if artifact.recommendations:
        return _failover_hint_lines(artifact, path, repair_command)
    return [
        f"To remedy the {artifact.issue} issue please run the task "
        f"`{artifact.task}` against the {artifact.target.value}, e.g.:",
        f" {repair_command} {artifact.task} {path}",
        "",
    ]


def _failover_hint_lines(
    artifact: RemediationArtifact, path: str, repair_command: str,
) -> list[str]:
    lines = []
    for rec in artifact.recommendations:
        lines.append(
            f"List of potential failover candidates for {rec.cid}/{rec.shard}, "
            "first has most in sync:"
        )
        if not rec.candidates:
            lines.append(" No live server is planned for this shard")
        for candidate in rec.candidates:
            lines.append(
                f"Failover to {candidate.server} insync: {json.dumps(list(candidate.insync))}, "
                f"please check state of {json.dumps(list(candidate.missing))}"
            )
            lines.append(
                f"If you want to failover to this server run the `{artifact.task}` task "
                f"against the {artifact.target.value}, e.g.:"
            )
            lines.append(
                f" {repair_command} {artifact.task} {path} "
                f"{candidate.server} {rec.search} {rec.shard_index}"
            )
        lines.append("")
    return lines
