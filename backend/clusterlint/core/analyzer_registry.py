"""Analyzer Registry — fixed, ordered list of analyzers and the pipeline that runs them.

Invariants:
    - Liveness index and inventory are derived once, before any analyzer runs
    - Analyzers run sequentially in ANALYZERS order and never see each other's output
    - Every FindingKind is produced by exactly one analyzer
    - run_analysis is pure: same snapshot and options, equal Findings

Design Decisions:
    - Explicit tuple over auto-discovery: adding an analyzer means editing ANALYZERS
    - Adapters unpack AnalysisContext so each analyzer keeps a narrow signature
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass

from clusterlint.core.analyze_collections import check_collection_integrity, find_zombie_collections
from clusterlint.core.analyze_coordinators import find_zombie_callbacks, find_zombie_coordinators
from clusterlint.core.analyze_databases import (
    find_dead_primaries,
    find_empty_databases,
    find_missing_system_collections,
)
from clusterlint.core.analyze_distribution import analyze_distribution_groups
from clusterlint.core.analyze_indexes import find_broken_edge_indexes
from clusterlint.core.analyze_replication import (
    find_cleaned_failover_candidates,
    find_out_of_sync_followers,
)
from clusterlint.core.domain_types import (
    REQUIRED_SYSTEM_COLLECTIONS,
    SYSTEM_COLLECTION_PREFIX,
    FindingKind,
)
from clusterlint.core.findings import Findings
from clusterlint.core.inventory import Inventory, build_inventory
from clusterlint.core.liveness import LivenessIndex, build_liveness_index
from clusterlint.core.snapshot import Snapshot


@dataclass(frozen=True)
class AnalysisContext:
    snapshot: Snapshot
    liveness: LivenessIndex
    inventory: Inventory
    required_system_collections: tuple[str, ...] = REQUIRED_SYSTEM_COLLECTIONS
    system_prefix: str = SYSTEM_COLLECTION_PREFIX


@dataclass(frozen=True)
class Analyzer:
    name: str
    kinds: tuple[FindingKind, ...]
    run: Callable[[AnalysisContext], dict[FindingKind, tuple]]


@dataclass(frozen=True)
class AnalysisResult:
    findings: Findings
    liveness: LivenessIndex
    inventory: Inventory

    @property
    def infected(self) -> bool:
        return self.findings.infected


# ─── Adapters ────────────────────────────────────────────────────

def _zombie_coordinators(ctx: AnalysisContext) -> dict[FindingKind, tuple]:
    return {FindingKind.ZOMBIE_COORDINATORS: find_zombie_coordinators(ctx.snapshot)}


def _zombie_collections(ctx: AnalysisContext) -> dict[FindingKind, tuple]:
    return {FindingKind.ZOMBIES: find_zombie_collections(ctx.snapshot)}


def _cleaned_failovers(ctx: AnalysisContext) -> dict[FindingKind, tuple]:
    return {FindingKind.CLEANED_FAILOVER_CANDIDATES: find_cleaned_failover_candidates(ctx.snapshot)}


def _collection_integrity(ctx: AnalysisContext) -> dict[FindingKind, tuple]:
    return check_collection_integrity(ctx.snapshot, ctx.liveness)


def _dead_primaries(ctx: AnalysisContext) -> dict[FindingKind, tuple]:
    return {FindingKind.DEAD_PRIMARIES: find_dead_primaries(ctx.snapshot, ctx.liveness)}


def _empty_databases(ctx: AnalysisContext) -> dict[FindingKind, tuple]:
    return {FindingKind.EMPTY_DATABASES: find_empty_databases(ctx.inventory)}


def _missing_collections(ctx: AnalysisContext) -> dict[FindingKind, tuple]:
    return {FindingKind.MISSING_COLLECTIONS: find_missing_system_collections(
        ctx.inventory, ctx.required_system_collections, ctx.system_prefix,
    )}


def _out_of_sync(ctx: AnalysisContext) -> dict[FindingKind, tuple]:
    return {FindingKind.OUT_OF_SYNC_FOLLOWERS: find_out_of_sync_followers(ctx.snapshot)}


def _distribution(ctx: AnalysisContext) -> dict[FindingKind, tuple]:
    return analyze_distribution_groups(ctx.snapshot, ctx.liveness)


def _broken_edge_indexes(ctx: AnalysisContext) -> dict[FindingKind, tuple]:
    return {FindingKind.BROKEN_EDGE_INDEXES: find_broken_edge_indexes(ctx.snapshot)}


def _zombie_callbacks(ctx: AnalysisContext) -> dict[FindingKind, tuple]:
    return {FindingKind.ZOMBIE_CALLBACKS: find_zombie_callbacks(ctx.snapshot, ctx.liveness)}


ANALYZERS: tuple[Analyzer, ...] = (
    Analyzer("zombie_coordinators", (FindingKind.ZOMBIE_COORDINATORS,), _zombie_coordinators),
    Analyzer("zombie_collections", (FindingKind.ZOMBIES,), _zombie_collections),
    Analyzer(
        "cleaned_failover_candidates",
        (FindingKind.CLEANED_FAILOVER_CANDIDATES,), _cleaned_failovers,
    ),
    Analyzer(
        "collection_integrity",
        (
            FindingKind.NO_PLAN_DATABASES, FindingKind.NO_SHARD_COLLECTIONS,
            FindingKind.REAL_LEADER_MISSING, FindingKind.LEADER_ON_DEAD_SERVER,
            FindingKind.FOLLOWER_ON_DEAD_SERVER,
        ),
        _collection_integrity,
    ),
    Analyzer("dead_primaries", (FindingKind.DEAD_PRIMARIES,), _dead_primaries),
    Analyzer("empty_databases", (FindingKind.EMPTY_DATABASES,), _empty_databases),
    Analyzer("missing_system_collections", (FindingKind.MISSING_COLLECTIONS,), _missing_collections),
    Analyzer("out_of_sync_followers", (FindingKind.OUT_OF_SYNC_FOLLOWERS,), _out_of_sync),
    Analyzer(
        "distribution_groups",
        (
            FindingKind.VIOLATED_DIST_SHARD_LIKE, FindingKind.UNPLANNED_LEADER,
            FindingKind.NO_INSYNC_FOLLOWER, FindingKind.NO_INSYNC_AND_DEAD_LEADER,
        ),
        _distribution,
    ),
    Analyzer("broken_edge_indexes", (FindingKind.BROKEN_EDGE_INDEXES,), _broken_edge_indexes),
    Analyzer("zombie_callbacks", (FindingKind.ZOMBIE_CALLBACKS,), _zombie_callbacks),
)


def run_analysis(
    snapshot: Snapshot,
    *,
    required_system_collections: Iterable[str] = REQUIRED_SYSTEM_COLLECTIONS,
    system_prefix: str = SYSTEM_COLLECTION_PREFIX,
    analyzers: tuple[Analyzer, ...] = ANALYZERS,
) -> AnalysisResult:
    """Derive liveness and inventory, then run every analyzer in order. Pure, no IO."""
    ctx = AnalysisContext(
        snapshot=snapshot,
        liveness=build_liveness_index(snapshot),
        inventory=build_inventory(snapshot),
        required_system_collections=tuple(required_system_collections),
        system_prefix=system_prefix,
    )
    by_kind: dict[FindingKind, tuple] = {}
    for analyzer in analyzers:
        by_kind.update(analyzer.run(ctx))
    return AnalysisResult(
        findings=Findings(by_kind=by_kind),
        liveness=ctx.liveness,
        inventory=ctx.inventory,
    )
