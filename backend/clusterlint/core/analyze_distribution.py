"""Distribution Groups — layout drift, unplanned leaders, and shards without a safe failover.

Invariants:
    - violatedDistShardLike: a member's planned layout differs from the group baseline's,
      position by position (a different shard count is a difference too)
    - unplannedLeader: observed leader != planned leader
    - noInsyncFollower: planned replication factor > 1 but at most one server observed
    - noInsyncAndDeadLeader: noInsyncFollower whose observed leader is not alive
    - Shards without a Current entry skip every per-shard check
    - {cid, shard, search} records are de-duplicated by value, first-seen order

Design Decisions:
    - Failover ranking only looks at co-located sibling shards: a live planned replica that
      is in sync for more siblings has likely absorbed more of the group's writes
    - Ties keep planned-list order (stable sort), so the planned follower order breaks them
"""

from clusterlint.core.domain_types import FindingKind
from clusterlint.core.findings import (
    FailoverCandidate,
    FailoverRecommendation,
    ShardRef,
    unique,
)
from clusterlint.core.liveness import LivenessIndex
from clusterlint.core.shard_groups import ShardGroup, ShardPlacement, build_shard_groups
from clusterlint.core.snapshot import PlanCollection, Snapshot


def analyze_distribution_groups(
    snapshot: Snapshot, liveness: LivenessIndex,
) -> dict[FindingKind, tuple]:
    groups = build_shard_groups(snapshot)
    violated: list[str] = []
    unplanned: list[ShardRef] = []
    no_insync: list[ShardRef] = []
    dead_leader: list[ShardRef] = []

    for _, cid, col in snapshot.iter_plan_collections():
        if not col.has_shards:
            continue
        group = groups[col.distribute_shards_like or cid]
        if cid != group.baseline and group.layout(cid) != group.layout(group.baseline):
            violated.append(group.search)
        for placement in group.members[cid]:
            if placement.current is None:
                continue
            ref = ShardRef(cid, placement.shard, group.search)
            if placement.current_leader != placement.planned_leader:
                unplanned.append(ref)
            if _replicated(col, placement) and len(placement.current) <= 1:
                no_insync.append(ref)
                if not liveness.is_alive(placement.current_leader):
                    dead_leader.append(ref)

    return {
        FindingKind.VIOLATED_DIST_SHARD_LIKE: unique(violated),
        FindingKind.UNPLANNED_LEADER: unique(unplanned),
        FindingKind.NO_INSYNC_FOLLOWER: unique(no_insync),
        FindingKind.NO_INSYNC_AND_DEAD_LEADER: tuple(
            rank_failover_candidates(groups[ref.search], ref, liveness)
            for ref in unique(dead_leader)
        ),
    }


def _replicated(col: PlanCollection, placement: ShardPlacement) -> bool:
    """Integer replicationFactor decides; otherwise (satellite, absent) the planned list length."""
    factor = col.planned_replication_factor
    if factor is not None:
        return factor > 1
    return len(placement.planned) > 1


def rank_failover_candidates(
    group: ShardGroup, ref: ShardRef, liveness: LivenessIndex,
) -> FailoverRecommendation:
    """Rank the live planned replicas of `ref` by how many sibling shards they hold in sync."""
    placements = group.members[ref.cid]
    index = next(i for i, p in enumerate(placements) if p.shard == ref.shard)
    candidates = unique(s for s in placements[index].planned if liveness.is_alive(s))
    insync: dict[str, list[str]] = {c: [] for c in candidates}
    siblings: list[str] = []

    for cid, member in group.members.items():
        if cid == ref.cid or index >= len(member):
            continue
        sibling = member[index]
        siblings.append(sibling.shard)
        observed = sibling.current or ()
        for candidate in candidates:
            if candidate in observed:
                insync[candidate].append(sibling.shard)

    ranked = sorted(candidates, key=lambda c: len(insync[c]), reverse=True)
    return FailoverRecommendation(
        cid=ref.cid,
        shard=ref.shard,
        search=ref.search,
        shard_index=index,
        candidates=tuple(
            FailoverCandidate(
                server=c,
                insync=tuple(insync[c]),
                missing=tuple(s for s in siblings if s not in insync[c]),
            )
            for c in ranked
        ),
        group=group,
    )
