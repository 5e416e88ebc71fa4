"""Collection Integrity — Plan collections that cannot be placed or whose placement is dead.

Invariants:
    - Collections of a database missing from Plan/Databases are reported once per database
      (noPlanDatabases) and not inspected further
    - A collection without a shard map is reported (noShardCollections) unless it is smart
      and the map is merely absent or empty; a malformed map is always reported
    - distributeShardsLike must name a collection of the same database (realLeaderMissing)
    - Each planned replica on a dead node yields one record: position 0 is
      leaderOnDeadServer, any other position followerOnDeadServer
    - One pass over Plan/Collections, findings in Plan order

Design Decisions:
    - A dangling distributeShardsLike does not stop the dead-server scan of that collection:
      its own shards still exist and can still sit on dead nodes
"""

from clusterlint.core.domain_types import FindingKind
from clusterlint.core.findings import (
    DeadServerPlacement,
    NoPlanDatabase,
    NoShardCollection,
    RealLeaderMissing,
    ZombieCollection,
)
from clusterlint.core.liveness import LivenessIndex
from clusterlint.core.snapshot import Snapshot


def check_collection_integrity(
    snapshot: Snapshot, liveness: LivenessIndex,
) -> dict[FindingKind, tuple]:
    no_plan_databases: list[NoPlanDatabase] = []
    no_shards: list[NoShardCollection] = []
    leader_missing: list[RealLeaderMissing] = []
    dead_leaders: list[DeadServerPlacement] = []
    dead_followers: list[DeadServerPlacement] = []

    for db, collections in snapshot.plan.collections.items():
        if db not in snapshot.plan.databases:
            no_plan_databases.append(NoPlanDatabase(db, tuple(collections)))
            continue
        for cid, col in collections.items():
            if col.shards_malformed or (not col.has_shards and not col.is_smart):
                no_shards.append(NoShardCollection(
                    db, cid, col.model_dump(by_alias=True), col.shards_malformed,
                ))
                continue
            like = col.distribute_shards_like
            if like is not None and like not in collections:
                leader_missing.append(RealLeaderMissing(db, cid, like))
            for shard, servers in col.shard_map.items():
                for position, server in enumerate(servers):
                    if liveness.is_alive(server):
                        continue
                    record = DeadServerPlacement(db, cid, shard, server, tuple(servers))
                    if position == 0:
                        dead_leaders.append(record)
                    else:
                        dead_followers.append(record)

    return {
        FindingKind.NO_PLAN_DATABASES: tuple(no_plan_databases),
        FindingKind.NO_SHARD_COLLECTIONS: tuple(no_shards),
        FindingKind.REAL_LEADER_MISSING: tuple(leader_missing),
        FindingKind.LEADER_ON_DEAD_SERVER: tuple(dead_leaders),
        FindingKind.FOLLOWER_ON_DEAD_SERVER: tuple(dead_followers),
    }


def find_zombie_collections(snapshot: Snapshot) -> tuple[ZombieCollection, ...]:
    """Collections still reported in Current whose Plan entry is gone."""
    zombies = []
    for db, collections in snapshot.current.collections.items():
        for cid, shards in collections.items():
            if snapshot.plan_collection(db, cid) is not None:
                continue
            data = {shard: entry.model_dump(by_alias=True) for shard, entry in shards.items()}
            zombies.append(ZombieCollection(db, cid, data))
    return tuple(zombies)
