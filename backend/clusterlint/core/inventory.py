"""Cluster Inventory — aggregated per-database, per-collection and per-server view of Plan.

Invariants:
    - Databases listed are exactly Plan/Databases, sorted by name
    - A shard leader is position 0 of its planned server list, every other position is a follower
    - A "real leader" shard is a leader shard of a collection without distributeShardsLike
    - Never raises — collections without a shard map contribute zero shards

Design Decisions:
    - Pure summary over Plan, separate from analyzers: the Reporter's overview tables and the
      empty-database / missing-system-collection checks read the same numbers
"""

from dataclasses import dataclass, field
from typing import Any

from clusterlint.core.snapshot import PlanCollection, Snapshot


@dataclass
class DatabaseSummary:
    name: str
    data: Any = None
    collections: list[str] = field(default_factory=list)
    shards: list[str] = field(default_factory=list)
    leaders: int = 0
    followers: int = 0
    real_leaders: int = 0


@dataclass(frozen=True)
class CollectionSummary:
    full_name: str
    cid: str
    replication_factor: int | str | None
    distribute_shards_like: str | None
    number_of_shards: int | None
    type: int | None
    is_smart: bool


@dataclass
class ServerShards:
    leaders: int = 0
    followers: int = 0
    real_leaders: int = 0


@dataclass
class Inventory:
    databases: list[DatabaseSummary] = field(default_factory=list)
    collections: list[CollectionSummary] = field(default_factory=list)
    servers: dict[str, ServerShards] = field(default_factory=dict)


def build_inventory(snapshot: Snapshot) -> Inventory:
    """Summarize Plan into database, collection and server tallies. Pure, no IO."""
    inventory = Inventory()
    for db in sorted(snapshot.plan.databases):
        summary = DatabaseSummary(name=db, data=snapshot.plan.databases[db])
        for cid, col in snapshot.plan.collections.get(db, {}).items():
            _add_collection(inventory, summary, db, cid, col)
        inventory.databases.append(summary)
    inventory.collections.sort(key=lambda c: c.full_name)
    return inventory


def _add_collection(
    inventory: Inventory, summary: DatabaseSummary,
    db: str, cid: str, col: PlanCollection,
) -> None:
    name = col.name or cid
    summary.collections.append(name)
    inventory.collections.append(CollectionSummary(
        full_name=f"{db}/{name}",
        cid=cid,
        replication_factor=col.replication_factor,
        distribute_shards_like=col.distribute_shards_like,
        number_of_shards=col.number_of_shards,
        type=col.type,
        is_smart=col.is_smart,
    ))
    is_real_leader = col.distribute_shards_like is None
    for shard, servers in col.shard_map.items():
        summary.shards.append(shard)
        for position, server in enumerate(servers):
            tally = inventory.servers.setdefault(server, ServerShards())
            if position == 0:
                summary.leaders += 1
                tally.leaders += 1
                if is_real_leader:
                    summary.real_leaders += 1
                    tally.real_leaders += 1
            else:
                summary.followers += 1
                tally.followers += 1
