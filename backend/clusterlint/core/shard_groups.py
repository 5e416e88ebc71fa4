"""Shard Groups — collections sharing physical placement through distributeShardsLike.

Invariants:
    - Group key ("search") is distributeShardsLike when set, else the collection's own id
    - The baseline member is the first member met in Plan order, stored explicitly
    - Each member's placements are sorted by natural shard order (s99 < s100), so position i
      of every member refers to the same physical slot
    - A placement's `current` is None when Current has no entry for the shard yet
    - Collections without a shard map belong to no group
"""

import re
from dataclasses import dataclass, field

from clusterlint.core.snapshot import Snapshot

_SHARD_NAME = re.compile(r"^(\D*)(\d+)$")


def shard_sort_key(name: str) -> tuple[str, int, str]:
    """Natural order for shard names: prefix, then numeric suffix."""
    match = _SHARD_NAME.match(name)
    if match is None:
        return (name, -1, name)
    return (match.group(1), int(match.group(2)), name)


@dataclass(frozen=True)
class ShardPlacement:
    shard: str
    planned: tuple[str, ...]
    current: tuple[str, ...] | None = None

    @property
    def planned_leader(self) -> str | None:
        return self.planned[0] if self.planned else None

    @property
    def current_leader(self) -> str | None:
        return self.current[0] if self.current else None


@dataclass
class ShardGroup:
    search: str
    database: str
    baseline: str
    members: dict[str, tuple[ShardPlacement, ...]] = field(default_factory=dict)

    def layout(self, cid: str) -> tuple[tuple[str, ...], ...]:
        """Planned server lists of one member, in shard order."""
        return tuple(p.planned for p in self.members.get(cid, ()))

    def to_dict(self) -> dict:
        """Wire shape consumed by the force-failover repair task."""
        return {
            "db": self.database,
            "plan": {
                cid: [{"shard": p.shard, "servers": list(p.planned)} for p in placements]
                for cid, placements in self.members.items()
            },
            "current": {
                cid: [{"shard": p.shard, "servers": list(p.current or ())} for p in placements]
                for cid, placements in self.members.items()
            },
        }


def build_shard_groups(snapshot: Snapshot) -> dict[str, ShardGroup]:
    groups: dict[str, ShardGroup] = {}
    for db, cid, col in snapshot.iter_plan_collections():
        if not col.has_shards:
            continue
        search = col.distribute_shards_like or cid
        group = groups.get(search)
        if group is None:
            group = groups[search] = ShardGroup(search=search, database=db, baseline=cid)
        placements = []
        for shard in sorted(col.shard_map, key=shard_sort_key):
            entry = snapshot.current_shard(db, cid, shard)
            placements.append(ShardPlacement(
                shard=shard,
                planned=tuple(col.shard_map[shard]),
                current=tuple(entry.servers) if entry is not None else None,
            ))
        group.members[cid] = tuple(placements)
    return groups
