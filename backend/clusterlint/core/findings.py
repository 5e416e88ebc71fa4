"""Findings — typed records produced by analyzers and the aggregate holding them.

Invariants:
    - Records are frozen dataclasses with value equality: created once, never mutated
    - Every collection is an ordered tuple; order is the analyzer's traversal order
    - to_dict() of each record is JSON-safe (no sets, no tuples, no Enums)
    - Findings.infected is True iff at least one collection is non-empty

Design Decisions:
    - One record type per finding shape, not per finding kind: leader and follower
      placements on dead servers share DeadServerPlacement
    - unique() de-duplicates by value while keeping first-seen order, so identical
      {cid, shard, search} tuples are reported once
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from clusterlint.core.domain_types import FindingKind
from clusterlint.core.shard_groups import ShardGroup


def unique(items: Iterable) -> tuple:
    """Order-preserving de-duplication by value."""
    return tuple(dict.fromkeys(items))


# ─── Collection integrity ────────────────────────────────────────

@dataclass(frozen=True)
class NoPlanDatabase:
    database: str
    collections: tuple[str, ...]

    def to_dict(self) -> dict:
        return {"database": self.database, "collections": list(self.collections)}


@dataclass(frozen=True)
class NoShardCollection:
    database: str
    cid: str
    collection: dict = field(compare=False)
    malformed: bool = False

    def to_dict(self) -> dict:
        return {
            "database": self.database, "cid": self.cid,
            "malformed": self.malformed, "collection": self.collection,
        }


@dataclass(frozen=True)
class RealLeaderMissing:
    database: str
    cid: str
    distribute_shards_like: str

    def to_dict(self) -> dict:
        return {
            "database": self.database, "cid": self.cid,
            "distributeShardsLike": self.distribute_shards_like,
        }


@dataclass(frozen=True)
class DeadServerPlacement:
    """A planned shard replica (leader at position 0) sitting on a dead node."""
    database: str
    cid: str
    shard: str
    server: str
    servers: tuple[str, ...]

    def to_dict(self) -> dict:
        return {
            "database": self.database, "cid": self.cid, "shard": self.shard,
            "server": self.server, "servers": list(self.servers),
        }


# ─── Bookkeeping leftovers ───────────────────────────────────────

@dataclass(frozen=True)
class ZombieCollection:
    database: str
    cid: str
    data: dict = field(compare=False)

    def to_dict(self) -> dict:
        return {"database": self.database, "cid": self.cid, "data": self.data}


@dataclass(frozen=True)
class DeadPrimary:
    database: str
    primary: str
    data: Any = field(compare=False)

    def to_dict(self) -> dict:
        return {"database": self.database, "primary": self.primary, "data": self.data}


@dataclass(frozen=True)
class EmptyDatabase:
    database: str
    data: Any = field(compare=False)

    def to_dict(self) -> dict:
        return {"database": self.database, "data": self.data}


@dataclass(frozen=True)
class MissingSystemCollections:
    database: str
    missing: tuple[str, ...]

    def to_dict(self) -> dict:
        return {"database": self.database, "missing": list(self.missing)}


@dataclass(frozen=True)
class ZombieCallback:
    url: str
    observer: Any = field(compare=False)

    def to_dict(self) -> dict:
        return {self.url: self.observer}


# ─── Replication ─────────────────────────────────────────────────

@dataclass(frozen=True)
class OutOfSyncFollower:
    database: str
    cid: str
    shard: str
    planned: tuple[str, ...]
    current: tuple[str, ...]

    @property
    def risk_server(self) -> str:
        """Server carrying the under-replicated shard: observed leader, else planned."""
        return self.current[0] if self.current else self.planned[0]

    def to_dict(self) -> dict:
        return {
            "database": self.database, "cid": self.cid, "shard": self.shard,
            "planned": list(self.planned), "current": list(self.current),
        }


@dataclass(frozen=True)
class CleanedFailoverPatch:
    """Point update for one failoverCandidates list still naming cleaned servers."""
    path: str
    corrected: tuple[str, ...]
    original: tuple[str, ...]

    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "value": [list(self.corrected), list(self.original)],
        }


@dataclass(frozen=True)
class ShardRef:
    cid: str
    shard: str
    search: str

    def to_dict(self) -> dict:
        return {"cid": self.cid, "shard": self.shard, "search": self.search}


@dataclass(frozen=True)
class FailoverCandidate:
    server: str
    insync: tuple[str, ...]
    missing: tuple[str, ...]

    def to_dict(self) -> dict:
        return {
            "server": self.server,
            "insync": list(self.insync),
            "missing": list(self.missing),
        }


@dataclass(frozen=True)
class FailoverRecommendation:
    """A shard with a dead leader and no in-sync follower, plus ranked live candidates."""
    cid: str
    shard: str
    search: str
    shard_index: int
    candidates: tuple[FailoverCandidate, ...]
    group: ShardGroup = field(compare=False, repr=False)

    def to_dict(self) -> dict:
        return {
            "cid": self.cid, "shard": self.shard, "search": self.search,
            "shardIndex": self.shard_index,
            "candidates": [c.to_dict() for c in self.candidates],
        }


# ─── Indexes ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class BrokenEdgeIndex:
    path: str
    bad: list = field(compare=False)
    good: list = field(compare=False)

    def to_dict(self) -> dict:
        return {"path": self.path, "bad": self.bad, "good": self.good}


# ─── Aggregate ───────────────────────────────────────────────────

@dataclass(frozen=True)
class Findings:
    """All finding collections of one run, keyed and ordered by FindingKind."""
    by_kind: Mapping[FindingKind, tuple] = field(default_factory=dict)

    def __getitem__(self, kind: FindingKind) -> tuple:
        return self.by_kind.get(kind, ())

    def collections(self) -> dict[FindingKind, tuple]:
        return {kind: self[kind] for kind in FindingKind}

    @property
    def infected(self) -> bool:
        return any(self[kind] for kind in FindingKind)

    def counts(self) -> dict[str, int]:
        return {kind.value: len(records) for kind, records in self.collections().items()}

    def to_jsonable(self) -> dict[str, list]:
        return {
            kind.value: [to_jsonable(record) for record in records]
            for kind, records in self.collections().items()
        }


def to_jsonable(record: Any) -> Any:
    if hasattr(record, "to_dict"):
        return record.to_dict()
    return record
