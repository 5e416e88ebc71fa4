"""Database Checks — dead primaries in Current, skeleton databases, missing system collections."""

from collections.abc import Iterable

from clusterlint.core.domain_types import REQUIRED_SYSTEM_COLLECTIONS, SYSTEM_COLLECTION_PREFIX
from clusterlint.core.findings import DeadPrimary, EmptyDatabase, MissingSystemCollections
from clusterlint.core.inventory import Inventory
from clusterlint.core.liveness import LivenessIndex
from clusterlint.core.snapshot import Snapshot


def find_dead_primaries(
    snapshot: Snapshot, liveness: LivenessIndex,
) -> tuple[DeadPrimary, ...]:
    """Servers that are not alive but still hold a reporting slot under Current/Databases."""
    return tuple(
        DeadPrimary(db, server, data)
        for db, servers in snapshot.current.databases.items()
        for server, data in servers.items()
        if not liveness.is_alive(server)
    )


def find_empty_databases(inventory: Inventory) -> tuple[EmptyDatabase, ...]:
    """Skeleton databases: planned, but with neither collections nor shards."""
    return tuple(
        EmptyDatabase(db.name, db.data)
        for db in inventory.databases
        if not db.collections and not db.shards
    )


def find_missing_system_collections(
    inventory: Inventory,
    required: Iterable[str] = REQUIRED_SYSTEM_COLLECTIONS,
    prefix: str = SYSTEM_COLLECTION_PREFIX,
) -> tuple[MissingSystemCollections, ...]:
    required = tuple(required)
    findings = []
    for db in inventory.databases:
        present = {name for name in db.collections if name.startswith(prefix)}
        missing = tuple(name for name in required if name not in present)
        if missing:
            findings.append(MissingSystemCollections(db.name, missing))
    return tuple(findings)
