"""Replication Checks — out-of-sync followers and failover candidates naming cleaned servers.

Invariants:
    - A shard is out of sync iff its observed leader differs from the planned leader, or
      a planned follower is missing from observed positions >= 1
    - A single-replica shard whose leader matches is never out of sync
    - Shards with no Current entry are skipped, databases absent from Current too
    - A failoverCandidates list is patched iff it names a Target/CleanedServers node;
      the patch keeps the remaining candidates in their original order

Design Decisions:
    - Risk counts derive from the out-of-sync records, keyed by the server that currently
      leads the shard, so the report and the JSON output share one tally
"""

from collections.abc import Sequence

from clusterlint.core.domain_types import FAILOVER_CANDIDATES_PATH
from clusterlint.core.findings import CleanedFailoverPatch, OutOfSyncFollower
from clusterlint.core.snapshot import Snapshot


def followers_in_sync(planned: Sequence[str], current: Sequence[str]) -> bool:
    if not planned:
        return True
    if not current or planned[0] != current[0]:
        return False
    if len(planned) == 1:
        # No follower was ever requested
        return True
    followers = set(current[1:])
    return all(server in followers for server in planned[1:])


def find_out_of_sync_followers(snapshot: Snapshot) -> tuple[OutOfSyncFollower, ...]:
    findings = []
    for db, cid, col in snapshot.iter_plan_collections():
        if db not in snapshot.current.collections:
            continue
        for shard, planned in col.shard_map.items():
            entry = snapshot.current_shard(db, cid, shard)
            if entry is None:
                continue
            if not followers_in_sync(planned, entry.servers):
                findings.append(OutOfSyncFollower(
                    db, cid, shard, tuple(planned), tuple(entry.servers),
                ))
    return tuple(findings)


def count_risk_per_server(findings: Sequence[OutOfSyncFollower]) -> dict[str, int]:
    """Number of under-replicated shards per leading server, first-seen order."""
    counts: dict[str, int] = {}
    for record in findings:
        server = record.risk_server
        counts[server] = counts.get(server, 0) + 1
    return counts


def find_cleaned_failover_candidates(snapshot: Snapshot) -> tuple[CleanedFailoverPatch, ...]:
    cleaned = set(snapshot.target.cleaned_servers)
    if not cleaned:
        return ()
    patches = []
    for db, cid, shard, entry in snapshot.iter_current_shards():
        candidates = entry.failover_candidates or []
        if not cleaned.intersection(candidates):
            continue
        patches.append(CleanedFailoverPatch(
            path=FAILOVER_CANDIDATES_PATH.format(db=db, cid=cid, shard=shard),
            corrected=tuple(c for c in candidates if c not in cleaned),
            original=tuple(candidates),
        ))
    return tuple(patches)
