"""Liveness Index — which nodes Supervision/Health reports as reachable.

Invariants:
    - A node is alive iff Health holds an entry for it with Status "GOOD"
    - Absent Health means nobody is alive: every placement reference is then dead
    - failed_endpoints only lists Status "FAILED" nodes, normalized to http(s)://

Design Decisions:
    - Built once per run and shared read-only by all analyzers
    - Status kept verbatim in `statuses` for the Primaries overview table
"""

from dataclasses import dataclass, field

from clusterlint.core.domain_types import HealthStatus
from clusterlint.core.snapshot import Snapshot

_SCHEME_REWRITES = (("ssl:", "https:"), ("tcp:", "http:"))


@dataclass(frozen=True)
class LivenessIndex:
    primaries: frozenset[str] = frozenset()
    failed_endpoints: tuple[str, ...] = ()
    statuses: dict[str, str | None] = field(default_factory=dict)

    def is_alive(self, node_id: str | None) -> bool:
        return node_id is not None and node_id in self.primaries


def normalize_endpoint(endpoint: str) -> str:
    """Rewrite agency endpoint schemes to URL schemes: ssl -> https, tcp -> http."""
    for old, new in _SCHEME_REWRITES:
        if endpoint.startswith(old):
            return new + endpoint[len(old):]
    return endpoint


def build_liveness_index(snapshot: Snapshot) -> LivenessIndex:
    health = snapshot.supervision.health
    primaries = frozenset(
        node for node, rec in health.items() if rec.status == HealthStatus.GOOD.value
    )
    failed = tuple(
        normalize_endpoint(rec.endpoint)
        for rec in health.values()
        if rec.status == HealthStatus.FAILED.value
    )
    statuses = {node: rec.status for node, rec in health.items()}
    return LivenessIndex(primaries=primaries, failed_endpoints=failed, statuses=statuses)
