"""Coordinator & Callback Zombies — running things the plan no longer knows about.

Invariants:
    - Zombie coordinator: in Current/Coordinators, absent from Plan/Coordinators
    - Zombie callback: pending agency callback whose base URL is a FAILED node's endpoint
    - Output order follows source iteration order (Current/Coordinators, callback list)
"""

from clusterlint.core.findings import ZombieCallback, unique
from clusterlint.core.liveness import LivenessIndex
from clusterlint.core.snapshot import Snapshot


def find_zombie_coordinators(snapshot: Snapshot) -> tuple[str, ...]:
    planned = set(snapshot.plan.coordinators)
    return unique(c for c in snapshot.current.coordinators if c not in planned)


def callback_base_url(url: str) -> str:
    """Scheme and authority of a callback URL: text before the third '/'."""
    first = url.find("/")
    if first < 0:
        return url
    end = url.find("/", first + 2)
    return url if end < 0 else url[:end]


def find_zombie_callbacks(
    snapshot: Snapshot, liveness: LivenessIndex,
) -> tuple[ZombieCallback, ...]:
    if not liveness.failed_endpoints:
        return ()
    failed = set(liveness.failed_endpoints)
    zombies = []
    for callback in snapshot.callbacks:
        url, observer = next(iter(callback.items()))
        if callback_base_url(str(url)) in failed:
            zombies.append(ZombieCallback(url=str(url), observer=observer))
    return tuple(zombies)
