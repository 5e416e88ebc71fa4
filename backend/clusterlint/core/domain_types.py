"""Domain Types — enums and constants shared by the analyzers, report and artifacts.

Invariants:
    - All finding collection names encoded as an Enum — no raw string matching
    - Reserved system collection names live here, nowhere else

Design Decisions:
    - str Enums: serialize to JSON without custom encoders (report and artifacts are JSON)
"""

from enum import Enum


# ─── Constants ───────────────────────────────────────────────────

SYSTEM_COLLECTION_PREFIX = "_"
REQUIRED_SYSTEM_COLLECTIONS: tuple[str, ...] = (
    "_apps", "_appbundles", "_aqlfunctions", "_graphs", "_jobs", "_queues",
)

EDGE_INDEX_TYPE = "edge"
EDGE_FROM_INDEX_ID = "1"
EDGE_TO_INDEX_ID = "2"

FAILOVER_CANDIDATES_PATH = "arango/Current/Collections/{db}/{cid}/{shard}/failoverCandidates"
PLAN_INDEXES_PATH = "/Plan/Collections/{db}/{cid}/indexes"


# ─── Enums ───────────────────────────────────────────────────────

class HealthStatus(str, Enum):
    """Supervision/Health Status values the analysis distinguishes."""
    GOOD = "GOOD"
    FAILED = "FAILED"


class FindingKind(str, Enum):
    """Every finding collection, in registry order. Values are the wire names."""
    ZOMBIE_COORDINATORS = "zombieCoordinators"
    ZOMBIES = "zombies"
    CLEANED_FAILOVER_CANDIDATES = "cleanedFailoverCandidates"
    NO_PLAN_DATABASES = "noPlanDatabases"
    NO_SHARD_COLLECTIONS = "noShardCollections"
    REAL_LEADER_MISSING = "realLeaderMissing"
    LEADER_ON_DEAD_SERVER = "leaderOnDeadServer"
    FOLLOWER_ON_DEAD_SERVER = "followerOnDeadServer"
    DEAD_PRIMARIES = "deadPrimaries"
    EMPTY_DATABASES = "emptyDatabases"
    MISSING_COLLECTIONS = "missingCollections"
    OUT_OF_SYNC_FOLLOWERS = "outOfSyncFollowers"
    VIOLATED_DIST_SHARD_LIKE = "violatedDistShardLike"
    UNPLANNED_LEADER = "unplannedLeader"
    NO_INSYNC_FOLLOWER = "noInsyncFollower"
    NO_INSYNC_AND_DEAD_LEADER = "noInsyncAndDeadLeader"
    BROKEN_EDGE_INDEXES = "brokenEdgeIndexes"
    ZOMBIE_CALLBACKS = "zombieCallbacks"


class RepairTarget(str, Enum):
    """Which cluster role a downstream repair task must be run against."""
    LEADER_AGENT = "leader AGENT"
    COORDINATOR = "COORDINATOR"
    NONE = "none"
