"""Report Formatting — pure rendering of analysis results into text lines.

Invariants:
    - All functions are pure: they return strings, printing happens in services/reporter.py
    - No module-level mutable state; CHECK_VIEWS is an immutable tuple
    - Every FindingKind has exactly one CheckView and one pass/fail status line per report
    - Overview tables never influence the infected flag

Design Decisions:
    - Table layout mirrors the classic ascii-table shape (title box, heading, rule, rows)
      so reports diff cleanly against older runs
    - Sequence cells are rendered as compact JSON, the same form artifacts use
"""

import json
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

from clusterlint.core.analyze_replication import count_risk_per_server
from clusterlint.core.analyzer_registry import AnalysisResult
from clusterlint.core.domain_types import FindingKind
from clusterlint.core.inventory import Inventory
from clusterlint.core.liveness import LivenessIndex

CLEAN_MESSAGE = "Did not detect any issues in your cluster"


@dataclass(frozen=True)
class CheckView:
    kind: FindingKind
    good: str
    bad: str
    title: str
    heading: tuple[str, ...]
    row: Callable[[Any], tuple]


@dataclass
class Report:
    lines: list[str] = field(default_factory=list)
    infected: bool = False

    @property
    def text(self) -> str:
        return "\n".join(self.lines)


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return json.dumps(list(value))
    if isinstance(value, bool):
        return str(value).lower()
    return str(value)


def render_table(title: str, heading: Sequence[str], rows: Sequence[Sequence[Any]]) -> str:
    cells = [[_cell(v) for v in row] for row in rows]
    widths = [
        max([len(h)] + [len(r[i]) for r in cells if i < len(r)])
        for i, h in enumerate(heading)
    ]
    inner = sum(widths) + 3 * len(widths) - 1
    if len(title) + 2 > inner:
        widths[-1] += len(title) + 2 - inner
        inner = len(title) + 2

    def line(values: Sequence[str]) -> str:
        padded = [v.ljust(w) for v, w in zip(values, widths)]
        return "| " + " | ".join(padded) + " |"

    out = [
        "." + "-" * inner + ".",
        "|" + title.center(inner) + "|",
        "|" + "-" * inner + "|",
        line(list(heading)),
        "|" + "|".join("-" * (w + 2) for w in widths) + "|",
    ]
    out.extend(line(row + [""] * (len(widths) - len(row))) for row in cells)
    out.append("'" + "-" * inner + "'")
    return "\n".join(out)


def status_line(passed: bool, message: str) -> str:
    return f"[ OK ] {message}" if passed else f"[FAIL] {message}"


# ─── Per-check presentation ──────────────────────────────────────

def _dead_server_row(r) -> tuple:
    return (r.database, r.cid, r.shard, r.server, r.servers)


def _shard_ref_row(r) -> tuple:
    return (r.cid, r.shard, r.search)


CHECK_VIEWS: tuple[CheckView, ...] = (
    CheckView(
        FindingKind.ZOMBIE_COORDINATORS,
        "Your cluster does not have any zombie coordinators",
        "Your cluster has zombie coordinators",
        "Zombie coordinators", ("Coordinator",), lambda c: (c,),
    ),
    CheckView(
        FindingKind.ZOMBIES,
        "Your cluster does not have any zombies",
        "Your cluster has some zombies",
        "Zombies", ("Database", "CID"), lambda r: (r.database, r.cid),
    ),
    CheckView(
        FindingKind.CLEANED_FAILOVER_CANDIDATES,
        "Your cluster does not have any cleaned servers for failover",
        "Your cluster has cleaned servers scheduled for failover",
        "Cleaned servers in failover candidates", ("Path", "Candidates", "Corrected"),
        lambda r: (r.path, r.original, r.corrected),
    ),
    CheckView(
        FindingKind.NO_PLAN_DATABASES,
        "Your cluster does not have any leftover collections from deleted databases",
        "Your cluster has some leftover collections from deleted databases",
        "Deleted databases with leftover collections", ("Database", "Collections"),
        lambda r: (r.database, len(r.collections)),
    ),
    CheckView(
        FindingKind.NO_SHARD_COLLECTIONS,
        "Your cluster does not have any collections without shards",
        "Your cluster has some collections without shards",
        "Collections without shards", ("Database", "CID"), lambda r: (r.database, r.cid),
    ),
    CheckView(
        FindingKind.REAL_LEADER_MISSING,
        "Your cluster does not miss any collections used as leaders in distributeShardsLike",
        "Your cluster misses some collection(s) used as leaders in distributeShardsLike",
        "Real leader missing for collection", ("Database", "CID", "LeaderCID"),
        lambda r: (r.database, r.cid, r.distribute_shards_like),
    ),
    CheckView(
        FindingKind.LEADER_ON_DEAD_SERVER,
        "Your cluster does not have any leaders placed on failed DBServers",
        "Your cluster has leaders placed on failed DBServers",
        "Leader on failed DBServer",
        ("Database", "CID", "Shard", "Failed DBServer", "All Servers"), _dead_server_row,
    ),
    CheckView(
        FindingKind.FOLLOWER_ON_DEAD_SERVER,
        "Your cluster does not have any followers placed on failed DBServers",
        "Your cluster has followers placed on failed DBServers",
        "Follower on failed DBServer",
        ("Database", "CID", "Shard", "Failed DBServer", "All Servers"), _dead_server_row,
    ),
    CheckView(
        FindingKind.DEAD_PRIMARIES,
        "Your cluster does not have any dead primaries in Current",
        "Your cluster has dead primaries in Current",
        "Dead primaries in Current", ("Database", "Primary"),
        lambda r: (r.database, r.primary),
    ),
    CheckView(
        FindingKind.EMPTY_DATABASES,
        "Your cluster does not have any skeleton databases (databases without collections)",
        "Your cluster has some skeleton databases (databases without collections)",
        "Skeletons", ("Database name",), lambda r: (r.database,),
    ),
    CheckView(
        FindingKind.MISSING_COLLECTIONS,
        "Your cluster is not missing relevant system collections",
        "Your cluster is missing relevant system collections",
        "Missing collections", ("Database", "Collections"),
        lambda r: (r.database, ", ".join(r.missing)),
    ),
    CheckView(
        FindingKind.OUT_OF_SYNC_FOLLOWERS,
        "Your cluster does not have collections where followers are out of sync",
        "Your cluster has collections where followers are out of sync",
        "Out of sync followers", ("Database", "CID", "Shard", "Planned", "Real"),
        lambda r: (r.database, r.cid, r.shard, r.planned, r.current),
    ),
    CheckView(
        FindingKind.VIOLATED_DIST_SHARD_LIKE,
        "Your cluster does not have distributeShardsLike groups with diverging shard layouts",
        "Your cluster has distributeShardsLike groups with diverging shard layouts",
        "Violated distributeShardsLike", ("DistributeLike",), lambda s: (s,),
    ),
    CheckView(
        FindingKind.UNPLANNED_LEADER,
        "Your cluster does not have any shards led by an unplanned server",
        "Your cluster has shards led by an unplanned server",
        "Unplanned leaders", ("CID", "Shard", "DistributeLike"), _shard_ref_row,
    ),
    CheckView(
        FindingKind.NO_INSYNC_FOLLOWER,
        "Your cluster does not have any shards without insync follower",
        "Your cluster has shards without insync follower",
        "Shards without insync follower", ("CID", "Shard", "DistributeLike"), _shard_ref_row,
    ),
    CheckView(
        FindingKind.NO_INSYNC_AND_DEAD_LEADER,
        "Your cluster does not have any collections with dead leader and no insync follower",
        "Your cluster has collections with dead leader and no insync follower",
        "Collections with deadLeader and no-insync Follower",
        ("CID", "Shard", "DistributeLike"), _shard_ref_row,
    ),
    CheckView(
        FindingKind.BROKEN_EDGE_INDEXES,
        "Your cluster does not have broken edge indexes",
        "Your cluster has broken edge indexes",
        "Broken edge indexes", ("Path",), lambda r: (r.path,),
    ),
    CheckView(
        FindingKind.ZOMBIE_CALLBACKS,
        "Your cluster does not have callbacks registered on failed servers",
        "Your cluster has callbacks registered on failed servers",
        "Zombie callbacks", ("Callback URL",), lambda r: (r.url,),
    ),
)


# ─── Overview tables ─────────────────────────────────────────────

def render_overview(inventory: Inventory, liveness: LivenessIndex) -> list[str]:
    return [
        render_table(
            "Primaries", ("", "status"),
            [(node, status) for node, status in liveness.statuses.items()],
        ),
        "",
        render_table(
            "Databases",
            ("", "collections", "shards", "leaders", "followers", "Real-Leaders"),
            [
                (d.name, len(d.collections), len(d.shards), d.leaders, d.followers, d.real_leaders)
                for d in inventory.databases
            ],
        ),
        "",
        render_table(
            "Collections", ("", "CID", "RF", "Shards Like", "Shards", "Type", "Smart"),
            [
                (c.full_name, c.cid, c.replication_factor, c.distribute_shards_like,
                 c.number_of_shards, c.type, c.is_smart)
                for c in inventory.collections
            ],
        ),
        "",
        render_table(
            "Primary Shards", ("", "Leaders", "Followers", "Real Leaders"),
            [
                (server, s.leaders, s.followers, s.real_leaders)
                for server, s in inventory.servers.items()
            ],
        ),
        "",
    ]


def render_check(view: CheckView, records: tuple) -> list[str]:
    if not records:
        return [status_line(True, view.good)]
    lines = [status_line(False, view.bad), render_table(
        view.title, view.heading, [view.row(r) for r in records],
    )]
    if view.kind == FindingKind.OUT_OF_SYNC_FOLLOWERS:
        lines.append(render_table(
            "Number of non-replicated shards per server", ("Server", "Number"),
            list(count_risk_per_server(records).items()),
        ))
    return lines


def build_report(result: AnalysisResult, *, overview: bool = True) -> Report:
    """Render overview tables and one status line (plus table on failure) per check."""
    report = Report(infected=result.infected)
    if overview:
        report.lines.extend(render_overview(result.inventory, result.liveness))
    for view in CHECK_VIEWS:
        report.lines.extend(render_check(view, result.findings[view.kind]))
    report.lines.append("")
    if not report.infected:
        report.lines.append(status_line(True, CLEAN_MESSAGE))
    return report
