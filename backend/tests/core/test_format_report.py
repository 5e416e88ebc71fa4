"""Report Formatting — tests for table layout, status lines and full report assembly.

Tests cover:
    - render_table box shape and JSON rendering of list cells
    - status_line OK/FAIL prefixes
    - Clean report: overview tables, one OK line per check, closing clean message
    - Infected report: FAIL line with table, risk table for out-of-sync followers
    - Overview can be switched off
"""

from builders import agency_dump, current_shards, health_of, plan_collection
from clusterlint.core.analyzer_registry import run_analysis
from clusterlint.core.format_report import (
    CHECK_VIEWS,
    CLEAN_MESSAGE,
    build_report,
    render_table,
    status_line,
)
from clusterlint.core.domain_types import FindingKind
from clusterlint.core.snapshot import load_snapshot


def test_render_table_shape():
    table = render_table("Zombies", ("Database", "CID"), [("db", "42")])
    assert table.splitlines() == [
        "." + "-" * 16 + ".",
        "|    Zombies     |",
        "|" + "-" * 16 + "|",
        "| Database | CID |",
        "|----------|-----|",
        "| db       | 42  |",
        "'" + "-" * 16 + "'",
    ]


def test_render_table_lists_as_json_and_none_as_blank():
    table = render_table("T", ("a", "b"), [(["A", "B"], None)])
    assert '["A", "B"]' in table
    assert table.splitlines()[5].endswith("|   |")


def test_render_table_widens_for_long_title():
    lines = render_table("A very long title", ("x",), [("1",)]).splitlines()
    assert len({len(line) for line in lines}) == 1


def test_status_line():
    assert status_line(True, "fine") == "[ OK ] fine"
    assert status_line(False, "broken") == "[FAIL] broken"


def test_every_kind_has_one_view():
    assert [v.kind for v in CHECK_VIEWS] == list(FindingKind)


def test_clean_report(healthy_dump):
    report = build_report(run_analysis(load_snapshot(healthy_dump)))
    assert not report.infected
    assert report.lines[-1] == status_line(True, CLEAN_MESSAGE)
    assert sum(line.startswith("[ OK ]") for line in report.lines) == len(CHECK_VIEWS) + 1
    assert not any(line.startswith("[FAIL]") for line in report.lines)
    for title in ("Primaries", "Databases", "Collections", "Primary Shards"):
        assert any(title in line for line in report.lines)


def test_infected_report_has_fail_table_and_risk_table():
    dump = agency_dump(
        plan_collections={"db": {"1": plan_collection("1", "c", {"s1": ["A", "B"]})}},
        current_collections={"db": {"1": current_shards({"s1": ["A"]})}},
        health=health_of("A", "B"),
    )
    report = build_report(run_analysis(load_snapshot(dump)), overview=False)
    text = report.text
    assert report.infected
    assert "[FAIL] Your cluster has collections where followers are out of sync" in text
    assert "Number of non-replicated shards per server" in text
    assert CLEAN_MESSAGE not in text
    assert "Primaries" not in text
