"""Cluster Inventory — tests for per-database, per-collection and per-server tallies."""

from builders import agency_dump, plan_collection
from clusterlint.core.inventory import build_inventory
from clusterlint.core.snapshot import load_snapshot


def _inventory():
    return build_inventory(load_snapshot(agency_dump(
        plan_collections={
            "zeta": {"1": plan_collection("1", "leader", {"s1": ["A", "B"], "s2": ["B", "A"]})},
            "alpha": {
                "2": plan_collection("2", "follower", {"s3": ["A", "B"]}, distributeShardsLike="1"),
                "3": plan_collection("3", "broken", "s4"),
            },
        },
        databases={"zeta": {}, "alpha": {}, "spare": {}},
    )))


def test_databases_sorted_and_limited_to_plan_databases():
    assert [d.name for d in _inventory().databases] == ["alpha", "spare", "zeta"]


def test_database_leader_follower_tallies():
    by_name = {d.name: d for d in _inventory().databases}
    zeta, alpha = by_name["zeta"], by_name["alpha"]
    assert (zeta.leaders, zeta.followers, zeta.real_leaders) == (2, 2, 2)
    assert (alpha.leaders, alpha.followers, alpha.real_leaders) == (1, 1, 0)
    assert alpha.collections == ["follower", "broken"]
    assert alpha.shards == ["s3"]


def test_server_tallies():
    servers = _inventory().servers
    assert (servers["A"].leaders, servers["A"].followers, servers["A"].real_leaders) == (2, 1, 1)
    assert (servers["B"].leaders, servers["B"].followers, servers["B"].real_leaders) == (1, 2, 1)


def test_collections_sorted_by_full_name():
    names = [c.full_name for c in _inventory().collections]
    assert names == ["alpha/broken", "alpha/follower", "zeta/leader"]
