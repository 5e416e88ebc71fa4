"""Broken Edge Indexes — legacy compound edge index merged into a single record.

Invariants:
    - Broken iff an index has id "1", type "edge", name "edge" and more than one field
    - The repaired list replaces id "1" by two edge indexes ("1" on _from, "2" on _to),
      drops any existing id "2", and keeps every other index untouched and in place
    - Repair is a fixed point: the repaired list is never reported again
"""

from typing import Any

from clusterlint.core.domain_types import (
    EDGE_FROM_INDEX_ID,
    EDGE_INDEX_TYPE,
    EDGE_TO_INDEX_ID,
    PLAN_INDEXES_PATH,
)
from clusterlint.core.findings import BrokenEdgeIndex
from clusterlint.core.snapshot import Index, Snapshot


def _edge_index(index_id: str, field_name: str) -> dict[str, Any]:
    return {
        "id": index_id,
        "type": EDGE_INDEX_TYPE,
        "name": EDGE_INDEX_TYPE,
        "fields": [field_name],
        "unique": False,
        "sparse": False,
    }


def is_broken_edge_index(index: Index) -> bool:
    return (
        index.id == EDGE_FROM_INDEX_ID
        and index.type == EDGE_INDEX_TYPE
        and index.name == EDGE_INDEX_TYPE
        and len(index.fields) > 1
    )


def repair_edge_indexes(indexes: list[dict[str, Any]]) -> list[dict[str, Any]]:
    repaired = []
    for raw in indexes:
        index = Index.model_validate(raw)
        if index.id == EDGE_FROM_INDEX_ID:
            repaired.append(_edge_index(EDGE_FROM_INDEX_ID, "_from"))
            repaired.append(_edge_index(EDGE_TO_INDEX_ID, "_to"))
        elif index.id != EDGE_TO_INDEX_ID:
            repaired.append(raw)
    return repaired


def find_broken_edge_indexes(snapshot: Snapshot) -> tuple[BrokenEdgeIndex, ...]:
    findings = []
    for db, cid, col in snapshot.iter_plan_collections():
        if not col.indexes:
            continue
        if not any(is_broken_edge_index(i) for i in col.index_records()):
            continue
        findings.append(BrokenEdgeIndex(
            path=PLAN_INDEXES_PATH.format(db=db, cid=cid),
            bad=list(col.indexes),
            good=repair_edge_indexes(col.indexes),
        ))
    return tuple(findings)
