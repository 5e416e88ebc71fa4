"""Snapshot Model — typed, read-only view of an agency dump (Plan, Current, Supervision, Target).

Invariants:
    - Every section is optional: an absent or malformed section becomes an empty section
    - Lookups for absent keys return None or empty collections, never raise
    - `shards` that is not a mapping of shard -> server list is flagged `shards_malformed`
    - Models are frozen: analyzers only read

Design Decisions:
    - pydantic models with aliases: the agency's camelCase keys map to snake_case attributes
    - extra="allow": unknown agency keys survive into model_dump() for remediation payloads
    - Sections validated one by one so a broken Current never hides a healthy Plan
    - Plan index lists kept as raw dicts: repairs must preserve unrelated indexes byte-for-byte,
      Index gives the typed view
"""

import logging
from collections.abc import Iterator
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from clusterlint.core.errors import ErrorContext, SnapshotFormatError

logger = logging.getLogger(__name__)

_MODEL_CONFIG = ConfigDict(populate_by_name=True, extra="allow", frozen=True)


def _mapping(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def _id_list(value: Any) -> list[str]:
    """Coordinator / server id lists arrive as lists or as id-keyed mappings."""
    if isinstance(value, dict):
        return [str(k) for k in value]
    if isinstance(value, list):
        return [str(v) for v in value if v is not None]
    return []


def _int_or_none(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.isdigit():
        return int(value)
    return None


def _is_shard_map(value: Any) -> bool:
    return isinstance(value, dict) and all(isinstance(v, list) for v in value.values())


# ─── Plan ────────────────────────────────────────────────────────

class Index(BaseModel):
    """Typed view of one Plan index record; ill-typed fields fall back to defaults."""
    model_config = _MODEL_CONFIG

    id: str | None = None
    type: str | None = None
    name: str | None = None
    fields: list[str] = []
    unique: bool = False
    sparse: bool = False

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, v: Any) -> str | None:
        return None if v is None else str(v)

    @field_validator("type", "name", mode="before")
    @classmethod
    def string_or_none(cls, v: Any) -> str | None:
        return v if isinstance(v, str) else None

    @field_validator("unique", "sparse", mode="before")
    @classmethod
    def coerce_flag(cls, v: Any) -> bool:
        return v is True

    @field_validator("fields", mode="before")
    @classmethod
    def flatten_fields(cls, v: Any) -> list[str]:
        if not isinstance(v, list):
            return []
        return [".".join(map(str, f)) if isinstance(f, list) else str(f) for f in v]


class PlanCollection(BaseModel):
    """One collection entry under Plan/Collections/<db>/<cid>."""
    model_config = _MODEL_CONFIG

    id: str | None = None
    name: str | None = None
    replication_factor: int | str | None = Field(None, alias="replicationFactor")
    number_of_shards: int | None = Field(None, alias="numberOfShards")
    type: int | None = None
    is_smart: bool = Field(False, alias="isSmart")
    distribute_shards_like: str | None = Field(None, alias="distributeShardsLike")
    shards: dict[str, list[str]] | None = None
    shards_malformed: bool = Field(False, exclude=True)
    indexes: list[dict[str, Any]] = []

    @model_validator(mode="before")
    @classmethod
    def flag_malformed_shards(cls, data: Any) -> Any:
        if isinstance(data, dict):
            shards = data.get("shards")
            if shards is not None and not _is_shard_map(shards):
                data = {**data, "shards": None, "shards_malformed": True}
        return data

    @field_validator("id", "name", mode="before")
    @classmethod
    def stringify(cls, v: Any) -> str | None:
        return None if v is None else str(v)

    @field_validator("replication_factor", mode="before")
    @classmethod
    def coerce_replication_factor(cls, v: Any) -> int | str | None:
        as_int = _int_or_none(v)
        if as_int is not None:
            return as_int
        return v if isinstance(v, str) else None

    @field_validator("number_of_shards", "type", mode="before")
    @classmethod
    def coerce_int(cls, v: Any) -> int | None:
        return _int_or_none(v)

    @field_validator("is_smart", mode="before")
    @classmethod
    def coerce_bool(cls, v: Any) -> bool:
        return bool(v)

    @field_validator("distribute_shards_like", mode="before")
    @classmethod
    def empty_pointer_is_none(cls, v: Any) -> str | None:
        return str(v) if v not in (None, "") else None

    @field_validator("shards", mode="before")
    @classmethod
    def stringify_servers(cls, v: Any) -> Any:
        if _is_shard_map(v):
            return {str(s): [str(n) for n in servers] for s, servers in v.items()}
        return v

    @field_validator("indexes", mode="before")
    @classmethod
    def index_list(cls, v: Any) -> list[dict[str, Any]]:
        if isinstance(v, dict):
            v = list(v.values())
        if not isinstance(v, list):
            return []
        return [i for i in v if isinstance(i, dict)]

    @property
    def shard_map(self) -> dict[str, list[str]]:
        return self.shards or {}

    @property
    def has_shards(self) -> bool:
        return bool(self.shards)

    @property
    def planned_replication_factor(self) -> int | None:
        """Integer replication factor, None for "satellite" or unknown."""
        return self.replication_factor if isinstance(self.replication_factor, int) else None

    def index_records(self) -> list[Index]:
        return [Index.model_validate(i) for i in self.indexes]


class PlanSection(BaseModel):
    model_config = _MODEL_CONFIG

    databases: dict[str, Any] = Field(default_factory=dict, alias="Databases")
    collections: dict[str, dict[str, PlanCollection]] = Field(
        default_factory=dict, alias="Collections",
    )
    coordinators: list[str] = Field(default_factory=list, alias="Coordinators")

    @field_validator("databases", mode="before")
    @classmethod
    def database_map(cls, v: Any) -> dict:
        return _mapping(v)

    @field_validator("collections", mode="before")
    @classmethod
    def collection_map(cls, v: Any) -> dict:
        return {
            db: {cid: col for cid, col in _mapping(cols).items() if isinstance(col, dict)}
            for db, cols in _mapping(v).items()
        }

    @field_validator("coordinators", mode="before")
    @classmethod
    def coordinator_ids(cls, v: Any) -> list[str]:
        return _id_list(v)


# ─── Current ─────────────────────────────────────────────────────

class CurrentShard(BaseModel):
    """One shard entry under Current/Collections/<db>/<cid>/<shard>."""
    model_config = _MODEL_CONFIG

    servers: list[str] = []
    failover_candidates: list[str] | None = Field(None, alias="failoverCandidates")

    @field_validator("servers", mode="before")
    @classmethod
    def server_ids(cls, v: Any) -> list[str]:
        return _id_list(v) if isinstance(v, list) else []

    @field_validator("failover_candidates", mode="before")
    @classmethod
    def candidate_ids(cls, v: Any) -> list[str] | None:
        return _id_list(v) if isinstance(v, list) else None

    @property
    def leader(self) -> str | None:
        return self.servers[0] if self.servers else None


class CurrentSection(BaseModel):
    model_config = _MODEL_CONFIG

    databases: dict[str, dict[str, Any]] = Field(default_factory=dict, alias="Databases")
    collections: dict[str, dict[str, dict[str, CurrentShard]]] = Field(
        default_factory=dict, alias="Collections",
    )
    coordinators: list[str] = Field(default_factory=list, alias="Coordinators")

    @field_validator("databases", mode="before")
    @classmethod
    def database_map(cls, v: Any) -> dict:
        return {db: _mapping(servers) for db, servers in _mapping(v).items()}

    @field_validator("collections", mode="before")
    @classmethod
    def collection_map(cls, v: Any) -> dict:
        return {
            db: {
                cid: {
                    shard: entry
                    for shard, entry in _mapping(shards).items()
                    if isinstance(entry, dict)
                }
                for cid, shards in _mapping(cols).items()
            }
            for db, cols in _mapping(v).items()
        }

    @field_validator("coordinators", mode="before")
    @classmethod
    def coordinator_ids(cls, v: Any) -> list[str]:
        return _id_list(v)


# ─── Supervision / Target ────────────────────────────────────────

class HealthRecord(BaseModel):
    model_config = _MODEL_CONFIG

    status: str | None = Field(None, alias="Status")
    endpoint: str = Field("", alias="Endpoint")

    @field_validator("status", mode="before")
    @classmethod
    def status_text(cls, v: Any) -> str | None:
        return None if v is None else str(v)

    @field_validator("endpoint", mode="before")
    @classmethod
    def endpoint_text(cls, v: Any) -> str:
        return v if isinstance(v, str) else ""


class SupervisionSection(BaseModel):
    model_config = _MODEL_CONFIG

    health: dict[str, HealthRecord] = Field(default_factory=dict, alias="Health")

    @field_validator("health", mode="before")
    @classmethod
    def health_map(cls, v: Any) -> dict:
        return {node: rec for node, rec in _mapping(v).items() if isinstance(rec, dict)}


class TargetSection(BaseModel):
    model_config = _MODEL_CONFIG

    cleaned_servers: list[str] = Field(default_factory=list, alias="CleanedServers")

    @field_validator("cleaned_servers", mode="before")
    @classmethod
    def server_ids(cls, v: Any) -> list[str]:
        return _id_list(v)


# ─── Snapshot ────────────────────────────────────────────────────

class Snapshot(BaseModel):
    """Point-in-time cluster state. Read-only; supplied by load_snapshot()."""
    model_config = ConfigDict(frozen=True)

    plan: PlanSection = PlanSection()
    current: CurrentSection = CurrentSection()
    supervision: SupervisionSection = SupervisionSection()
    target: TargetSection = TargetSection()
    callbacks: list[dict[str, Any]] = []

    def plan_collection(self, db: str, cid: str) -> PlanCollection | None:
        return self.plan.collections.get(db, {}).get(cid)

    def current_shard(self, db: str, cid: str, shard: str) -> CurrentShard | None:
        return self.current.collections.get(db, {}).get(cid, {}).get(shard)

    def iter_plan_collections(self) -> Iterator[tuple[str, str, PlanCollection]]:
        for db, collections in self.plan.collections.items():
            for cid, col in collections.items():
                yield db, cid, col

    def iter_current_shards(self) -> Iterator[tuple[str, str, str, CurrentShard]]:
        for db, collections in self.current.collections.items():
            for cid, shards in collections.items():
                for shard, entry in shards.items():
                    yield db, cid, shard, entry


_SECTIONS: tuple[tuple[str, str, type[BaseModel]], ...] = (
    ("plan", "Plan", PlanSection),
    ("current", "Current", CurrentSection),
    ("supervision", "Supervision", SupervisionSection),
    ("target", "Target", TargetSection),
)


def load_snapshot(payload: Any, stores: Any = None) -> Snapshot:
    """Build a Snapshot from a parsed agency dump.

    Accepts `{"arango": tree}`, a bare tree, `[dump]`, `[dump, stores]` or an
    agency stores object (`{"read_db": [tree, ttl, callbacks, ...]}`). An explicit
    `stores` argument wins over one found in the payload.
    """
    dump, found_stores = _unwrap(payload)
    tree = dump.get("arango", dump)
    if not isinstance(tree, dict):
        raise SnapshotFormatError(
            "Agency dump key 'arango' does not hold a mapping",
            ErrorContext(section="arango"),
        )
    sections = {
        attr: _parse_section(model, tree.get(key), key)
        for attr, key, model in _SECTIONS
    }
    callbacks = _extract_callbacks(stores if stores is not None else found_stores)
    return Snapshot(**sections, callbacks=callbacks)


def _unwrap(payload: Any) -> tuple[dict, Any]:
    if isinstance(payload, list):
        if not payload:
            raise SnapshotFormatError("Snapshot list is empty")
        if len(payload) == 2 and _is_stores(payload[1]):
            dump, _ = _unwrap(payload[0])
            return dump, payload[1]
        return _unwrap(payload[0])
    if _is_stores(payload):
        read_db = payload["read_db"]
        if not read_db or not isinstance(read_db[0], dict):
            raise SnapshotFormatError(
                "Agency stores object has no readable read_db[0]",
                ErrorContext(section="read_db"),
            )
        return read_db[0], payload
    if isinstance(payload, dict):
        return payload, None
    raise SnapshotFormatError(
        f"Snapshot root must be an object or a list, got {type(payload).__name__}",
    )


def _is_stores(value: Any) -> bool:
    return isinstance(value, dict) and isinstance(value.get("read_db"), list)


def _parse_section(model: type[BaseModel], raw: Any, name: str) -> BaseModel:
    if raw is None:
        return model()
    if not isinstance(raw, dict):
        logger.warning(
            f"Snapshot section {name} is not an object, treating as empty",
            extra={"section": name},
        )
        return model()
    try:
        return model.model_validate(raw)
    except ValidationError as exc:
        logger.warning(
            f"Snapshot section {name} failed validation, treating as empty: "
            f"{exc.error_count()} error(s)",
            extra={"section": name},
        )
        return model()


def _extract_callbacks(stores: Any) -> list[dict[str, Any]]:
    if not _is_stores(stores) or len(stores["read_db"]) < 3:
        return []
    raw = stores["read_db"][2]
    if isinstance(raw, dict):
        return [{url: observer} for url, observer in raw.items()]
    if isinstance(raw, list):
        return [c for c in raw if isinstance(c, dict) and c]
    return []
