"""Analysis Schemas — Pydantic models for the analysis API response.

Invariants:
    - checks lists every finding kind in registry order, passed or not
    - findings holds JSON-safe records keyed by finding kind
    - artifacts mirror the files the CLI would write, payload included

Design Decisions:
    - The request body is the raw agency dump (any accepted shape), so no request model:
      shape tolerance lives in core/snapshot.py, not in the API contract
"""

from typing import Any

from pydantic import BaseModel


class CheckResult(BaseModel):
    """Outcome of one finding kind."""
    name: str
    passed: bool
    count: int


class ArtifactOut(BaseModel):
    """A remediation artifact as it would be written to disk."""
    key: str
    filename: str
    task: str | None
    target: str
    payload: Any


class AnalysisResponse(BaseModel):
    """Full analysis outcome for one snapshot."""
    infected: bool
    checks: list[CheckResult] = []
    findings: dict[str, list[Any]] = {}
    artifacts: list[ArtifactOut] = []
