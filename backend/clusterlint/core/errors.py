"""Error Hierarchy — typed, categorized exceptions for clusterlint failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Only failures that stop a run (unreadable or unrecognizable snapshot) are raised;
      analyzers never raise on inconsistent data, they report it
    - to_response() produces the REST envelope used by the API and by the CLI --json mode

Design Decisions:
    - Single hierarchy with ClusterLintError base: FastAPI global handler catches all
    - ErrorContext as dataclass: observability without coupling to the logging framework
    - ArtifactWriteError is collected per artifact by the exporter, not propagated
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    IO = "io"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    source: str | None = None
    artifact: str | None = None
    section: str | None = None
    debug_info: dict[str, Any] | None = None


class ClusterLintError(Exception):
    """Base exception for all clusterlint errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "source": self.context.source,
                    "artifact": self.context.artifact,
                    "section": self.context.section,
                },
            }
        }


# ─── Input Errors (400-level) ───────────────────────────────────

class SnapshotFormatError(ClusterLintError):
    """Snapshot root is not a recognizable agency dump."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "SNAPSHOT_FORMAT_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )


class SnapshotReadError(ClusterLintError):
    """Snapshot file missing, unreadable, or not JSON."""
    def __init__(self, path: str, reason: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.source = path
        super().__init__(
            f"Cannot read snapshot '{path}': {reason}",
            "SNAPSHOT_READ_ERROR", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, ctx, 404,
        )
        self.path = path


# ─── Output Errors (500-level) ──────────────────────────────────

class ArtifactWriteError(ClusterLintError):
    """A remediation artifact could not be written."""
    def __init__(self, filename: str, reason: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.artifact = filename
        super().__init__(
            f"Cannot write artifact '{filename}': {reason}",
            "ARTIFACT_WRITE_ERROR", ErrorCategory.IO,
            ErrorSeverity.ERROR, ctx, 500,
        )
        self.filename = filename
