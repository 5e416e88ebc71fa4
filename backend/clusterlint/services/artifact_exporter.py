"""Artifact Exporter — writes remediation artifacts to disk and prints repair hints.

Invariants:
    - Each artifact is written independently: an OSError on one is recorded as an
      ArtifactWriteError and the remaining artifacts are still attempted
    - Hints always name the artifact's absolute path
    - Files are written whole (write to temp name, then replace), never half-written;
      a failed write leaves no temp file behind

Design Decisions:
    - Failures are returned in ExportResult rather than raised: the report has already
      been printed and the operator needs every artifact that could be written
"""

import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import TextIO

from clusterlint.core.errors import ArtifactWriteError
from clusterlint.core.remediation import RemediationArtifact, hint_lines

logger = logging.getLogger(__name__)


@dataclass
class ExportResult:
    written: list[Path] = field(default_factory=list)
    failed: list[ArtifactWriteError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed


def write_artifact(artifact: RemediationArtifact, output_dir: Path) -> Path:
    path = (output_dir / artifact.filename).resolve()
    tmp = path.with_name(path.name + ".tmp")
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
        tmp.write_text(artifact.serialize(), encoding="utf-8")
        tmp.replace(path)
    except OSError as exc:
        tmp.unlink(missing_ok=True)
        raise ArtifactWriteError(artifact.filename, exc.strerror or str(exc)) from exc
    return path


def export_artifacts(
    artifacts: list[RemediationArtifact],
    output_dir: Path,
    repair_command: str,
    stream: TextIO | None = None,
) -> ExportResult:
    out = stream if stream is not None else sys.stdout
    result = ExportResult()
    for artifact in artifacts:
        try:
            path = write_artifact(artifact, output_dir)
        except ArtifactWriteError as exc:
            logger.error(
                exc.message,
                extra={"artifact": artifact.filename, "error_code": exc.code},
            )
            out.write(f"{exc.message}\n")
            result.failed.append(exc)
            continue
        logger.info(
            f"Wrote remediation artifact {artifact.filename}",
            extra={"artifact": artifact.filename, "path": str(path)},
        )
        result.written.append(path)
        out.write("\n".join(hint_lines(artifact, str(path), repair_command)) + "\n")
    return result
