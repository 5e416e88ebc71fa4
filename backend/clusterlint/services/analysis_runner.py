"""Analysis Runner — orchestrates load, analysis, report and export for one snapshot.

Invariants:
    - Analysis options come from Settings; core/ never reads configuration itself
    - Artifacts are exported only when the cluster is infected
    - The report is printed before any artifact is written
    - build_response never touches the filesystem (shared by API and --json)

Design Decisions:
    - Thin orchestration over pure core functions: every decision about the cluster is in
      core/, this module only sequences IO around it
"""

import json
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, TextIO

from clusterlint.config import Settings
from clusterlint.core.analyzer_registry import ANALYZERS, AnalysisResult, run_analysis
from clusterlint.core.remediation import build_artifacts
from clusterlint.core.snapshot import Snapshot, load_snapshot
from clusterlint.schemas.analysis import AnalysisResponse, ArtifactOut, CheckResult
from clusterlint.services.artifact_exporter import ExportResult, export_artifacts
from clusterlint.services.reporter import print_report
from clusterlint.services.snapshot_loader import read_snapshot_file

logger = logging.getLogger(__name__)


@dataclass
class RunOutcome:
    result: AnalysisResult
    export: ExportResult | None = None

    @property
    def infected(self) -> bool:
        return self.result.infected


def analyze_snapshot(snapshot: Snapshot, settings: Settings) -> AnalysisResult:
    result = run_analysis(
        snapshot,
        required_system_collections=settings.required_system_collections,
        system_prefix=settings.system_collection_prefix,
    )
    for analyzer in ANALYZERS:
        count = sum(len(result.findings[kind]) for kind in analyzer.kinds)
        logger.debug(
            f"Analyzer {analyzer.name} reported {count} finding(s)",
            extra={"analyzer": analyzer.name, "finding_count": count},
        )
    logger.info(
        "Analysis finished",
        extra={"infected": result.infected, "finding_count": sum(result.findings.counts().values())},
    )
    return result


def analyze_payload(payload: Any, settings: Settings, stores: Any = None) -> AnalysisResult:
    return analyze_snapshot(load_snapshot(payload, stores), settings)


def build_response(result: AnalysisResult) -> AnalysisResponse:
    """Shape an AnalysisResult for JSON consumers."""
    counts = result.findings.counts()
    return AnalysisResponse(
        infected=result.infected,
        checks=[
            CheckResult(name=name, passed=count == 0, count=count)
            for name, count in counts.items()
        ],
        findings=result.findings.to_jsonable(),
        artifacts=[ArtifactOut(**a.to_dict()) for a in build_artifacts(result.findings)],
    )


def run_check(
    dump_path: Path,
    settings: Settings,
    *,
    stores_path: Path | None = None,
    output_dir: Path | None = None,
    as_json: bool = False,
    stream: TextIO | None = None,
) -> RunOutcome:
    """Load a dump file, print the report (or JSON) and export artifacts if infected.

    With as_json the response document goes to the stream and repair hints go to
    stderr, so the stream stays parseable.
    """
    out = stream if stream is not None else sys.stdout
    snapshot = read_snapshot_file(dump_path, stores_path)
    result = analyze_snapshot(snapshot, settings)

    if as_json:
        out.write(json.dumps(build_response(result).model_dump(), indent=2) + "\n")
        hint_stream = sys.stderr
    else:
        print_report(result, out)
        hint_stream = out

    outcome = RunOutcome(result=result)
    if result.infected:
        outcome.export = export_artifacts(
            build_artifacts(result.findings),
            output_dir if output_dir is not None else settings.output_dir,
            settings.repair_command,
            hint_stream,
        )
    return outcome
