"""Reporter — prints the rendered report to a text stream."""

import sys
from typing import TextIO

from clusterlint.core.analyzer_registry import AnalysisResult
from clusterlint.core.format_report import build_report


def print_report(
    result: AnalysisResult, stream: TextIO | None = None, *, overview: bool = True,
) -> bool:
    """Write the report and return whether the cluster is infected."""
    out = stream if stream is not None else sys.stdout
    report = build_report(result, overview=overview)
    out.write(report.text + "\n")
    return report.infected
