"""Reporter — tests for printing the report to a stream."""

import io

from builders import agency_dump
from clusterlint.core.analyzer_registry import run_analysis
from clusterlint.core.format_report import CLEAN_MESSAGE
from clusterlint.core.snapshot import load_snapshot
from clusterlint.services.reporter import print_report


def test_clean_report_printed_and_flag_false(healthy_dump):
    out = io.StringIO()
    assert print_report(run_analysis(load_snapshot(healthy_dump)), out) is False
    assert out.getvalue().endswith(CLEAN_MESSAGE + "\n")


def test_infected_flag_returned():
    out = io.StringIO()
    result = run_analysis(load_snapshot(agency_dump(current_coordinators=["C9"])))
    assert print_report(result, out, overview=False) is True
    assert out.getvalue().startswith("[FAIL] Your cluster has zombie coordinators")
