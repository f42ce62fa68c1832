"""Shared fixtures for parser unit tests."""

from pathlib import Path

import pytest


@pytest.fixture
def crash_parser():
    """Create an Apple crash report parser instance."""
    from crashlogs.parsers.formats.apple_crash import AppleCrashReportParser

    return AppleCrashReportParser()


@pytest.fixture
def application_report_file(tmp_path: Path, application_report: str) -> Path:
    """Write the desktop crash report to disk."""
    report = tmp_path / "Calculator_2024-01-02-030405_host.crash"
    report.write_text(application_report)
    return report
