"""Crash log table generation.

Combines discovery, file reading and the Apple crash report parser into the
list of records served by the API.
"""

import logging
from dataclasses import dataclass

from crashlogs.config import Settings, get_settings
from crashlogs.parsers.base import CrashCategory, CrashRecord
from crashlogs.parsers.formats.apple_crash import AppleCrashReportParser
from crashlogs.services.discovery import iter_crash_report_paths
from crashlogs.services.users import users_from_constraints

logger = logging.getLogger(__name__)

ROOT_UID = "0"


@dataclass
class QueryConstraints:
    """Equality constraints on the crash log table's columns."""

    uid: str | None = None
    type: CrashCategory | None = None

    def includes_system_reports(self) -> bool:
        """System-wide reports belong to root, so a non-root uid excludes them."""
        return self.uid is None or self.uid == ROOT_UID


def read_crash_report(
    file_path: str,
    category: CrashCategory,
    parser: AppleCrashReportParser | None = None,
) -> CrashRecord:
    """Read and parse one crash report, stamping its category label."""
    parser = parser or AppleCrashReportParser()
    record = parser.parse_file(file_path)
    record.type = category.value
    return record


def generate_crash_logs(
    constraints: QueryConstraints | None = None,
    settings: Settings | None = None,
) -> list[CrashRecord]:
    """Build one record per discovered crash report.

    Args:
        constraints: Optional uid/type constraints
        settings: Locations and file filters, defaults to the cached settings

    Returns:
        Records in discovery order
    """
    constraints = constraints or QueryConstraints()
    settings = settings or get_settings()
    parser = AppleCrashReportParser()

    users = users_from_constraints(constraints.uid)
    paths = iter_crash_report_paths(
        settings,
        users,
        include_system=constraints.includes_system_reports(),
    )

    results: list[CrashRecord] = []
    for file_path, category in paths:
        if constraints.type is not None and category != constraints.type:
            continue
        results.append(read_crash_report(file_path, category, parser))

    logger.info("Collected %d crash reports for %d users", len(results), len(users))
    return results
