"""Crash report discovery.

Walks the system-wide diagnostics directory and the per-user and per-device
directories beneath each home directory, yielding the crash reports to parse
together with their category label.
"""

import logging
from collections.abc import Iterable, Iterator
from pathlib import Path

from crashlogs.config import Settings
from crashlogs.parsers.base import CrashCategory
from crashlogs.services.filesystem import list_directories_in_directory, list_files_in_directory
from crashlogs.services.users import UserAccount

logger = logging.getLogger(__name__)


def is_crash_report(file_path: str, settings: Settings) -> bool:
    """Check a file name against the crash suffix and the noise patterns."""
    name = Path(file_path).name
    if not name.endswith(settings.crash_report_suffix):
        return False
    return not any(pattern in name for pattern in settings.excluded_name_patterns)


def rooted_path(root: str, relative: str) -> Path:
    """Root a well-known diagnostics path at a home or system directory."""
    return Path(root) / relative.lstrip("/")


def iter_crash_reports_in(
    directory: str | Path,
    category: CrashCategory,
    settings: Settings,
) -> Iterator[tuple[str, CrashCategory]]:
    """Yield the crash reports directly under one directory."""
    for file_path in list_files_in_directory(directory):
        if is_crash_report(file_path, settings):
            yield file_path, category
        else:
            logger.debug("Skipping non-report file %s", file_path)


def iter_crash_report_paths(
    settings: Settings,
    users: Iterable[UserAccount],
    include_system: bool = True,
) -> Iterator[tuple[str, CrashCategory]]:
    """Yield (file_path, category) pairs in discovery order.

    Args:
        settings: Locations and file filters
        users: Accounts whose home directories are searched
        include_system: Also search the system-wide diagnostics directory

    Yields:
        Crash report paths with the label of the tree they were found in
    """
    if include_system:
        yield from iter_crash_reports_in(
            rooted_path(settings.system_root, settings.diagnostic_reports_path),
            CrashCategory.APPLICATION,
            settings,
        )

    for user in users:
        yield from iter_crash_reports_in(
            rooted_path(user.directory, settings.diagnostic_reports_path),
            CrashCategory.APPLICATION,
            settings,
        )

        mobile_root = rooted_path(user.directory, settings.mobile_diagnostic_reports_path)
        for device_directory in list_directories_in_directory(mobile_root):
            yield from iter_crash_reports_in(device_directory, CrashCategory.MOBILE, settings)
