"""Built-in crash report format parsers."""

from crashlogs.parsers.formats.apple_crash import AppleCrashReportParser

__all__ = [
    "AppleCrashReportParser",
]
