"""Crash record type and the interface crash report parsers implement."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, fields
from enum import Enum
from pathlib import Path
from typing import ClassVar

from crashlogs.services.filesystem import read_file

logger = logging.getLogger(__name__)


class CrashCategory(str, Enum):
    """Category labels supplied by discovery, never derived from content."""

    APPLICATION = "application"
    MOBILE = "mobile"


@dataclass
class CrashRecord:
    """Structured fields extracted from one crash report.

    Every field is optional except ``crash_path``. A field left as None was
    not present (or not recoverable) in the report.
    """

    crash_path: str
    type: str | None = None

    # Process metadata
    pid: str | None = None
    path: str | None = None
    identifier: str | None = None
    version: str | None = None
    parent: str | None = None
    responsible: str | None = None
    uid: str | None = None
    datetime: str | None = None

    # Fault details
    crashed_thread: str | None = None
    exception_type: str | None = None
    exception_codes: str | None = None
    exception_notes: str | None = None
    registers: str | None = None
    stack_trace: str | None = None

    def populated_fields(self) -> list[str]:
        """Names of the fields holding a value."""
        return [f.name for f in fields(self) if getattr(self, f.name) is not None]

    def to_dict(self) -> dict[str, str]:
        """Convert to a sparse dictionary holding only populated fields."""
        return {name: getattr(self, name) for name in self.populated_fields()}


class BaseParser(ABC):
    """A parser turns the text of one report into one CrashRecord.

    Subclasses set ``name``, ``description`` and ``extensions`` and decide
    for themselves which text they accept.
    """

    name: ClassVar[str]
    description: ClassVar[str] = ""
    extensions: ClassVar[tuple[str, ...]] = ()

    @abstractmethod
    def can_parse(self, file_path: Path | None = None, content: str | None = None) -> bool:
        """Whether a report with this name or leading text is in this parser's format."""

    @abstractmethod
    def parse_content(self, content: str | None, file_path: str) -> CrashRecord:
        """Parse report text; None stands for a failed read.

        Implementations never raise and always keep ``file_path`` as
        ``crash_path``.
        """

    def parse_file(self, file_path: str | Path) -> CrashRecord:
        """Read a report from disk and parse it.

        An unreadable file still yields a record holding its path.
        """
        content, ok = read_file(file_path)
        if not ok:
            logger.debug("Unreadable crash report %s, keeping path only", file_path)
        return self.parse_content(content if ok else None, str(file_path))
