"""Apple crash report parser.

Parses the free-text ``.crash`` reports written by macOS ReportCrash and by
iOS devices synced through Finder/iTunes. Reports are line oriented with
``Label: value`` pairs; only a fixed set of labels is extracted.
"""

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from crashlogs.parsers.base import BaseParser, CrashRecord
from crashlogs.parsers.registry import register_parser

logger = logging.getLogger(__name__)

FIELD_DELIMITER = ":"
LINE_DELIMITER = "\n"
CRASHED_THREAD_HEADER = "Thread {} Crashed"
PID_PATTERN = re.compile(r"\[\d+\]")
SNIFF_LENGTH = 4096

# Labels that only appear in the report header, used for content sniffing
CRASH_REPORT_SIGNATURES = (
    "Process:",
    "Exception Type:",
    "Incident Identifier:",
    "Crashed Thread:",
    "Triggered by Thread:",
)


class FieldPolicy(str, Enum):
    """How the value of a recognized label is turned into a record field."""

    SCALAR = "scalar"
    BRACKETED_NUMBER = "bracketed_number"
    DATE_TIME = "date_time"
    THREAD_ID = "thread_id"
    REGISTERS = "registers"
    IGNORED = "ignored"


@dataclass(frozen=True)
class FieldSpec:
    """Record field populated by a label and the policy used to fill it."""

    field: str | None
    policy: FieldPolicy = FieldPolicy.SCALAR


CRASH_DUMP_KEYS: dict[str, FieldSpec] = {
    "Process": FieldSpec("pid", FieldPolicy.BRACKETED_NUMBER),
    "Path": FieldSpec("path"),
    "Identifier": FieldSpec("identifier"),
    "Version": FieldSpec("version"),
    "Parent Process": FieldSpec("parent", FieldPolicy.BRACKETED_NUMBER),
    "Responsible": FieldSpec("responsible"),
    "User ID": FieldSpec("uid"),
    "Date/Time": FieldSpec("datetime", FieldPolicy.DATE_TIME),
    "Crashed Thread": FieldSpec("crashed_thread", FieldPolicy.THREAD_ID),
    "Exception Type": FieldSpec("exception_type"),
    "Exception Codes": FieldSpec("exception_codes"),
    "Exception Note": FieldSpec("exception_notes"),
    # x86_64 register dump; rdi opens the continuation line consumed with rax
    "rax": FieldSpec("registers", FieldPolicy.REGISTERS),
    "rdi": FieldSpec(None, FieldPolicy.IGNORED),
    # Mobile crashes
    "Triggered by Thread": FieldSpec("crashed_thread", FieldPolicy.THREAD_ID),
    "x0": FieldSpec("registers", FieldPolicy.REGISTERS),
    "x4": FieldSpec(None, FieldPolicy.IGNORED),
}


def tokenize(text: str, delimiter: str) -> list[str]:
    """Split on a delimiter, dropping empty pieces and trimming the rest."""
    return [token.strip() for token in text.split(delimiter) if token]


def extract_bracketed_number(line: str) -> str | None:
    """Return the digits of the first ``[1234]`` run in a line, if any."""
    match = PID_PATTERN.search(line)
    if match is None:
        return None
    return match.group(0)[1:-1]


def normalize_registers(text: str) -> str:
    """Collapse the column padding of a register dump."""
    text = text.replace(": ", ":")
    while "   " in text:
        text = text.replace("   ", " ")
    return text


class LineBuffer:
    """Forward-only line iterator with one line of lookahead."""

    def __init__(self, lines: list[str]):
        self._lines = lines
        self._index = 0

    def __iter__(self) -> "LineBuffer":
        return self

    def __next__(self) -> str:
        line = self.consume()
        if line is None:
            raise StopIteration
        return line

    def peek_next(self) -> str | None:
        """Return the line the next iteration would yield without advancing."""
        if self._index < len(self._lines):
            return self._lines[self._index]
        return None

    def consume(self) -> str | None:
        """Take the next line so the main loop never sees it."""
        line = self.peek_next()
        if line is not None:
            self._index += 1
        return line


class CrashReportScanner:
    """Single forward pass over the lines of one crash report.

    All scanner state lives on the instance, so each report gets its own.
    """

    def __init__(self, lines: list[str], record: CrashRecord):
        self.buffer = LineBuffer(lines)
        self.record = record
        self.crashed_thread_seen = False
        self.crashed_thread_header: str | None = None
        self._handlers: dict[FieldPolicy, Callable[[FieldSpec, str, list[str]], None]] = {
            FieldPolicy.SCALAR: self._apply_scalar,
            FieldPolicy.BRACKETED_NUMBER: self._apply_bracketed_number,
            FieldPolicy.DATE_TIME: self._apply_date_time,
            FieldPolicy.THREAD_ID: self._apply_thread_id,
            FieldPolicy.REGISTERS: self._apply_registers,
            FieldPolicy.IGNORED: self._apply_nothing,
        }

    def scan(self) -> CrashRecord:
        for line in self.buffer:
            tokens = tokenize(line, FIELD_DELIMITER)
            if not tokens:
                continue

            # The line after the crashed thread's header is its top frame
            if self.crashed_thread_seen and tokens[0] == self.crashed_thread_header:
                self.record.stack_trace = self.buffer.consume()
                self.crashed_thread_seen = False
                continue

            spec = CRASH_DUMP_KEYS.get(tokens[0])
            if spec is None:
                continue

            self._handlers[spec.policy](spec, line, tokens)

        return self.record

    def _apply_scalar(self, spec: FieldSpec, line: str, tokens: list[str]) -> None:
        if len(tokens) > 1:
            setattr(self.record, spec.field, tokens[1])

    def _apply_bracketed_number(self, spec: FieldSpec, line: str, tokens: list[str]) -> None:
        number = extract_bracketed_number(line)
        if number is not None:
            setattr(self.record, spec.field, number)

    def _apply_date_time(self, spec: FieldSpec, line: str, tokens: list[str]) -> None:
        # The timestamp's own colons were split apart by the tokenizer
        if len(tokens) >= 4:
            setattr(self.record, spec.field, FIELD_DELIMITER.join(tokens[1:4]))

    def _apply_thread_id(self, spec: FieldSpec, line: str, tokens: list[str]) -> None:
        if len(tokens) < 2:
            return
        words = tokenize(tokens[1], " ")
        if not words:
            return
        setattr(self.record, spec.field, words[0])
        self.crashed_thread_header = CRASHED_THREAD_HEADER.format(words[0])
        self.crashed_thread_seen = True

    def _apply_registers(self, spec: FieldSpec, line: str, tokens: list[str]) -> None:
        continuation = self.buffer.consume()
        if continuation is not None:
            line = f"{line} {continuation}"
        setattr(self.record, spec.field, normalize_registers(line))

    def _apply_nothing(self, spec: FieldSpec, line: str, tokens: list[str]) -> None:
        return None


def parse_crash_report(content: str | None, file_path: str) -> CrashRecord:
    """Extract a CrashRecord from the text of one crash report.

    Args:
        content: Full report text, or None when the file could not be read
        file_path: Where the report came from; always kept as crash_path

    Returns:
        The populated record. Anomalies leave fields unset, nothing is raised.
    """
    record = CrashRecord(crash_path=file_path)
    if content is None:
        return record

    lines = tokenize(content, LINE_DELIMITER)
    return CrashReportScanner(lines, record).scan()


@register_parser
class AppleCrashReportParser(BaseParser):
    """Parser for macOS and iOS ``.crash`` reports."""

    name = "apple_crash"
    description = "macOS application and iOS mobile device crash report (.crash) parser"
    extensions = (".crash",)

    def can_parse(self, file_path: Path | None = None, content: str | None = None) -> bool:
        """Accept the .crash extension, or text carrying two report header labels."""
        if file_path and file_path.suffix.lower() in self.extensions:
            return True
        if not content:
            return False

        head = content[:SNIFF_LENGTH]
        hits = sum(1 for signature in CRASH_REPORT_SIGNATURES if signature in head)
        return hits >= 2

    def parse_content(self, content: str | None, file_path: str) -> CrashRecord:
        record = parse_crash_report(content, file_path)
        logger.debug(
            "Parsed crash report %s (%d fields)", file_path, len(record.populated_fields())
        )
        return record
