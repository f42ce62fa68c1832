"""Crash report parsers and the record type they produce."""

from crashlogs.parsers.base import BaseParser, CrashCategory, CrashRecord
from crashlogs.parsers.registry import ParserRegistry, get_registry, register_parser

__all__ = [
    "BaseParser",
    "CrashCategory",
    "CrashRecord",
    "ParserRegistry",
    "get_registry",
    "register_parser",
]
