"""Name-keyed registry of the crash report parsers.

Format modules register themselves with ``@register_parser`` on import;
``load_builtin_parsers`` imports the bundled ones.
"""

import logging
from pathlib import Path

from crashlogs.parsers.base import BaseParser

logger = logging.getLogger(__name__)


class ParserRegistry:
    """Maps parser names to parser classes."""

    def __init__(self):
        self._parsers: dict[str, type[BaseParser]] = {}

    def __len__(self) -> int:
        return len(self._parsers)

    def register(self, parser_class: type[BaseParser]) -> None:
        if parser_class.name in self._parsers:
            logger.debug("Replacing parser %s", parser_class.name)
        self._parsers[parser_class.name] = parser_class

    def get(self, name: str) -> BaseParser | None:
        parser_class = self._parsers.get(name)
        return parser_class() if parser_class else None

    def find_parser(
        self,
        file_path: Path | None = None,
        content: str | None = None,
        hint: str | None = None,
    ) -> BaseParser | None:
        """Pick the parser that accepts a report.

        With a hint only the named parser is asked. Otherwise parsers are
        asked in registration order and the first to accept wins.
        """
        names = [hint] if hint else list(self._parsers)
        for name in names:
            parser = self.get(name)
            if parser is not None and parser.can_parse(file_path, content):
                return parser
        return None

    def describe(self) -> list[dict]:
        """Name, description and extensions of every registered parser."""
        return [
            {
                "name": name,
                "description": parser_class.description,
                "extensions": list(parser_class.extensions),
            }
            for name, parser_class in self._parsers.items()
        ]


_registry = ParserRegistry()


def get_registry() -> ParserRegistry:
    return _registry


def register_parser(parser_class: type[BaseParser]) -> type[BaseParser]:
    """Class decorator adding a parser to the shared registry."""
    _registry.register(parser_class)
    return parser_class


def load_builtin_parsers() -> None:
    from crashlogs.parsers.formats import apple_crash  # noqa: F401

    logger.debug("%d crash report parsers available", len(_registry))
