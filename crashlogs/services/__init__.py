"""Discovery and table services built around the crash report parsers."""
