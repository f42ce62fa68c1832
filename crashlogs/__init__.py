"""crashlogs - structured records from Apple crash reports."""

__version__ = "1.0.0"
