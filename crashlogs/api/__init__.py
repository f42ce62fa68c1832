"""HTTP API for crashlogs."""
