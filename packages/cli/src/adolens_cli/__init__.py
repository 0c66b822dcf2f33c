"""Command-line interface for adolens."""
