"""Command-line interface for Querysmith."""
