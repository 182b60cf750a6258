"""Command-line interface for repograph."""
