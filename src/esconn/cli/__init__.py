"""Command line interface for esconn."""
