"""Command line interface for debtsync."""
