"""Command line entry points and report helpers."""
