"""Aggregation helpers for run event logs."""
