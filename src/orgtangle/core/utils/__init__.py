"""Shared utilities (I/O, merging, subprocess execution)."""
