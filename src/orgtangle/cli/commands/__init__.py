"""CLI command modules (auto-discovered)."""
