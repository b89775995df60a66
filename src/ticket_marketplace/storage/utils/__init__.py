"""Per-table record managers."""
