"""Runtime diagnostics collection."""
