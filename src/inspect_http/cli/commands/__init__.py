"""Top-level inspect-http commands (auto-discovered)."""
