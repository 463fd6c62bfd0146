"""Module-level schemas used by reference resolution tests."""
