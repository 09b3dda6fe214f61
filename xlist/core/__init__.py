"""Directory facade and export helpers."""
