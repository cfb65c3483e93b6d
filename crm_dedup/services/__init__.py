"""Service layer: scan orchestration, candidate lifecycle and merges."""
