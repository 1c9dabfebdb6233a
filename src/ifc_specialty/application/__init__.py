"""Application layer: analysis services."""
