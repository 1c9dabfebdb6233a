"""Infrastructure layer: STEP file reading."""
