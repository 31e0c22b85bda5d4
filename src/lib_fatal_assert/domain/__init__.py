"""Domain layer: failure records, settings and the error taxonomy."""
