"""Console helpers for jsgate."""
