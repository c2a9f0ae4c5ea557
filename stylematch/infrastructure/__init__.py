"""Infrastructure layer: model providers and catalog storage."""
