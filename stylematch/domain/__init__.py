"""Domain layer: entities and provider contracts."""
