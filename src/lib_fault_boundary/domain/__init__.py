"""Domain layer: error taxonomy, special-case objects, and value objects."""
