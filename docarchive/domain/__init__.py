"""Domain layer: enums, field type registry and exceptions (no infrastructure imports)."""
