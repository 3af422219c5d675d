"""Domain layer: tables, their storage layouts and the storage engine."""
