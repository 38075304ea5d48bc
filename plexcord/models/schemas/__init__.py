"""Schema Definitions."""
