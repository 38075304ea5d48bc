"""Web Package."""
