"""Utility Modules."""
