"""Command implementations for tagalong."""
