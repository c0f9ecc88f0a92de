"""Core functionality for tagalong."""
