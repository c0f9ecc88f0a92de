"""Tagalong - reconcile a GitHub release with a description of it."""

__version__ = "0.1.0"
