"""Data models for tagalong."""

from tagalong.models.desired import DesiredState
from tagalong.models.release import Release, Asset

__all__ = ["DesiredState", "Release", "Asset"]
