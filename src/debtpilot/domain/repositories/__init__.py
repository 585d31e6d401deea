"""Repository protocols."""

from .liability import LiabilityRepository

__all__ = ["LiabilityRepository"]
