"""SQLModel repository implementations."""

from .liability import SQLModelLiabilityRepository

__all__ = ["SQLModelLiabilityRepository"]
