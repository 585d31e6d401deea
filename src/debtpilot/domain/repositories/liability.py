"""Liability repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.liability import Liability


class LiabilityRepository(Protocol):
    """Read access to liabilities owned by the finance store."""

    def get_by_id(self, liability_id: int, *, user_id: int) -> Optional[Liability]:
        """Retrieve a liability by ID."""
        ...

    def list_all(self, *, user_id: int) -> list[Liability]:
        """List all liabilities."""
        ...

    def list_active(self, *, user_id: int) -> list[Liability]:
        """List liabilities with non-zero balances."""
        ...

    def create(self, liability: Liability, *, user_id: int) -> Liability:
        """Create a new liability."""
        ...
