"""SQLModel implementation of Liability repository."""

from __future__ import annotations

from typing import Callable, ContextManager, Optional

from sqlmodel import Session, select

from ...models.liability import Liability


class SQLModelLiabilityRepository:
    """SQLModel-based liability repository implementation."""

    def __init__(self, session_factory: Callable[[], ContextManager[Session]]):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_by_id(self, liability_id: int, *, user_id: int) -> Optional[Liability]:
        """Retrieve a liability by ID."""
        with self.session_factory() as session:
            return session.exec(
                select(Liability).where(Liability.id == liability_id, Liability.user_id == user_id)
            ).first()

    def list_all(self, *, user_id: int) -> list[Liability]:
        """List all liabilities."""
        with self.session_factory() as session:
            statement = (
                select(Liability)
                .where(Liability.user_id == user_id)
                .order_by(Liability.name, Liability.id)  # type: ignore
            )
            return list(session.exec(statement).all())

    def list_active(self, *, user_id: int) -> list[Liability]:
        """List liabilities with non-zero balances."""
        with self.session_factory() as session:
            statement = (
                select(Liability)
                .where(Liability.user_id == user_id)
                .where(Liability.balance > 0)
                .order_by(Liability.name, Liability.id)  # type: ignore
            )
            return list(session.exec(statement).all())

    def create(self, liability: Liability, *, user_id: int) -> Liability:
        """Create a new liability."""
        with self.session_factory() as session:
            liability.user_id = user_id
            session.add(liability)
            session.commit()
            session.refresh(liability)
            return liability
