"""Snapshot active liabilities from the finance store as simulation inputs."""

from __future__ import annotations

from collections import Counter

from ..config import STRATEGIES
from ..domain.repositories.liability import LiabilityRepository
from ..logging_config import get_logger
from ..models.liability import Liability
from .debts import Debt

logger = get_logger(__name__)


def debt_from_liability(liability: Liability) -> Debt:
    """Convert a stored liability into an immutable ``Debt`` snapshot."""

    return Debt(
        id=liability.id,
        name=liability.name,
        remaining_amount=float(liability.balance or 0.0),
        interest_rate=float(liability.apr or 0.0),
        minimum_payment=float(liability.minimum_payment or 0.0),
    )


def load_active_debts(repository: LiabilityRepository, *, user_id: int) -> list[Debt]:
    """Return snapshots of the user's liabilities with a positive balance."""

    debts = [
        debt_from_liability(liability)
        for liability in repository.list_active(user_id=user_id)
        if (liability.balance or 0) > 0
    ]
    logger.debug("Loaded active debts", extra={"user_id": user_id, "debt_count": len(debts)})
    return debts


def preferred_strategy(repository: LiabilityRepository, *, user_id: int, default: str) -> str:
    """Return the payoff strategy most of the user's active liabilities are set to.

    Ties, unknown values and users without active liabilities fall back to
    ``default``.
    """

    counts: Counter[str] = Counter()
    for liability in repository.list_active(user_id=user_id):
        value = (liability.payoff_strategy or "").strip().lower()
        if value in STRATEGIES:
            counts[value] += 1
        else:
            logger.warning(
                "Ignoring unknown stored payoff strategy",
                extra={"liability_id": liability.id, "payoff_strategy": liability.payoff_strategy},
            )

    ranked = counts.most_common()
    if not ranked or (len(ranked) > 1 and ranked[0][1] == ranked[1][1]):
        return default
    return ranked[0][0]
