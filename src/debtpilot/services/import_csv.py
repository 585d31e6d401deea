"""CSV ingestion of debt snapshots."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Mapping

import pandas as pd

from ..logging_config import get_logger
from .debts import Debt
from .errors import InvalidInputError

logger = get_logger(__name__)

# Accepted header spellings, keyed by the field they populate.
COLUMN_ALIASES: dict[str, tuple[str, ...]] = {
    "id": ("id", "debt_id", "liability_id"),
    "name": ("name", "debt_name", "label"),
    "balance": ("balance", "remaining_amount", "remaining_balance"),
    "apr": ("apr", "interest_rate", "rate"),
    "minimum_payment": ("minimum_payment", "monthly_payment", "min_payment"),
}
REQUIRED_FIELDS = ("balance", "apr", "minimum_payment")


def normalize_frame(*, file_path: Path, encoding: str = "utf-8") -> pd.DataFrame:
    """Load a CSV file into a DataFrame of strings with normalized headers."""

    try:
        frame = pd.read_csv(file_path, encoding=encoding, dtype=str, keep_default_na=False)
    except pd.errors.EmptyDataError:
        return pd.DataFrame()
    frame.columns = [str(c).strip().lower().replace(" ", "_") for c in frame.columns]
    return frame


def _resolve_columns(columns: Iterable[str]) -> dict[str, str]:
    available = set(columns)
    resolved: dict[str, str] = {}
    for field, aliases in COLUMN_ALIASES.items():
        for alias in aliases:
            if alias in available:
                resolved[field] = alias
                break
    missing = [field for field in REQUIRED_FIELDS if field not in resolved]
    if missing:
        raise InvalidInputError(f"Debt CSV is missing required columns: {', '.join(missing)}.")
    return resolved


def _parse_amount(raw: object, *, field: str, line: int) -> float:
    text = str(raw).strip().replace(",", "")
    if text.endswith("%"):
        text = text[:-1]
    try:
        return float(text)
    except ValueError as exc:
        raise InvalidInputError(f"Row {line}: {field} must be a number, got {raw!r}.") from exc


def parse_debt_rows(rows: Iterable[Mapping[str, object]], columns: Mapping[str, str]) -> list[Debt]:
    """Convert dict-like rows into ``Debt`` snapshots, skipping cleared debts.

    ``line`` numbers in error messages count the header as line 1.
    """

    debts: list[Debt] = []
    for index, row in enumerate(rows):
        line = index + 2
        balance = _parse_amount(row.get(columns["balance"]), field="balance", line=line)
        apr = _parse_amount(row.get(columns["apr"]), field="apr", line=line)
        minimum = _parse_amount(
            row.get(columns["minimum_payment"]), field="minimum_payment", line=line
        )

        debt_id = str(row.get(columns["id"], "")).strip() if "id" in columns else ""
        debt_id = debt_id or str(index + 1)
        name = str(row.get(columns["name"], "")).strip() if "name" in columns else ""

        if balance == 0:
            logger.debug("Skipping cleared debt", extra={"debt_id": debt_id, "line": line})
            continue
        debts.append(
            Debt(
                id=debt_id,
                name=name or f"Debt {debt_id}",
                remaining_amount=balance,
                interest_rate=apr,
                minimum_payment=minimum,
            )
        )
    return debts


def load_debts_csv(path: Path, *, encoding: str = "utf-8") -> list[Debt]:
    """Read debts from a CSV file with balance, apr and minimum payment columns."""

    frame = normalize_frame(file_path=Path(path), encoding=encoding)
    if frame.empty and not len(frame.columns):
        return []
    columns = _resolve_columns(frame.columns)
    rows = frame.to_dict(orient="records")
    debts = parse_debt_rows(rows, columns)
    logger.info("Imported debts from CSV", extra={"path": str(path), "debt_count": len(debts)})
    return debts
