"""Income / expense summary over a coach's financial transactions."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable

from performance_engine.models.enums import TransactionKind, TransactionStatus
from performance_engine.models.records import FinancialTransaction


@dataclass(frozen=True)
class FinanceSummary:
    income: Decimal
    expenses: Decimal
    outstanding: Decimal

    @property
    def balance(self) -> Decimal:
        return self.income - self.expenses


def summarize_transactions(
    transactions: Iterable[FinancialTransaction],
) -> FinanceSummary:
    """Sum paid amounts per kind. Only money actually paid counts.

    ``outstanding`` is the unpaid remainder of income entries that are not
    fully paid.
    """
    income = Decimal("0")
    expenses = Decimal("0")
    outstanding = Decimal("0")
    for tx in transactions:
        if tx.kind == TransactionKind.INCOME:
            income += tx.paid_amount
            if tx.status != TransactionStatus.PAID:
                outstanding += max(tx.total_amount - tx.paid_amount, Decimal("0"))
        else:
            expenses += tx.paid_amount
    return FinanceSummary(income=income, expenses=expenses, outstanding=outstanding)


def infer_status(total_amount: Decimal, paid_amount: Decimal) -> TransactionStatus:
    """Status implied by how much of the total has been paid."""
    if paid_amount <= 0:
        return TransactionStatus.PENDING
    if paid_amount < total_amount:
        return TransactionStatus.PARTIALLY_PAID
    return TransactionStatus.PAID
