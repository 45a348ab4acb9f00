from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Protocol, Sequence, Tuple

from ..core.enums import CharityStatus
from .model import CharityPayment, CharityRecord, CharitySummary, IncomeMeta, IncomeRecord


class CharityRepository(Protocol):
    """Income and its charity obligation are written together, one transaction per call."""

    def get_income(self, income_id: int, *, business_id: int) -> Optional[IncomeRecord]:
        raise NotImplementedError

    def get_charity(self, charity_id: int, *, business_id: int) -> Optional[CharityRecord]:
        raise NotImplementedError

    def get_charity_for_income(self, income_id: int, *, business_id: int) -> Optional[CharityRecord]:
        raise NotImplementedError

    def list_charity(
        self, *, business_id: int, status: Optional[CharityStatus] = None
    ) -> Sequence[CharityRecord]:
        raise NotImplementedError

    def create_income_with_charity(
        self,
        *,
        business_id: int,
        amount: Decimal,
        income_date: date,
        meta: IncomeMeta,
        amount_required: Decimal,
        charity_description: Optional[str],
    ) -> Tuple[int, int]:
        """Returns ``(income_id, charity_id)``."""

        raise NotImplementedError

    def update_income_with_charity(
        self,
        income_id: int,
        *,
        business_id: int,
        amount: Decimal,
        income_date: date,
        meta: IncomeMeta,
        amount_required: Decimal,
    ) -> bool:
        """Rewrite the income and re-derive its charity row (required amount and status)."""

        raise NotImplementedError

    def delete_income(self, income_id: int, *, business_id: int) -> bool:
        """Delete the income, its charity row and that row's payments."""

        raise NotImplementedError

    def record_payment(
        self,
        charity_id: int,
        *,
        business_id: int,
        expected_paid: Decimal,
        expected_required: Decimal,
        new_paid: Decimal,
        new_status: CharityStatus,
        amount: Decimal,
        payment_date: date,
        recipient: Optional[str],
        description: Optional[str],
    ) -> Optional[int]:
        """Apply a payment only if the row still holds the amounts it was checked against.

        Returns the payment id, or None when another payment or an income update
        changed ``amount_paid`` or ``amount_required`` in between.
        """

        raise NotImplementedError

    def list_payments(self, charity_id: int, *, business_id: int) -> Sequence[CharityPayment]:
        raise NotImplementedError

    def summary(self, *, business_id: int) -> CharitySummary:
        raise NotImplementedError
