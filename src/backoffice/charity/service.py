from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from ..common.money import to_money
from ..common.partial import pick
from ..common.validators import require_positive_amount, to_decimal
from ..core.constants import DEFAULT_CHARITY_RATE
from ..core.enums import CharityStatus
from ..core.exceptions import ConflictError, ExceedsBalanceError, NotFoundError, ValidationError
from .model import (
    CharityPayment,
    CharityRecord,
    CharitySummary,
    IncomeMeta,
    IncomeUpdate,
    IncomeWithCharity,
    charity_required,
    derive_charity_status,
)
from .repository import CharityRepository

logger = logging.getLogger(__name__)


class CharityService:
    """Income events and the charity obligation derived from each of them.

    ``amount_required`` is always ``income.amount x rate``, computed here on
    both insert and update; nothing else derives it.
    """

    def __init__(self, charity: CharityRepository, *, rate: Decimal = DEFAULT_CHARITY_RATE):
        rate = Decimal(str(rate))
        if rate < 0 or rate > 1:
            raise ValueError(f"Charity rate must be between 0 and 1, got {rate}")
        self._charity = charity
        self._rate = rate

    @property
    def rate(self) -> Decimal:
        return self._rate

    def create_income_with_charity(
        self,
        business_id: int,
        amount,
        income_date: date,
        meta: Optional[IncomeMeta] = None,
    ) -> IncomeWithCharity:
        amount = require_positive_amount(amount, "amount")
        if income_date is None:
            raise ValidationError("date is required", field="date")
        meta = meta or IncomeMeta()

        required = charity_required(amount, self._rate)
        description = f"Charity for income: {meta.description}" if meta.description else None
        income_id, charity_id = self._charity.create_income_with_charity(
            business_id=int(business_id),
            amount=amount,
            income_date=income_date,
            meta=meta,
            amount_required=required,
            charity_description=description,
        )
        logger.info(
            "Income %s (%s) recorded for business %s; charity %s requires %s",
            income_id,
            amount,
            business_id,
            charity_id,
            required,
        )
        return self._load(business_id, income_id)

    def update_income(self, business_id: int, income_id: int, changes: IncomeUpdate) -> IncomeWithCharity:
        income = self._charity.get_income(int(income_id), business_id=int(business_id))
        if not income:
            raise NotFoundError(f"Income record {income_id} not found")

        amount = pick(changes.amount, income.amount)
        if amount is None:
            raise ValidationError("amount cannot be cleared", field="amount")
        amount = require_positive_amount(amount, "amount")

        income_date = pick(changes.income_date, income.income_date)
        if income_date is None:
            raise ValidationError("date cannot be cleared", field="date")

        meta = IncomeMeta(
            description=pick(changes.description, income.description),
            category_id=pick(changes.category_id, income.category_id),
            source=pick(changes.source, income.source),
        )
        required = charity_required(amount, self._rate)
        if not self._charity.update_income_with_charity(
            income.income_id,
            business_id=int(business_id),
            amount=amount,
            income_date=income_date,
            meta=meta,
            amount_required=required,
        ):
            raise NotFoundError(f"Income record {income_id} not found")

        logger.info("Income %s updated to %s; charity requires %s", income_id, amount, required)
        return self._load(business_id, income.income_id)

    def delete_income(self, business_id: int, income_id: int) -> None:
        if not self._charity.delete_income(int(income_id), business_id=int(business_id)):
            raise NotFoundError(f"Income record {income_id} not found")
        logger.info("Income %s deleted with its charity obligation", income_id)

    def get_income(self, business_id: int, income_id: int) -> IncomeWithCharity:
        return self._load(business_id, income_id)

    def record_charity_payment(
        self,
        business_id: int,
        charity_id: int,
        amount,
        payment_date: date,
        *,
        recipient: Optional[str] = None,
        description: Optional[str] = None,
    ) -> CharityRecord:
        requested = to_decimal(amount, "payment_amount")
        if requested <= 0:
            raise ValidationError("payment_amount must be greater than zero", field="payment_amount")
        if payment_date is None:
            raise ValidationError("payment_date is required", field="payment_date")

        charity = self.get_charity(business_id, charity_id)
        if requested > charity.remaining:
            logger.warning(
                "Charity payment of %s rejected: only %s remaining on charity %s",
                requested,
                charity.remaining,
                charity_id,
            )
            raise ExceedsBalanceError(
                f"Payment of {requested} exceeds remaining balance of {charity.remaining}",
                error_data={"remaining": str(charity.remaining)},
            )
        amount = require_positive_amount(requested, "payment_amount")

        new_paid = to_money(charity.amount_paid + amount)
        payment_id = self._charity.record_payment(
            charity.charity_id,
            business_id=int(business_id),
            expected_paid=charity.amount_paid,
            expected_required=charity.amount_required,
            new_paid=new_paid,
            new_status=derive_charity_status(charity.amount_required, new_paid),
            amount=amount,
            payment_date=payment_date,
            recipient=recipient,
            description=description,
        )
        if payment_id is None:
            raise ConflictError("Charity record was changed concurrently; retry")

        logger.info("Charity payment %s of %s recorded on charity %s", payment_id, amount, charity_id)
        return self.get_charity(business_id, charity_id)

    def get_charity(self, business_id: int, charity_id: int) -> CharityRecord:
        charity = self._charity.get_charity(int(charity_id), business_id=int(business_id))
        if not charity:
            raise NotFoundError(f"Charity record {charity_id} not found")
        return charity

    def list_charity(self, business_id: int, *, status: Optional[CharityStatus] = None) -> Sequence[CharityRecord]:
        return self._charity.list_charity(
            business_id=int(business_id),
            status=CharityStatus(status) if status is not None else None,
        )

    def list_payments(self, business_id: int, charity_id: int) -> Sequence[CharityPayment]:
        charity = self.get_charity(business_id, charity_id)
        return self._charity.list_payments(charity.charity_id, business_id=int(business_id))

    def charity_summary(self, business_id: int) -> CharitySummary:
        return self._charity.summary(business_id=int(business_id))

    def _load(self, business_id: int, income_id: int) -> IncomeWithCharity:
        income = self._charity.get_income(int(income_id), business_id=int(business_id))
        if not income:
            raise NotFoundError(f"Income record {income_id} not found")
        charity = self._charity.get_charity_for_income(income.income_id, business_id=int(business_id))
        if not charity:
            raise NotFoundError(f"Charity record for income {income_id} not found")
        return IncomeWithCharity(income=income, charity=charity)
