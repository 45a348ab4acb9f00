from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from ..common.money import to_money
from ..common.partial import UNSET
from ..core.enums import CharityStatus


def charity_required(amount: Decimal, rate: Decimal) -> Decimal:
    return to_money(Decimal(amount) * Decimal(rate))


def derive_charity_status(amount_required: Decimal, amount_paid: Decimal) -> CharityStatus:
    if amount_required - amount_paid <= 0:
        return CharityStatus.PAID
    if amount_paid > 0:
        return CharityStatus.PARTIAL
    return CharityStatus.PENDING


@dataclass(frozen=True)
class IncomeMeta:
    description: Optional[str] = None
    category_id: Optional[int] = None
    source: Optional[str] = None


@dataclass(frozen=True)
class IncomeRecord:
    income_id: int
    business_id: int
    amount: Decimal
    income_date: date
    description: Optional[str] = None
    category_id: Optional[int] = None
    source: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.income_id,
            "amount": str(to_money(self.amount)),
            "date": self.income_date.isoformat(),
            "description": self.description,
            "category_id": self.category_id,
            "source": self.source,
        }


@dataclass(frozen=True)
class CharityRecord:
    """Charity obligation derived from one income record."""

    charity_id: int
    business_id: int
    income_id: int
    amount_required: Decimal
    amount_paid: Decimal
    status: CharityStatus
    description: Optional[str] = None
    recipient: Optional[str] = None

    @property
    def remaining(self) -> Decimal:
        return to_money(self.amount_required - self.amount_paid)

    def to_dict(self) -> dict:
        return {
            "id": self.charity_id,
            "income_id": self.income_id,
            "amount_required": str(to_money(self.amount_required)),
            "amount_paid": str(to_money(self.amount_paid)),
            "remaining": str(self.remaining),
            "status": self.status.value,
            "description": self.description,
            "recipient": self.recipient,
        }


@dataclass(frozen=True)
class CharityPayment:
    payment_id: int
    charity_id: int
    amount: Decimal
    payment_date: date
    recipient: Optional[str] = None
    description: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.payment_id,
            "charity_id": self.charity_id,
            "amount": str(to_money(self.amount)),
            "payment_date": self.payment_date.isoformat(),
            "recipient": self.recipient,
            "description": self.description,
        }


@dataclass(frozen=True)
class IncomeWithCharity:
    income: IncomeRecord
    charity: CharityRecord

    def to_dict(self) -> dict:
        return {"income": self.income.to_dict(), "charity": self.charity.to_dict()}


@dataclass(frozen=True)
class IncomeUpdate:
    """Each field is UNSET, None or a value. ``amount`` and ``income_date`` cannot be cleared."""

    amount: Optional[Decimal] = UNSET
    income_date: Optional[date] = UNSET
    description: Optional[str] = UNSET
    category_id: Optional[int] = UNSET
    source: Optional[str] = UNSET


@dataclass(frozen=True)
class CharitySummary:
    total_required: Decimal
    total_paid: Decimal

    @property
    def total_remaining(self) -> Decimal:
        return to_money(self.total_required - self.total_paid)

    def to_dict(self) -> dict:
        return {
            "total_required": str(to_money(self.total_required)),
            "total_paid": str(to_money(self.total_paid)),
            "total_remaining": str(self.total_remaining),
        }
