from datetime import date
from decimal import Decimal

import pytest

from backoffice.charity.model import IncomeMeta, IncomeUpdate, derive_charity_status
from backoffice.charity.service import CharityService
from backoffice.core.enums import CharityStatus
from backoffice.core.exceptions import (
    ConflictError,
    ExceedsBalanceError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from fakes import InMemoryCharity

TODAY = date(2025, 4, 10)


@pytest.fixture
def repo():
    return InMemoryCharity()


@pytest.fixture
def service(repo):
    return CharityService(repo)


def test_income_creates_pending_charity(service):
    result = service.create_income_with_charity(1, "1000", TODAY, IncomeMeta(description="Sales"))

    assert result.income.amount == Decimal("1000.00")
    assert result.charity.amount_required == Decimal("25.00")
    assert result.charity.amount_paid == Decimal("0.00")
    assert result.charity.status == CharityStatus.PENDING
    assert result.charity.description == "Charity for income: Sales"


def test_full_payment_then_any_further_payment_exceeds_balance(service):
    charity = service.create_income_with_charity(1, "1000", TODAY).charity

    paid = service.record_charity_payment(1, charity.charity_id, "25.00", TODAY)
    assert paid.status == CharityStatus.PAID
    assert paid.remaining == Decimal("0.00")

    with pytest.raises(ExceedsBalanceError) as exc:
        service.record_charity_payment(1, charity.charity_id, "0.01", TODAY)
    assert isinstance(exc.value, InvalidStateError)
    assert service.get_charity(1, charity.charity_id).amount_paid == Decimal("25.00")


def test_partial_payments_are_ledgered(service):
    charity = service.create_income_with_charity(1, "1000", TODAY).charity

    first = service.record_charity_payment(1, charity.charity_id, "10", TODAY, recipient="Food bank")
    assert first.status == CharityStatus.PARTIAL
    assert first.recipient == "Food bank"

    service.record_charity_payment(1, charity.charity_id, "15", date(2025, 4, 11))
    payments = service.list_payments(1, charity.charity_id)
    assert [p.amount for p in payments] == [Decimal("10.00"), Decimal("15.00")]
    assert service.get_charity(1, charity.charity_id).status == CharityStatus.PAID


def test_overpayment_is_rejected(service):
    charity = service.create_income_with_charity(1, "1000", TODAY).charity

    with pytest.raises(ExceedsBalanceError):
        service.record_charity_payment(1, charity.charity_id, "25.01", TODAY)


@pytest.mark.parametrize("amount", ["0", "-5", "abc", "0.004"])
def test_invalid_amounts(service, amount):
    with pytest.raises(ValidationError):
        service.create_income_with_charity(1, amount, TODAY)


def test_update_recomputes_required_amount_and_status(service):
    created = service.create_income_with_charity(1, "1000", TODAY)
    service.record_charity_payment(1, created.charity.charity_id, "20", TODAY)

    raised = service.update_income(1, created.income.income_id, IncomeUpdate(amount=Decimal("2000")))
    assert raised.charity.amount_required == Decimal("50.00")
    assert raised.charity.status == CharityStatus.PARTIAL

    lowered = service.update_income(1, created.income.income_id, IncomeUpdate(amount=Decimal("800")))
    assert lowered.charity.amount_required == Decimal("20.00")
    assert lowered.charity.status == CharityStatus.PAID


def test_update_keeps_unset_fields_and_clears_none(service):
    created = service.create_income_with_charity(1, "1000", TODAY, IncomeMeta(description="Sales", source="shop"))

    updated = service.update_income(1, created.income.income_id, IncomeUpdate(source=None))

    assert updated.income.description == "Sales"
    assert updated.income.source is None
    assert updated.income.amount == Decimal("1000.00")


def test_amount_cannot_be_cleared(service):
    created = service.create_income_with_charity(1, "1000", TODAY)

    with pytest.raises(ValidationError):
        service.update_income(1, created.income.income_id, IncomeUpdate(amount=None))


def test_delete_income_cascades(service, repo):
    created = service.create_income_with_charity(1, "1000", TODAY)
    service.record_charity_payment(1, created.charity.charity_id, "5", TODAY)

    service.delete_income(1, created.income.income_id)

    assert repo.charities == {}
    assert repo.payments == {}
    with pytest.raises(NotFoundError):
        service.get_charity(1, created.charity.charity_id)


def test_summary_and_scoping(service):
    a = service.create_income_with_charity(1, "1000", TODAY).charity
    service.create_income_with_charity(1, "400", TODAY)
    service.create_income_with_charity(2, "999", TODAY)
    service.record_charity_payment(1, a.charity_id, "25", TODAY)

    summary = service.charity_summary(1)
    assert summary.total_required == Decimal("35.00")
    assert summary.total_paid == Decimal("25.00")
    assert summary.total_remaining == Decimal("10.00")

    with pytest.raises(NotFoundError):
        service.record_charity_payment(2, a.charity_id, "1", TODAY)
    assert len(service.list_charity(1, status=CharityStatus.PENDING)) == 1


def test_custom_rate():
    service = CharityService(InMemoryCharity(), rate=Decimal("0.1"))

    assert service.create_income_with_charity(1, "123.45", TODAY).charity.amount_required == Decimal("12.35")


def test_status_derivation():
    assert derive_charity_status(Decimal("25"), Decimal("0")) == CharityStatus.PENDING
    assert derive_charity_status(Decimal("25"), Decimal("1")) == CharityStatus.PARTIAL
    assert derive_charity_status(Decimal("25"), Decimal("25")) == CharityStatus.PAID


def test_sub_cent_payment_on_settled_charity_exceeds_balance(service, repo):
    charity = service.create_income_with_charity(1, "1000", TODAY).charity
    service.record_charity_payment(1, charity.charity_id, "25", TODAY)

    with pytest.raises(ExceedsBalanceError):
        service.record_charity_payment(1, charity.charity_id, "0.004", TODAY)
    assert len(repo.payments) == 1


def test_payment_rounding_to_zero_is_rejected(service, repo):
    charity = service.create_income_with_charity(1, "1000", TODAY).charity

    with pytest.raises(ValidationError):
        service.record_charity_payment(1, charity.charity_id, "0.004", TODAY)
    assert repo.payments == {}
    assert service.get_charity(1, charity.charity_id).status == CharityStatus.PENDING


class IncomeChangesDuringPayment(InMemoryCharity):
    """Runs ``interleave`` right before the payment write lands."""

    def __init__(self):
        super().__init__()
        self.interleave = None

    def record_payment(self, charity_id, **kwargs):
        if self.interleave is not None:
            step, self.interleave = self.interleave, None
            step()
        return super().record_payment(charity_id, **kwargs)


def test_payment_checked_against_stale_obligation_is_not_applied():
    repo = IncomeChangesDuringPayment()
    service = CharityService(repo)
    created = service.create_income_with_charity(1, "1000", TODAY)
    repo.interleave = lambda: service.update_income(
        1, created.income.income_id, IncomeUpdate(amount=Decimal("400"))
    )

    with pytest.raises(ConflictError):
        service.record_charity_payment(1, created.charity.charity_id, "25", TODAY)

    charity = service.get_charity(1, created.charity.charity_id)
    assert charity.amount_required == Decimal("10.00")
    assert charity.amount_paid == Decimal("0.00")
    assert repo.payments == {}
    # Retrying against the fresh figures now hits the balance check.
    with pytest.raises(ExceedsBalanceError):
        service.record_charity_payment(1, created.charity.charity_id, "25", TODAY)
