from datetime import datetime
from decimal import Decimal

import pytest

from backoffice.core.exceptions import NotFoundError, ValidationError
from backoffice.rules.model import NewAttendanceRule
from backoffice.rules.service import RuleService
from fakes import InMemoryRules


@pytest.fixture
def service():
    return RuleService(InMemoryRules())


def test_no_rule_resolves_to_none(service):
    assert service.resolve_active_rule(1) is None


def test_created_rule_is_inactive_until_activated(service):
    rule = service.create_rule(1, NewAttendanceRule(rule_name="Default"))

    assert not rule.is_active
    assert service.resolve_active_rule(1) is None

    service.activate_rule(1, rule.rule_id, now=datetime(2025, 2, 1))
    assert service.resolve_active_rule(1).rule_id == rule.rule_id


def test_activation_keeps_a_single_active_rule(service):
    first = service.create_rule(1, NewAttendanceRule(rule_name="A"), activate=True, now=datetime(2025, 2, 1))
    second = service.create_rule(1, NewAttendanceRule(rule_name="B"), activate=True, now=datetime(2025, 2, 2))

    assert service.resolve_active_rule(1).rule_id == second.rule_id
    active = [r for r in service.list_rules(1) if r.is_active]
    assert [r.rule_id for r in active] == [second.rule_id]

    # Re-activating an older rule makes it the effective one again.
    service.activate_rule(1, first.rule_id, now=datetime(2025, 2, 3))
    assert service.resolve_active_rule(1).rule_id == first.rule_id


def test_resolve_is_idempotent(service):
    service.create_rule(1, NewAttendanceRule(rule_name="A"), activate=True)

    assert service.resolve_active_rule(1) == service.resolve_active_rule(1)


def test_rules_are_scoped_by_business(service):
    rule = service.create_rule(1, NewAttendanceRule(rule_name="A"), activate=True)

    assert service.resolve_active_rule(2) is None
    with pytest.raises(NotFoundError):
        service.activate_rule(2, rule.rule_id)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"rule_name": "  "},
        {"rule_name": "A", "overtime_rate": Decimal("0")},
        {"rule_name": "A", "late_grace_period": -5},
        {"rule_name": "A", "half_day_threshold": -1},
        {"rule_name": "A", "late_penalty_type": "half-day"},
    ],
)
def test_invalid_rules_are_rejected(service, kwargs):
    with pytest.raises(ValidationError):
        service.create_rule(1, NewAttendanceRule(**kwargs))
    assert service.list_rules(1) == []


def test_penalty_type_is_normalized(service):
    rule = service.create_rule(1, NewAttendanceRule(rule_name="A", late_penalty_type=" Half_Day "))

    assert rule.late_penalty_type == "half_day"
    assert rule.penalizes_late_as_half_day
