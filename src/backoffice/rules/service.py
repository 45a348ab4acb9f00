from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from decimal import Decimal
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import require_non_empty, require_non_negative_int, to_decimal
from ..core.enums import LatePenaltyType
from ..core.exceptions import NotFoundError, ValidationError
from .model import AttendanceRule, NewAttendanceRule
from .repository import RuleRepository

logger = logging.getLogger(__name__)


class RuleService:
    """Resolves and maintains the single effective attendance rule per business.

    No caching: every resolve reads current data so a rule change applies to
    the very next evaluated event.
    """

    def __init__(self, rules: RuleRepository):
        self._rules = rules

    def resolve_active_rule(self, business_id: int) -> Optional[AttendanceRule]:
        """None means "no policy"; callers apply the documented defaults."""
        return self._rules.get_active(business_id=int(business_id))

    def list_rules(self, business_id: int) -> Sequence[AttendanceRule]:
        return self._rules.list_for_business(business_id=int(business_id))

    def create_rule(
        self,
        business_id: int,
        rule: NewAttendanceRule,
        *,
        activate: bool = False,
        now: Optional[datetime] = None,
    ) -> AttendanceRule:
        rule = self._validate(rule)
        rule_id = self._rules.create(business_id=int(business_id), rule=rule)
        logger.info("Attendance rule %s created for business %s", rule_id, business_id)

        if activate:
            return self.activate_rule(business_id, rule_id, now=now)

        created = self._rules.get_by_id(rule_id, business_id=int(business_id))
        if not created:
            raise NotFoundError(f"Attendance rule {rule_id} not found")
        return created

    def activate_rule(self, business_id: int, rule_id: int, *, now: Optional[datetime] = None) -> AttendanceRule:
        now = now or now_local()
        if not self._rules.activate(int(rule_id), business_id=int(business_id), activated_at=now):
            raise NotFoundError(f"Attendance rule {rule_id} not found")

        logger.info("Attendance rule %s activated for business %s", rule_id, business_id)
        rule = self._rules.get_by_id(int(rule_id), business_id=int(business_id))
        if not rule:
            raise NotFoundError(f"Attendance rule {rule_id} not found")
        return rule

    @staticmethod
    def _validate(rule: NewAttendanceRule) -> NewAttendanceRule:
        name = require_non_empty(rule.rule_name, "rule_name")
        rate = to_decimal(rule.overtime_rate, "overtime_rate")
        if rate <= Decimal("0"):
            raise ValidationError("overtime_rate must be greater than zero", field="overtime_rate")

        raw_penalty = (rule.late_penalty_type or LatePenaltyType.NONE.value).strip().lower()
        try:
            penalty = LatePenaltyType(raw_penalty).value
        except ValueError:
            allowed = ", ".join(p.value for p in LatePenaltyType)
            raise ValidationError(f"late_penalty_type must be one of: {allowed}", field="late_penalty_type")

        return replace(
            rule,
            rule_name=name,
            late_grace_period=require_non_negative_int(rule.late_grace_period, "late_grace_period"),
            half_day_threshold=require_non_negative_int(rule.half_day_threshold, "half_day_threshold"),
            overtime_threshold=require_non_negative_int(rule.overtime_threshold, "overtime_threshold"),
            overtime_rate=rate,
            late_penalty_type=penalty,
        )
