from __future__ import annotations

from flask import Flask, g, jsonify

from ..common.validators import to_decimal
from ..common.web import business_required, json_body, parse_bool
from ..container import Container
from ..core.constants import DEFAULT_OVERTIME_RATE
from .model import NewAttendanceRule


def register(app: Flask, container: Container) -> None:
    service = container.rule_service

    @app.route("/api/attendance-rules", methods=["GET"], endpoint="rules_list")
    @business_required
    def list_rules():
        return jsonify({"rules": [r.to_dict() for r in service.list_rules(g.business_id)]})

    @app.route("/api/attendance-rules/active", methods=["GET"], endpoint="rules_active")
    @business_required
    def active_rule():
        rule = service.resolve_active_rule(g.business_id)
        return jsonify({"rule": rule.to_dict() if rule else None})

    @app.route("/api/attendance-rules", methods=["POST"], endpoint="rules_create")
    @business_required
    def create_rule():
        data = json_body()
        rule = NewAttendanceRule(
            rule_name=str(data.get("rule_name") or ""),
            late_grace_period=data.get("late_grace_period"),
            late_penalty_type=str(data.get("late_penalty_type") or "none"),
            half_day_threshold=data.get("half_day_threshold"),
            overtime_threshold=data.get("overtime_threshold"),
            overtime_rate=to_decimal(data.get("overtime_rate", DEFAULT_OVERTIME_RATE), "overtime_rate"),
            weekend_overtime=parse_bool(data.get("weekend_overtime", False)),
            holiday_overtime=parse_bool(data.get("holiday_overtime", False)),
        )
        created = service.create_rule(g.business_id, rule, activate=parse_bool(data.get("activate", False)))
        return jsonify(created.to_dict()), 201

    @app.route("/api/attendance-rules/<int:rule_id>/activate", methods=["POST"], endpoint="rules_activate")
    @business_required
    def activate_rule(rule_id: int):
        return jsonify(service.activate_rule(g.business_id, rule_id).to_dict())
