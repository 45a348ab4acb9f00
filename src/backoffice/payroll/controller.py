from __future__ import annotations

from flask import Flask, g, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.partial import UNSET
from ..common.validators import require_id, to_decimal
from ..common.web import business_required, field, json_body, optional_str, parse_enum
from ..container import Container
from ..core.enums import PayrollStatus
from ..core.exceptions import ValidationError
from .model import PayrollAdjustments, PayrollUpdate

_ADJUSTMENT_FIELDS = (
    "bonus",
    "allowances",
    "tax_deduction",
    "insurance_deduction",
    "other_deductions",
)


def _period(data: dict):
    return (
        parse_iso_date(data.get("pay_period_start"), "pay_period_start"),
        parse_iso_date(data.get("pay_period_end"), "pay_period_end"),
    )


def _optional_money(data: dict, name: str):
    value = data.get(name)
    return None if value is None else to_decimal(value, name)


def _money_field(data: dict, name: str):
    value = field(data, name)
    if value is UNSET or value is None:
        return value
    return to_decimal(value, name)


def register(app: Flask, container: Container) -> None:
    service = container.payroll_service

    @app.route("/api/payroll/calculate", methods=["POST"], endpoint="payroll_calculate")
    @business_required
    def calculate():
        data = json_body()
        start, end = _period(data)
        computation = service.compute_payroll(
            g.business_id, require_id(data.get("employee_id"), "employee_id"), start, end
        )
        return jsonify(computation.to_dict())

    @app.route("/api/payroll", methods=["POST"], endpoint="payroll_create")
    @business_required
    def create():
        data = json_body()
        start, end = _period(data)
        adjustments = PayrollAdjustments(
            **{name: to_decimal(data.get(name, 0), name) for name in _ADJUSTMENT_FIELDS},
            basic_salary=_optional_money(data, "basic_salary"),
            overtime_amount=_optional_money(data, "overtime_amount"),
            pay_method=optional_str(data.get("pay_method")),
            notes=optional_str(data.get("notes")),
        )
        record = service.create_payroll(
            g.business_id,
            require_id(data.get("employee_id"), "employee_id"),
            start,
            end,
            adjustments,
        )
        return jsonify(record.to_dict()), 201

    @app.route("/api/payroll/bulk-create", methods=["POST"], endpoint="payroll_bulk_create")
    @business_required
    def bulk_create():
        data = json_body()
        start, end = _period(data)
        employee_ids = data.get("employee_ids")
        if not isinstance(employee_ids, list) or not employee_ids:
            raise ValidationError("employee_ids must be a non-empty list", field="employee_ids")
        result = service.bulk_create_payroll(
            g.business_id,
            [require_id(e, "employee_ids") for e in employee_ids],
            start,
            end,
        )
        return jsonify(result.to_dict())

    @app.route("/api/payroll", methods=["GET"], endpoint="payroll_list")
    @business_required
    def list_records():
        args = request.args
        employee_id = args.get("employee_id")
        records = service.list_payroll(
            g.business_id,
            employee_id=require_id(employee_id, "employee_id") if employee_id else None,
            status=parse_enum(PayrollStatus, args.get("status") or None, "status"),
            start=parse_iso_date(args["start"], "start") if args.get("start") else None,
            end=parse_iso_date(args["end"], "end") if args.get("end") else None,
        )
        return jsonify({"payroll": [r.to_dict() for r in records]})

    @app.route("/api/payroll/<int:payroll_id>", methods=["GET"], endpoint="payroll_get")
    @business_required
    def get(payroll_id: int):
        return jsonify(service.get_payroll(g.business_id, payroll_id).to_dict())

    @app.route("/api/payroll/<int:payroll_id>", methods=["PATCH", "PUT"], endpoint="payroll_update")
    @business_required
    def update(payroll_id: int):
        data = json_body()
        pay_method = field(data, "pay_method")
        notes = field(data, "notes")
        changes = PayrollUpdate(
            basic_salary=_money_field(data, "basic_salary"),
            overtime_amount=_money_field(data, "overtime_amount"),
            bonus=_money_field(data, "bonus"),
            allowances=_money_field(data, "allowances"),
            tax_deduction=_money_field(data, "tax_deduction"),
            insurance_deduction=_money_field(data, "insurance_deduction"),
            other_deductions=_money_field(data, "other_deductions"),
            pay_method=UNSET if pay_method is UNSET else optional_str(pay_method),
            notes=UNSET if notes is UNSET else optional_str(notes),
        )
        return jsonify(service.update_payroll(g.business_id, payroll_id, changes).to_dict())

    @app.route("/api/payroll/<int:payroll_id>/status", methods=["PUT"], endpoint="payroll_status")
    @business_required
    def update_status(payroll_id: int):
        data = json_body()
        status = parse_enum(PayrollStatus, data.get("status"), "status")
        if status is None:
            raise ValidationError("status is required", field="status")
        payment_date = data.get("payment_date")
        record = service.update_status(
            g.business_id,
            payroll_id,
            status,
            payment_date=parse_iso_date(payment_date, "payment_date") if payment_date else None,
        )
        return jsonify(record.to_dict())

    @app.route("/api/payroll/<int:payroll_id>/recompute", methods=["POST"], endpoint="payroll_recompute")
    @business_required
    def recompute(payroll_id: int):
        return jsonify(service.recompute_payroll(g.business_id, payroll_id).to_dict())

    @app.route("/api/payroll/<int:payroll_id>", methods=["DELETE"], endpoint="payroll_delete")
    @business_required
    def delete(payroll_id: int):
        service.delete_payroll(g.business_id, payroll_id)
        return jsonify({"message": "Payroll record deleted"})
