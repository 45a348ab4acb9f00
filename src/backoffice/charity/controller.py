from __future__ import annotations

from flask import Flask, g, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.partial import UNSET
from ..common.validators import require_id
from ..common.web import business_required, field, json_body, optional_str, parse_enum
from ..container import Container
from ..core.enums import CharityStatus
from .model import IncomeMeta, IncomeUpdate


def _optional_id(value, name: str):
    return None if value is None else require_id(value, name)


def register(app: Flask, container: Container) -> None:
    service = container.charity_service

    @app.route("/api/income", methods=["POST"], endpoint="income_create")
    @business_required
    def create_income():
        data = json_body()
        result = service.create_income_with_charity(
            g.business_id,
            data.get("amount"),
            parse_iso_date(data.get("date"), "date"),
            IncomeMeta(
                description=optional_str(data.get("description")),
                category_id=_optional_id(data.get("category_id"), "category_id"),
                source=optional_str(data.get("source")),
            ),
        )
        return jsonify(result.to_dict()), 201

    @app.route("/api/income/<int:income_id>", methods=["GET"], endpoint="income_get")
    @business_required
    def get_income(income_id: int):
        return jsonify(service.get_income(g.business_id, income_id).to_dict())

    @app.route("/api/income/<int:income_id>", methods=["PATCH", "PUT"], endpoint="income_update")
    @business_required
    def update_income(income_id: int):
        data = json_body()
        income_date = field(data, "date")
        description = field(data, "description")
        category_id = field(data, "category_id")
        source = field(data, "source")
        changes = IncomeUpdate(
            amount=field(data, "amount"),
            income_date=income_date if income_date in (UNSET, None) else parse_iso_date(income_date, "date"),
            description=UNSET if description is UNSET else optional_str(description),
            category_id=UNSET if category_id is UNSET else _optional_id(category_id, "category_id"),
            source=UNSET if source is UNSET else optional_str(source),
        )
        return jsonify(service.update_income(g.business_id, income_id, changes).to_dict())

    @app.route("/api/income/<int:income_id>", methods=["DELETE"], endpoint="income_delete")
    @business_required
    def delete_income(income_id: int):
        service.delete_income(g.business_id, income_id)
        return jsonify({"message": "Income record deleted"})

    @app.route("/api/charity", methods=["GET"], endpoint="charity_list")
    @business_required
    def list_charity():
        status = parse_enum(CharityStatus, request.args.get("status") or None, "status")
        records = service.list_charity(g.business_id, status=status)
        return jsonify({"charity": [r.to_dict() for r in records]})

    @app.route("/api/charity/summary", methods=["GET"], endpoint="charity_summary")
    @business_required
    def summary():
        return jsonify(service.charity_summary(g.business_id).to_dict())

    @app.route("/api/charity/payment", methods=["POST"], endpoint="charity_payment")
    @business_required
    def record_payment():
        data = json_body()
        charity = service.record_charity_payment(
            g.business_id,
            require_id(data.get("charity_id"), "charity_id"),
            data.get("payment_amount"),
            parse_iso_date(data.get("payment_date"), "payment_date"),
            recipient=optional_str(data.get("recipient")),
            description=optional_str(data.get("description")),
        )
        return jsonify(charity.to_dict())

    @app.route("/api/charity/<int:charity_id>/payments", methods=["GET"], endpoint="charity_payments")
    @business_required
    def list_payments(charity_id: int):
        payments = service.list_payments(g.business_id, charity_id)
        return jsonify({"payments": [p.to_dict() for p in payments]})
