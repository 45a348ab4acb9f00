from __future__ import annotations

from flask import Flask, g, jsonify

from ..common.datetime_utils import parse_time
from ..common.web import business_required, json_body
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.schedule_service

    @app.route("/api/employees/<int:employee_id>/schedules", methods=["GET"], endpoint="schedules_list")
    @business_required
    def list_schedules(employee_id: int):
        schedules = service.list_for_employee(business_id=g.business_id, employee_id=employee_id)
        return jsonify({"schedules": [s.to_dict() for s in schedules]})

    @app.route(
        "/api/employees/<int:employee_id>/schedules/<int:day_of_week>",
        methods=["PUT"],
        endpoint="schedules_set",
    )
    @business_required
    def set_schedule(employee_id: int, day_of_week: int):
        data = json_body()
        schedule_id = service.set_schedule(
            business_id=g.business_id,
            employee_id=employee_id,
            day_of_week=day_of_week,
            start_time=parse_time(data.get("start_time"), "start_time"),
            end_time=parse_time(data.get("end_time"), "end_time"),
        )
        return jsonify({"id": schedule_id, "employee_id": employee_id, "day_of_week": day_of_week})

    @app.route(
        "/api/employees/<int:employee_id>/schedules/<int:day_of_week>",
        methods=["DELETE"],
        endpoint="schedules_delete",
    )
    @business_required
    def remove_schedule(employee_id: int, day_of_week: int):
        service.remove_schedule(business_id=g.business_id, employee_id=employee_id, day_of_week=day_of_week)
        return jsonify({"message": "Schedule removed"})
