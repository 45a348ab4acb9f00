from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Sequence, Tuple

from ..core.enums import CharityStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, db_cursor, fetchall, fetchone
from .model import (
    CharityPayment,
    CharityRecord,
    CharitySummary,
    IncomeMeta,
    IncomeRecord,
    derive_charity_status,
)
from .repository import CharityRepository

_CHARITY_SELECT = """
    SELECT id, business_id, income_id, amount_required, amount_paid, status, description, recipient
    FROM charity
"""


def _to_income(r: dict) -> IncomeRecord:
    return IncomeRecord(
        income_id=int(r["id"]),
        business_id=int(r["business_id"]),
        amount=as_decimal(r["amount"]),
        income_date=r["income_date"],
        description=r.get("description"),
        category_id=int(r["category_id"]) if r.get("category_id") is not None else None,
        source=r.get("source"),
    )


def _to_charity(r: dict) -> CharityRecord:
    return CharityRecord(
        charity_id=int(r["id"]),
        business_id=int(r["business_id"]),
        income_id=int(r["income_id"]),
        amount_required=as_decimal(r["amount_required"]),
        amount_paid=as_decimal(r.get("amount_paid")),
        status=CharityStatus(r["status"]),
        description=r.get("description"),
        recipient=r.get("recipient"),
    )


def _to_payment(r: dict) -> CharityPayment:
    return CharityPayment(
        payment_id=int(r["id"]),
        charity_id=int(r["charity_id"]),
        amount=as_decimal(r["payment_amount"]),
        payment_date=r["payment_date"],
        recipient=r.get("recipient"),
        description=r.get("description"),
    )


class MySQLCharityRepository(CharityRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_income(self, income_id: int, *, business_id: int) -> Optional[IncomeRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, business_id, amount, income_date, description, category_id, source
                FROM income WHERE id=%s AND business_id=%s
                """,
                (int(income_id), int(business_id)),
            )
            r = fetchone(cur)
            return _to_income(r) if r else None

    def get_charity(self, charity_id: int, *, business_id: int) -> Optional[CharityRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_CHARITY_SELECT + " WHERE id=%s AND business_id=%s", (int(charity_id), int(business_id)))
            r = fetchone(cur)
            return _to_charity(r) if r else None

    def get_charity_for_income(self, income_id: int, *, business_id: int) -> Optional[CharityRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _CHARITY_SELECT + " WHERE income_id=%s AND business_id=%s",
                (int(income_id), int(business_id)),
            )
            r = fetchone(cur)
            return _to_charity(r) if r else None

    def list_charity(
        self, *, business_id: int, status: Optional[CharityStatus] = None
    ) -> Sequence[CharityRecord]:
        sql = _CHARITY_SELECT + " WHERE business_id=%s"
        params: list = [int(business_id)]
        if status is not None:
            sql += " AND status=%s"
            params.append(CharityStatus(status).value)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql + " ORDER BY id DESC", tuple(params))
            return [_to_charity(r) for r in fetchall(cur)]

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO income (business_id, amount, income_date, description, category_id, source)
                VALUES (%s, %s, %s, %s, %s, %s)
                """,
                (int(business_id), amount, income_date, meta.description, meta.category_id, meta.source),
            )
            income_id = int(cur.lastrowid)
            cur.execute(
                """
                INSERT INTO charity (business_id, income_id, amount_required, amount_paid, status, description)
                VALUES (%s, %s, %s, 0, %s, %s)
                """,
                (
                    int(business_id),
                    income_id,
                    amount_required,
                    CharityStatus.PENDING.value,
                    charity_description,
                ),
            )
            return income_id, int(cur.lastrowid)

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id FROM income WHERE id=%s AND business_id=%s FOR UPDATE",
                (int(income_id), int(business_id)),
            )
            if not fetchone(cur):
                return False

            cur.execute(
                """
                UPDATE income
                SET amount=%s, income_date=%s, description=%s, category_id=%s, source=%s
                WHERE id=%s AND business_id=%s
                """,
                (
                    amount,
                    income_date,
                    meta.description,
                    meta.category_id,
                    meta.source,
                    int(income_id),
                    int(business_id),
                ),
            )

            cur.execute(
                "SELECT id, amount_paid FROM charity WHERE income_id=%s AND business_id=%s FOR UPDATE",
                (int(income_id), int(business_id)),
            )
            charity = fetchone(cur)
            if charity:
                status = derive_charity_status(amount_required, as_decimal(charity.get("amount_paid")))
                cur.execute(
                    "UPDATE charity SET amount_required=%s, status=%s WHERE id=%s",
                    (amount_required, status.value, int(charity["id"])),
                )
            else:
                cur.execute(
                    """
                    INSERT INTO charity (business_id, income_id, amount_required, amount_paid, status)
                    VALUES (%s, %s, %s, 0, %s)
                    """,
                    (int(business_id), int(income_id), amount_required, CharityStatus.PENDING.value),
                )
            return True

    def delete_income(self, income_id: int, *, business_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                DELETE cp FROM charity_payments cp
                JOIN charity c ON c.id = cp.charity_id
                WHERE c.income_id=%s AND c.business_id=%s
                """,
                (int(income_id), int(business_id)),
            )
            cur.execute(
                "DELETE FROM charity WHERE income_id=%s AND business_id=%s",
                (int(income_id), int(business_id)),
            )
            cur.execute(
                "DELETE FROM income WHERE id=%s AND business_id=%s",
                (int(income_id), int(business_id)),
            )
            return cur.rowcount > 0

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE charity
                SET amount_paid=%s, status=%s,
                    recipient=COALESCE(%s, recipient), description=COALESCE(%s, description)
                WHERE id=%s AND business_id=%s AND amount_paid=%s AND amount_required=%s
                """,
                (
                    new_paid,
                    CharityStatus(new_status).value,
                    recipient,
                    description,
                    int(charity_id),
                    int(business_id),
                    expected_paid,
                    expected_required,
                ),
            )
            if cur.rowcount == 0:
                return None

            cur.execute(
                """
                INSERT INTO charity_payments
                    (charity_id, business_id, payment_amount, payment_date, recipient, description)
                VALUES (%s, %s, %s, %s, %s, %s)
                """,
                (int(charity_id), int(business_id), amount, payment_date, recipient, description),
            )
            return int(cur.lastrowid)

    def list_payments(self, charity_id: int, *, business_id: int) -> Sequence[CharityPayment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, charity_id, payment_amount, payment_date, recipient, description
                FROM charity_payments
                WHERE charity_id=%s AND business_id=%s
                ORDER BY payment_date ASC, id ASC
                """,
                (int(charity_id), int(business_id)),
            )
            return [_to_payment(r) for r in fetchall(cur)]

    def summary(self, *, business_id: int) -> CharitySummary:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COALESCE(SUM(amount_required), 0) AS total_required,
                       COALESCE(SUM(amount_paid), 0) AS total_paid
                FROM charity WHERE business_id=%s
                """,
                (int(business_id),),
            )
            r = fetchone(cur) or {}
            return CharitySummary(
                total_required=as_decimal(r.get("total_required")),
                total_paid=as_decimal(r.get("total_paid")),
            )
