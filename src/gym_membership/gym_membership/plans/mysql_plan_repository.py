from __future__ import annotations

from decimal import Decimal
from typing import Optional, Sequence

from ..database.mysql_base import fetchall, fetchone
from .model import Plan
from .repository import PlanRepository


def _to_plan(row: dict) -> Plan:
    return Plan(
        plan_id=int(row["plan_id"]),
        title=row["title"],
        duration=int(row["duration"]),
        price=Decimal(str(row["price"])),
    )


class MySQLPlanRepository(PlanRepository):
    def __init__(self, cur):
        self._cur = cur

    def get_by_id(self, plan_id: int) -> Optional[Plan]:
        self._cur.execute(
            "SELECT plan_id, title, duration, price FROM plans WHERE plan_id=%s",
            (int(plan_id),),
        )
        row = fetchone(self._cur)
        return _to_plan(row) if row else None

    def get_by_title(self, title: str) -> Optional[Plan]:
        self._cur.execute(
            "SELECT plan_id, title, duration, price FROM plans WHERE title=%s",
            (title,),
        )
        row = fetchone(self._cur)
        return _to_plan(row) if row else None

    def list_all(self) -> Sequence[Plan]:
        self._cur.execute("SELECT plan_id, title, duration, price FROM plans ORDER BY plan_id")
        return [_to_plan(r) for r in fetchall(self._cur)]

    def create(self, *, title: str, duration: int, price: Decimal) -> int:
        self._cur.execute(
            "INSERT INTO plans(title, duration, price) VALUES(%s,%s,%s)",
            (title, int(duration), price),
        )
        return int(self._cur.lastrowid)

    def update(self, *, plan_id: int, title: str, duration: int, price: Decimal) -> bool:
        self._cur.execute(
            "UPDATE plans SET title=%s, duration=%s, price=%s WHERE plan_id=%s",
            (title, int(duration), price, int(plan_id)),
        )
        return self._cur.rowcount > 0

    def delete(self, plan_id: int) -> bool:
        self._cur.execute("DELETE FROM plans WHERE plan_id=%s", (int(plan_id),))
        return self._cur.rowcount > 0
