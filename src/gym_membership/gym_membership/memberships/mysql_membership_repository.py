from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from ..core.exceptions import MembershipNotFound
from ..database.mysql_base import fetchone, from_db_date, from_db_datetime, to_db_datetime
from .model import Membership, MembershipTerms
from .repository import MembershipRepository

_COLUMNS = "membership_id, student_id, plan_id, start_date, end_date, price, active, created_at"


def _to_membership(row: dict) -> Membership:
    return Membership(
        membership_id=int(row["membership_id"]),
        student_id=int(row["student_id"]),
        plan_id=int(row["plan_id"]),
        start_date=from_db_date(row["start_date"]),
        end_date=from_db_date(row["end_date"]),
        price=Decimal(str(row["price"])),
        active=bool(row["active"]),
        created_at=from_db_datetime(row.get("created_at")),
    )


class MySQLMembershipRepository(MembershipRepository):
    def __init__(self, cur):
        self._cur = cur

    def get_by_id(self, membership_id: int) -> Optional[Membership]:
        self._cur.execute(
            f"SELECT {_COLUMNS} FROM memberships WHERE membership_id=%s",
            (int(membership_id),),
        )
        row = fetchone(self._cur)
        return _to_membership(row) if row else None

    def get_for_student(self, student_id: int) -> Optional[Membership]:
        self._cur.execute(
            f"SELECT {_COLUMNS} FROM memberships WHERE student_id=%s",
            (int(student_id),),
        )
        row = fetchone(self._cur)
        return _to_membership(row) if row else None

    def create(self, *, student_id: int, terms: MembershipTerms, created_at: datetime) -> Membership:
        self._cur.execute(
            """
            INSERT INTO memberships(student_id, plan_id, start_date, end_date, price, active, created_at)
            VALUES(%s,%s,%s,%s,%s,%s,%s)
            """,
            (
                int(student_id),
                int(terms.plan_id),
                terms.start_date,
                terms.end_date,
                terms.price,
                False,
                to_db_datetime(created_at),
            ),
        )
        return self._require(int(self._cur.lastrowid))

    def update_terms(self, *, membership_id: int, terms: MembershipTerms) -> Membership:
        self._cur.execute(
            """
            UPDATE memberships
            SET plan_id=%s, start_date=%s, end_date=%s, price=%s
            WHERE membership_id=%s
            """,
            (int(terms.plan_id), terms.start_date, terms.end_date, terms.price, int(membership_id)),
        )
        return self._require(membership_id)

    def set_active(self, membership_id: int, *, active: bool) -> Membership:
        self._cur.execute(
            "UPDATE memberships SET active=%s WHERE membership_id=%s",
            (bool(active), int(membership_id)),
        )
        return self._require(membership_id)

    def delete(self, membership_id: int) -> bool:
        self._cur.execute("DELETE FROM memberships WHERE membership_id=%s", (int(membership_id),))
        return self._cur.rowcount > 0

    def _require(self, membership_id: int) -> Membership:
        membership = self.get_by_id(membership_id)
        if not membership:
            raise MembershipNotFound()
        return membership
