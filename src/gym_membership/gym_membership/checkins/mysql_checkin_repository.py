from __future__ import annotations

from datetime import date, datetime
from typing import Sequence

from ..database.mysql_base import fetchall, fetchone, from_db_datetime, to_db_datetime
from .model import Checkin
from .repository import CheckinRepository


def _to_checkin(row: dict) -> Checkin:
    return Checkin(
        checkin_id=int(row["checkin_id"]),
        student_id=int(row["student_id"]),
        created_at=from_db_datetime(row["created_at"]),
    )


class MySQLCheckinRepository(CheckinRepository):
    def __init__(self, cur):
        self._cur = cur

    def exists_between(self, student_id: int, start: datetime, end: datetime) -> bool:
        self._cur.execute(
            """
            SELECT 1 AS found
            FROM checkins
            WHERE student_id=%s AND created_at BETWEEN %s AND %s
            LIMIT 1
            """,
            (int(student_id), to_db_datetime(start), to_db_datetime(end)),
        )
        return fetchone(self._cur) is not None

    def count_between(self, student_id: int, start: datetime, end: datetime) -> int:
        self._cur.execute(
            """
            SELECT COUNT(*) AS total
            FROM checkins
            WHERE student_id=%s AND created_at BETWEEN %s AND %s
            """,
            (int(student_id), to_db_datetime(start), to_db_datetime(end)),
        )
        row = fetchone(self._cur)
        return int(row["total"]) if row else 0

    def create(self, *, student_id: int, created_at: datetime, checkin_day: date) -> Checkin:
        self._cur.execute(
            "INSERT INTO checkins(student_id, created_at, checkin_day) VALUES(%s,%s,%s)",
            (int(student_id), to_db_datetime(created_at), checkin_day),
        )
        return Checkin(checkin_id=int(self._cur.lastrowid), student_id=int(student_id), created_at=created_at)

    def count_for_student(self, student_id: int) -> int:
        self._cur.execute(
            "SELECT COUNT(*) AS total FROM checkins WHERE student_id=%s",
            (int(student_id),),
        )
        row = fetchone(self._cur)
        return int(row["total"]) if row else 0

    def list_for_student(self, student_id: int, *, limit: int, offset: int) -> Sequence[Checkin]:
        self._cur.execute(
            """
            SELECT checkin_id, student_id, created_at
            FROM checkins
            WHERE student_id=%s
            ORDER BY created_at DESC, checkin_id DESC
            LIMIT %s OFFSET %s
            """,
            (int(student_id), int(limit), int(offset)),
        )
        return [_to_checkin(r) for r in fetchall(self._cur)]
