from __future__ import annotations

from typing import Optional

from ..database.mysql_base import fetchone
from .model import Student
from .repository import StudentRepository


class MySQLStudentRepository(StudentRepository):
    def __init__(self, cur):
        self._cur = cur

    def get_by_id(self, student_id: int) -> Optional[Student]:
        self._cur.execute(
            """
            SELECT student_id, name, email
            FROM students
            WHERE student_id=%s
            """,
            (int(student_id),),
        )
        row = fetchone(self._cur)
        if not row:
            return None
        return Student(student_id=int(row["student_id"]), name=row["name"], email=row["email"])

    def lock(self, student_id: int) -> bool:
        """Row lock held until the enclosing transaction ends."""
        self._cur.execute(
            "SELECT student_id FROM students WHERE student_id=%s FOR UPDATE",
            (int(student_id),),
        )
        return fetchone(self._cur) is not None
