from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Student:
    """Domain entity: Student.

    Note: Owned by the registration side of the back office; read-only here.
    """

    student_id: int
    name: str
    email: str
