from __future__ import annotations

from typing import Optional, Protocol

from .model import Student


class StudentRepository(Protocol):
    """Read side of the identity store for students."""

    def get_by_id(self, student_id: int) -> Optional[Student]:
        raise NotImplementedError
