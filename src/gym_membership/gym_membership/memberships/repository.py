from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from .model import Membership, MembershipTerms


class MembershipRepository(Protocol):
    """Membership storage keyed by student (one row per student)."""

    def get_by_id(self, membership_id: int) -> Optional[Membership]:
        raise NotImplementedError

    def get_for_student(self, student_id: int) -> Optional[Membership]:
        raise NotImplementedError

    def create(self, *, student_id: int, terms: MembershipTerms, created_at: datetime) -> Membership:
        raise NotImplementedError

    def update_terms(self, *, membership_id: int, terms: MembershipTerms) -> Membership:
        raise NotImplementedError

    def set_active(self, membership_id: int, *, active: bool) -> Membership:
        raise NotImplementedError

    def delete(self, membership_id: int) -> bool:
        raise NotImplementedError
