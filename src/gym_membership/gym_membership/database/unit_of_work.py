from __future__ import annotations

from dataclasses import dataclass
from typing import ContextManager, Optional, Protocol

from ..checkins.repository import CheckinRepository
from ..memberships.repository import MembershipRepository
from ..plans.repository import PlanRepository
from ..students.repository import StudentRepository


@dataclass(frozen=True)
class TransactionScope:
    """Repositories bound to one open transaction."""

    students: StudentRepository
    plans: PlanRepository
    memberships: MembershipRepository
    checkins: CheckinRepository


class UnitOfWork(Protocol):
    def transaction(self, student_id: Optional[int] = None) -> ContextManager[TransactionScope]:
        """Open a transaction.

        With ``student_id`` the transaction holds that student's exclusive lock
        until it commits or rolls back; other students are never blocked.
        Without it, no student lock is taken (plan catalog writes, lookups).
        """

        raise NotImplementedError
