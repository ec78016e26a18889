from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Optional

from loguru import logger

from ..checkins.mysql_checkin_repository import MySQLCheckinRepository
from ..core.constants import DEFAULT_TX_ISOLATION
from ..memberships.mysql_membership_repository import MySQLMembershipRepository
from ..plans.mysql_plan_repository import MySQLPlanRepository
from ..students.mysql_student_repository import MySQLStudentRepository
from .connection import DatabaseConnection
from .mysql_base import db_transaction
from .unit_of_work import TransactionScope, UnitOfWork


class MySQLUnitOfWork(UnitOfWork):
    """Transactions on MySQL/InnoDB.

    The per-student lock is a ``SELECT ... FOR UPDATE`` on the student's row,
    so requests for different students only ever lock different rows. The
    unique keys in ``schema.sql`` back the same invariants at commit time.
    """

    def __init__(self, conn_factory: DatabaseConnection, *, isolation_level: str = DEFAULT_TX_ISOLATION):
        self._conn_factory = conn_factory
        self._isolation_level = isolation_level

    @contextmanager
    def transaction(self, student_id: Optional[int] = None) -> Iterator[TransactionScope]:
        with db_transaction(self._conn_factory, isolation_level=self._isolation_level) as (_, cur):
            students = MySQLStudentRepository(cur)
            if student_id is not None and not students.lock(student_id):
                logger.debug("no student row to lock for student_id={}", student_id)

            yield TransactionScope(
                students=students,
                plans=MySQLPlanRepository(cur),
                memberships=MySQLMembershipRepository(cur),
                checkins=MySQLCheckinRepository(cur),
            )
