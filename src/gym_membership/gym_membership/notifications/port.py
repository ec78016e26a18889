from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Protocol

from loguru import logger

from ..memberships.model import Membership
from ..plans.model import Plan
from ..students.model import Student


@dataclass(frozen=True)
class MembershipConfirmed:
    """Event handed to the mail/queue system after an enrollment commits."""

    membership: Membership
    student: Student
    plan: Plan


class NotificationPort(Protocol):
    def notify(self, event: MembershipConfirmed) -> None:
        raise NotImplementedError


class LoggingNotifier(NotificationPort):
    """Default port when no mail queue is wired: records the hand-off only."""

    def notify(self, event: MembershipConfirmed) -> None:
        logger.info(
            "membership confirmed: membership={} student={} <{}> plan='{}' {} -> {} price={}",
            event.membership.membership_id,
            event.student.student_id,
            event.student.email,
            event.plan.title,
            event.membership.start_date.isoformat(),
            event.membership.end_date.isoformat(),
            event.membership.price,
        )


class BackgroundNotifier(NotificationPort):
    """Non-blocking emit: the delegate runs on a worker thread.

    Delivery retries belong to the delegate (the queue system); failures here
    are only logged.
    """

    def __init__(self, delegate: NotificationPort, *, max_workers: int = 1):
        self._delegate = delegate
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="notify")

    def notify(self, event: MembershipConfirmed) -> None:
        future = self._executor.submit(self._delegate.notify, event)
        future.add_done_callback(lambda f: self._log_failure(f, event))

    @staticmethod
    def _log_failure(future: Future, event: MembershipConfirmed) -> None:
        exc = future.exception()
        if exc is not None:
            logger.opt(exception=exc).error(
                "membership confirmation dispatch failed (membership={})", event.membership.membership_id
            )

    def shutdown(self, *, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)
