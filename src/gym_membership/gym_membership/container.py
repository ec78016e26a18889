from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from loguru import logger

from .checkins.policy import AttendancePolicy
from .common.clock import Clock, SystemClock
from .core.constants import (
    DEFAULT_CHECKIN_WINDOW_DAYS,
    DEFAULT_TIMEZONE,
    DEFAULT_TX_ISOLATION,
    DEFAULT_WEEKLY_CHECKIN_LIMIT,
    STORE_CONFLICT_RETRIES,
)
from .core.enums import StoreBackend
from .database.connection import DatabaseConnection, DBConfig
from .database.memory_store import InMemoryUnitOfWork
from .database.mysql_unit_of_work import MySQLUnitOfWork
from .database.unit_of_work import UnitOfWork
from .engine.facade import PolicyEngine
from .memberships.lifecycle import MembershipLifecycle
from .notifications.port import BackgroundNotifier, LoggingNotifier, NotificationPort
from .plans.service import PlanService


@dataclass(frozen=True)
class Container:
    clock: Clock
    uow: UnitOfWork
    notifier: NotificationPort

    engine: PolicyEngine
    plan_service: PlanService


def _build_uow(settings) -> UnitOfWork:
    backend = StoreBackend(str(getattr(settings, "STORE_BACKEND", StoreBackend.MYSQL.value)).lower())
    if backend is StoreBackend.MEMORY:
        return InMemoryUnitOfWork()

    conn = DatabaseConnection.get_instance(DBConfig.from_dict(settings.DB_CONFIG))
    return MySQLUnitOfWork(conn, isolation_level=getattr(settings, "TX_ISOLATION", DEFAULT_TX_ISOLATION))


def build_container(
    settings,
    *,
    clock: Optional[Clock] = None,
    uow: Optional[UnitOfWork] = None,
    notifier: Optional[NotificationPort] = None,
) -> Container:
    clock = clock or SystemClock(getattr(settings, "TIMEZONE", DEFAULT_TIMEZONE))
    uow = uow or _build_uow(settings)

    if notifier is None:
        notifier = LoggingNotifier()
        if getattr(settings, "NOTIFY_ASYNC", False):
            notifier = BackgroundNotifier(notifier)

    attendance = AttendancePolicy(
        clock.tz,
        weekly_limit=getattr(settings, "WEEKLY_CHECKIN_LIMIT", DEFAULT_WEEKLY_CHECKIN_LIMIT),
        window_days=getattr(settings, "CHECKIN_WINDOW_DAYS", DEFAULT_CHECKIN_WINDOW_DAYS),
    )
    engine = PolicyEngine(
        uow,
        clock=clock,
        notifier=notifier,
        lifecycle=MembershipLifecycle(),
        attendance=attendance,
        store_conflict_retries=getattr(settings, "STORE_CONFLICT_RETRIES", STORE_CONFLICT_RETRIES),
    )
    logger.debug("container ready: store={} tz={}", type(uow).__name__, clock.tz)

    return Container(
        clock=clock,
        uow=uow,
        notifier=notifier,
        engine=engine,
        plan_service=PlanService(uow),
    )
