from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import mysql.connector
import pytest
from mysql.connector import errorcode

from src.gym_membership.gym_membership.core.exceptions import StoreConflictError
from src.gym_membership.gym_membership.database.bootstrap import iter_sql_statements
from src.gym_membership.gym_membership.database.mysql_base import (
    db_transaction,
    from_db_datetime,
    is_store_conflict,
    to_db_datetime,
)
from src.gym_membership.gym_membership.database.mysql_unit_of_work import MySQLUnitOfWork


class FakeCursor:
    def __init__(self, conn):
        self._conn = conn
        self.rowcount = 0
        self.lastrowid = 1

    def execute(self, sql, params=()):
        self._conn.executed.append((" ".join(sql.split()), params))
        if self._conn.fail_with is not None:
            raise self._conn.fail_with

    def fetchone(self):
        return {"student_id": 1, "name": "A", "email": "a@example.com"}

    def fetchall(self):
        return []

    def close(self):
        pass


class FakeConnection:
    def __init__(self, fail_with=None):
        self.fail_with = fail_with
        self.executed = []
        self.events = []

    def start_transaction(self, isolation_level=None):
        self.events.append(("start", isolation_level))

    def cursor(self, dictionary=False):
        return FakeCursor(self)

    def commit(self):
        self.events.append(("commit", None))

    def rollback(self):
        self.events.append(("rollback", None))

    def close(self):
        self.events.append(("close", None))


class FakeFactory:
    def __init__(self, conn):
        self.conn = conn

    def connect(self):
        return self.conn


def test_commit_on_success():
    conn = FakeConnection()
    with db_transaction(FakeFactory(conn), isolation_level="READ COMMITTED") as (_, cur):
        cur.execute("SELECT 1")

    assert conn.events == [("start", "READ COMMITTED"), ("commit", None), ("close", None)]


def test_duplicate_key_becomes_store_conflict():
    dup = mysql.connector.errors.IntegrityError(msg="Duplicate entry", errno=errorcode.ER_DUP_ENTRY)
    conn = FakeConnection(fail_with=dup)

    with pytest.raises(StoreConflictError) as exc:
        with db_transaction(FakeFactory(conn)) as (_, cur):
            cur.execute("INSERT INTO checkins ...")

    assert exc.value.__cause__ is dup
    assert ("rollback", None) in conn.events
    assert ("commit", None) not in conn.events
    assert conn.events[-1] == ("close", None)


def test_other_errors_propagate_after_rollback():
    conn = FakeConnection()
    with pytest.raises(ValueError):
        with db_transaction(FakeFactory(conn)):
            raise ValueError("boom")
    assert conn.events[-2:] == [("rollback", None), ("close", None)]


@pytest.mark.parametrize(
    "errno, expected",
    [
        (errorcode.ER_DUP_ENTRY, True),
        (errorcode.ER_LOCK_DEADLOCK, True),
        (errorcode.ER_LOCK_WAIT_TIMEOUT, True),
        (errorcode.ER_BAD_FIELD_ERROR, False),
    ],
)
def test_is_store_conflict(errno, expected):
    assert is_store_conflict(mysql.connector.Error(msg="x", errno=errno)) is expected


def test_student_transaction_takes_row_lock():
    conn = FakeConnection()
    uow = MySQLUnitOfWork(FakeFactory(conn))

    with uow.transaction(7) as tx:
        assert tx.students.get_by_id(7) is not None

    assert conn.executed[0] == ("SELECT student_id FROM students WHERE student_id=%s FOR UPDATE", (7,))


def test_checkin_create_stores_utc_and_day():
    conn = FakeConnection()
    uow = MySQLUnitOfWork(FakeFactory(conn))
    local = datetime(2024, 1, 10, 23, 30, tzinfo=timezone(timedelta(hours=-3)))

    with uow.transaction() as tx:
        checkin = tx.checkins.create(student_id=1, created_at=local, checkin_day=date(2024, 1, 10))

    sql, params = conn.executed[-1]
    assert sql.startswith("INSERT INTO checkins")
    assert params == (1, datetime(2024, 1, 11, 2, 30), date(2024, 1, 10))
    assert checkin.created_at == local


def test_datetime_round_trip_is_utc():
    aware = datetime(2024, 1, 10, 9, 0, tzinfo=timezone(timedelta(hours=2)))
    stored = to_db_datetime(aware)
    assert stored.tzinfo is None
    assert from_db_datetime(stored) == aware


def test_sql_splitter_ignores_semicolons_in_strings():
    statements = list(iter_sql_statements("INSERT INTO t VALUES ('a;b'); SELECT 1;"))
    assert statements == ["INSERT INTO t VALUES ('a;b')", "SELECT 1"]
