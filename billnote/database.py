"""SQLite-backed storage for users, tags and bills, plus the shared connection."""

from __future__ import annotations

import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from pathlib import Path

from .errors import JsonError
from .models import Bill, Tag, User

_PAY_PLACES = Decimal("0.01")
_PAY_MAX_DIGITS = 12

_SCHEMA = """
CREATE TABLE IF NOT EXISTS user_tb (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    account TEXT NOT NULL,
    pass TEXT NOT NULL,
    created_time TEXT NOT NULL,
    updated_time TEXT NOT NULL
);
CREATE TABLE IF NOT EXISTS tag_tb (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    created_time TEXT NOT NULL,
    updated_time TEXT NOT NULL,
    user_id INTEGER NOT NULL
);
CREATE TABLE IF NOT EXISTS bill_tb (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    tag_id INTEGER NOT NULL
        REFERENCES tag_tb (id) ON UPDATE RESTRICT ON DELETE RESTRICT,
    transaction_date TEXT NOT NULL,
    comment TEXT,
    created_time TEXT NOT NULL,
    updated_time TEXT NOT NULL,
    pay_method TEXT NOT NULL,
    user_id INTEGER NOT NULL,
    pay TEXT
);
"""


@contextmanager
def _db_errors() -> Iterator[None]:
    """Turn storage failures into 500 JSON errors."""
    try:
        yield
    except sqlite3.Error as exc:
        raise JsonError.from_error(500, exc) from exc


def _sqlite_target(url: str) -> str:
    if url in ("sqlite::memory:", ":memory:"):
        return ":memory:"
    for prefix in ("sqlite://", "sqlite:"):
        if url.startswith(prefix):
            return url[len(prefix):]
    if "://" in url:
        raise ValueError(f"unsupported database url: {url}")
    return url


def _normalise_pay(pay: Decimal | None) -> str | None:
    if pay is None:
        return None
    value = Decimal(pay).quantize(_PAY_PLACES, rounding=ROUND_HALF_UP)
    if len(value.as_tuple().digits) > _PAY_MAX_DIGITS:
        raise JsonError.from_error(500, f"pay out of range: {pay}")
    return str(value)


def _user(row: sqlite3.Row) -> User:
    return User(
        id=row["id"],
        account=row["account"],
        password_hash=row["pass"],
        created_time=datetime.fromisoformat(row["created_time"]),
        updated_time=datetime.fromisoformat(row["updated_time"]),
    )


def _tag(row: sqlite3.Row) -> Tag:
    return Tag(
        id=row["id"],
        name=row["name"],
        created_time=datetime.fromisoformat(row["created_time"]),
        updated_time=datetime.fromisoformat(row["updated_time"]),
        user_id=row["user_id"],
    )


def _bill(row: sqlite3.Row) -> Bill:
    keys = row.keys()
    return Bill(
        id=row["id"],
        tag_id=row["tag_id"],
        transaction_date=date.fromisoformat(row["transaction_date"]),
        comment=row["comment"],
        created_time=datetime.fromisoformat(row["created_time"]),
        updated_time=datetime.fromisoformat(row["updated_time"]),
        pay_method=row["pay_method"],
        user_id=row["user_id"],
        pay=None if row["pay"] is None else Decimal(row["pay"]),
        tag_name=row["tagName"] if "tagName" in keys else None,
    )


class Database:
    """A connection to the bill book store."""

    def __init__(self, url: str) -> None:
        target = _sqlite_target(url)
        if target != ":memory:":
            Path(target).parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(target)
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA foreign_keys = ON")
        self._conn.executescript(_SCHEMA)

    def close(self) -> None:
        self._conn.close()

    def __enter__(self) -> Database:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def _one(self, sql: str, params: tuple) -> sqlite3.Row | None:
        with _db_errors():
            return self._conn.execute(sql, params).fetchone()

    def _insert(self, sql: str, params: tuple) -> int:
        with _db_errors(), self._conn:
            return self._conn.execute(sql, params).lastrowid

    def count_users_with_account(self, account: str) -> int:
        row = self._one("SELECT COUNT(*) FROM user_tb WHERE account = ?", (account,))
        return row[0]

    def find_user(self, account: str, password_hash: str) -> User | None:
        row = self._one(
            "SELECT * FROM user_tb WHERE account = ? AND pass = ? LIMIT 1",
            (account, password_hash),
        )
        return None if row is None else _user(row)

    def insert_user(self, account: str, password_hash: str, now: datetime) -> User:
        stamp = now.isoformat()
        user_id = self._insert(
            "INSERT INTO user_tb (account, pass, created_time, updated_time)"
            " VALUES (?, ?, ?, ?)",
            (account, password_hash, stamp, stamp),
        )
        return User(user_id, account, password_hash, now, now)

    def find_tag(self, tag_id: int, user_id: int) -> Tag | None:
        row = self._one(
            "SELECT * FROM tag_tb WHERE id = ? AND user_id = ? LIMIT 1",
            (tag_id, user_id),
        )
        return None if row is None else _tag(row)

    def count_tags_named(self, user_id: int, name: str) -> int:
        row = self._one(
            "SELECT COUNT(*) FROM tag_tb WHERE user_id = ? AND name = ?",
            (user_id, name),
        )
        return row[0]

    def insert_tag(self, user_id: int, name: str, now: datetime) -> Tag:
        stamp = now.isoformat()
        tag_id = self._insert(
            "INSERT INTO tag_tb (name, created_time, updated_time, user_id)"
            " VALUES (?, ?, ?, ?)",
            (name, stamp, stamp, user_id),
        )
        return Tag(tag_id, name, now, now, user_id)

    def insert_bill(
        self,
        user_id: int,
        tag_id: int,
        pay: Decimal | None,
        pay_method: str,
        comment: str | None,
        transaction_date: date,
        now: datetime,
    ) -> Bill:
        stamp = now.isoformat()
        stored_pay = _normalise_pay(pay)
        bill_id = self._insert(
            "INSERT INTO bill_tb (tag_id, transaction_date, comment, created_time,"
            " updated_time, pay_method, user_id, pay)"
            " VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
            (
                tag_id,
                transaction_date.isoformat(),
                comment,
                stamp,
                stamp,
                pay_method,
                user_id,
                stored_pay,
            ),
        )
        return Bill(
            id=bill_id,
            tag_id=tag_id,
            transaction_date=transaction_date,
            comment=comment,
            created_time=now,
            updated_time=now,
            pay_method=pay_method,
            user_id=user_id,
            pay=None if stored_pay is None else Decimal(stored_pay),
        )

    def bills_between(self, user_id: int, begin: date, end: date) -> list[Bill]:
        """Bills of ``user_id`` dated from ``begin`` to ``end`` inclusive, with tag names."""
        sql = (
            "SELECT bill_tb.*, tag_tb.name AS tagName FROM bill_tb"
            " LEFT JOIN tag_tb ON tag_tb.id = bill_tb.tag_id"
            " WHERE bill_tb.user_id = ?"
            " AND bill_tb.transaction_date <= ? AND bill_tb.transaction_date >= ?"
            " ORDER BY bill_tb.id"
        )
        with _db_errors():
            rows = self._conn.execute(
                sql, (user_id, end.isoformat(), begin.isoformat())
            ).fetchall()
        return [_bill(row) for row in rows]


_current: list[Database] = []


def init_database(url: str) -> Database:
    """Open the shared database; it may be opened only once."""
    if _current:
        raise RuntimeError("database connection is already initialised")
    db = Database(url)
    _current.append(db)
    return db


def get_database() -> Database:
    """Return the shared database, or raise if it was never opened."""
    if not _current:
        raise JsonError.from_value(
            {"status": "error", "code": 500, "msg": "database is unusable"}
        )
    return _current[0]


def _reset_database() -> None:
    while _current:
        _current.pop().close()