"""Records stored in the bill book: users, tags and bills."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Any


@dataclass(slots=True)
class User:
    """A registered account; ``password_hash`` is the hex digest of the password."""

    id: int
    account: str
    password_hash: str
    created_time: datetime
    updated_time: datetime


@dataclass(slots=True)
class Tag:
    """A per-user label that bills are filed under."""

    id: int
    name: str
    created_time: datetime
    updated_time: datetime
    user_id: int


@dataclass(slots=True)
class Bill:
    """One spending entry; ``tag_name`` is filled when read joined with its tag."""

    id: int
    tag_id: int
    transaction_date: date
    comment: str | None
    created_time: datetime
    updated_time: datetime
    pay_method: str
    user_id: int
    pay: Decimal | None
    tag_name: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-ready form used in bill listings."""
        return {
            "id": self.id,
            "tag_id": self.tag_id,
            "transaction_date": self.transaction_date.isoformat(),
            "comment": self.comment,
            "created_time": self.created_time.isoformat(),
            "updated_time": self.updated_time.isoformat(),
            "pay_method": self.pay_method,
            "user_id": self.user_id,
            "pay": None if self.pay is None else str(self.pay),
            "tagName": self.tag_name,
        }