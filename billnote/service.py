"""Account, tag and bill operations behind the bill book's HTTP endpoints."""

from __future__ import annotations

import hashlib
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from .database import Database
from .errors import JsonError
from .models import User

_DATE_FORMAT = "%Y-%m-%d"
_MIN_PASSWORD_LENGTH = 6


def _success(msg: Any) -> dict[str, Any]:
    return {"status": "success", "code": 200, "msg": msg}


def _bad_request(message: str) -> JsonError:
    return JsonError.from_error(400, message)


def _require_user(user_id: int | None) -> int:
    if user_id is None:
        raise JsonError.from_error(401, "unknown user")
    return user_id


def _parse_date(value: str | date | None, missing: str, invalid: str) -> date:
    if value is None:
        raise _bad_request(missing)
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(value, _DATE_FORMAT).date()
    except ValueError as exc:
        raise _bad_request(f"{invalid}：{exc}") from exc


def _parse_pay(value: str | Decimal | None) -> Decimal:
    if value is None:
        raise _bad_request("未获取到支出金额")
    try:
        amount = Decimal(value)
    except (InvalidOperation, ValueError, TypeError) as exc:
        raise _bad_request(f"无效的支出金额 invalid decimal: {value}") from exc
    if not amount.is_finite():
        raise _bad_request(f"无效的支出金额 invalid decimal: {value}")
    return amount


def _parse_tag_id(value: int | str | None) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    try:
        return int(str(value).strip()) if value is not None else _missing_tag()
    except ValueError as exc:
        raise _bad_request("未获取到交易标签") from exc


def _missing_tag() -> int:
    raise _bad_request("未获取到交易标签")


def hash_password(password: str) -> str:
    """Return the lower-case hex MD5 digest stored for ``password``."""
    return hashlib.md5(password.encode("utf-8")).hexdigest()


def register(db: Database, account: str | None, password: str | None) -> dict[str, Any]:
    """Create a new account and return the success response body."""
    if not account:
        raise _bad_request("未获取到有效账号")
    if not password:
        raise _bad_request("未获取到有效密码")
    if len(password) < _MIN_PASSWORD_LENGTH:
        raise _bad_request("密码至少6位")
    if db.count_users_with_account(account) != 0:
        raise _bad_request("账号已存在")
    db.insert_user(account, hash_password(password), datetime.now())
    return _success("注册成功")


def authenticate(db: Database, account: str | None, password: str | None) -> User:
    """Return the user whose account and password match, or raise a 400 error."""
    if account is None:
        raise _bad_request("account is required")
    if password is None:
        raise _bad_request("password is required")
    user = db.find_user(account, hash_password(password))
    if user is None:
        raise _bad_request("账户或密码错误")
    return user


def list_bills(
    db: Database,
    user_id: int | None,
    begin: str | date | None,
    end: str | date | None,
) -> dict[str, Any]:
    """List a user's bills dated from ``begin`` to ``end`` with their total pay."""
    user_id = _require_user(user_id)
    begin_date = _parse_date(begin, "未获取到起始日期", "起始日期解析错误")
    end_date = _parse_date(end, "未获取到结束日期", "结束日期解析错误")
    if end_date < begin_date:
        raise _bad_request("无效的日期范围")
    bills = db.bills_between(user_id, begin_date, end_date)
    total = sum((bill.pay for bill in bills if bill.pay is not None), Decimal("0.00"))
    return _success(
        {
            "data": {
                "list": [bill.to_dict() for bill in bills],
                "pay_amount": str(total),
            }
        }
    )


def add_bill(
    db: Database,
    user_id: int | None,
    pay: str | Decimal | None,
    pay_method: str | None,
    comment: str | None,
    transaction_date: str | date | None,
    tag_id: int | str | None,
) -> dict[str, Any]:
    """Record a spending entry under one of the user's tags."""
    user_id = _require_user(user_id)
    amount = _parse_pay(pay)
    if pay_method is None:
        raise _bad_request("未获取到支付方式")
    if comment is None:
        raise _bad_request("未获取到备注")
    day = _parse_date(transaction_date, "未获取到交易日期", "交易日期解析错误")
    tag = _parse_tag_id(tag_id)
    if db.find_tag(tag, user_id) is None:
        raise _bad_request("无效的标签")
    db.insert_bill(user_id, tag, amount, pay_method, comment, day, datetime.now())
    return _success("新增成功")


def add_tag(db: Database, user_id: int | None, name: str | None) -> dict[str, Any]:
    """Create a tag for the user unless one with that name exists."""
    user_id = _require_user(user_id)
    if name is None:
        raise _bad_request("未获取到有效标签")
    if db.count_tags_named(user_id, name) != 0:
        raise _bad_request("标签已存在")
    db.insert_tag(user_id, name, datetime.now())
    return _success("新增成功")