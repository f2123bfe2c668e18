import json
from datetime import date, datetime
from decimal import Decimal

from billnote.models import Bill, Tag, User


def _bill(**overrides):
    fields = dict(
        id=1,
        tag_id=2,
        transaction_date=date(2024, 3, 5),
        comment="lunch",
        created_time=datetime(2024, 3, 5, 12, 30, 0),
        updated_time=datetime(2024, 3, 5, 12, 30, 0),
        pay_method="cash",
        user_id=7,
        pay=Decimal("12.50"),
        tag_name="food",
    )
    fields.update(overrides)
    return Bill(**fields)


def test_to_dict_has_listing_keys():
    assert set(_bill().to_dict()) == {
        "id",
        "tag_id",
        "transaction_date",
        "comment",
        "created_time",
        "updated_time",
        "pay_method",
        "user_id",
        "pay",
        "tagName",
    }


def test_to_dict_values_round_trip():
    bill = _bill()
    data = bill.to_dict()
    assert Decimal(data["pay"]) == bill.pay
    assert date.fromisoformat(data["transaction_date"]) == bill.transaction_date
    assert datetime.fromisoformat(data["created_time"]) == bill.created_time
    assert data["tagName"] == "food"
    assert data["user_id"] == 7


def test_to_dict_pay_is_string_for_summing():
    rows = [_bill().to_dict(), _bill(id=2, pay=Decimal("7.50")).to_dict()]
    assert all(isinstance(row["pay"], str) for row in rows)
    assert sum(Decimal(row["pay"]) for row in rows) == Decimal("20.00")


def test_to_dict_handles_missing_values():
    data = _bill(pay=None, comment=None, tag_name=None).to_dict()
    assert data["pay"] is None
    assert data["comment"] is None
    assert data["tagName"] is None


def test_to_dict_is_json_serialisable():
    text = json.dumps(_bill().to_dict())
    assert json.loads(text)["pay_method"] == "cash"


def test_user_and_tag_equality():
    now = datetime(2024, 1, 1)
    assert User(1, "alice", "abc", now, now) == User(1, "alice", "abc", now, now)
    assert Tag(1, "food", now, now, 3).user_id == 3