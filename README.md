# billnote

A small bookkeeping library for recording personal spending, stored in SQLite.
Each user has an account and a password, files expenses under tags of their
own, and records bills with an amount, a payment method, a comment and a
transaction date. Listing the bills in a date range also gives the total
amount paid.

It uses only the standard library.

## Configuration

`billnote.config.load_config(path="./config.toml")` reads a TOML file and
returns a frozen `Config` with four string fields:

```toml
host = "127.0.0.1:8080"
database_url = "billnote.db"
secret_key = "secret"
base_path = ""
```

A missing field, a field that is not a string, or a file that is not valid
TOML raises `billnote.config.ConfigError` (a `ValueError`). Unknown keys are
ignored. Only `database_url` is used by the rest of the package; `host`,
`secret_key` and `base_path` are read and kept for the caller.

## Storage

`billnote.database.Database(url)` opens an SQLite database and creates the
`user_tb`, `tag_tb` and `bill_tb` tables if needed. The url may be a plain file
path, `sqlite:<path>`, `sqlite://<path>`, or `sqlite::memory:` / `:memory:` for
an in-memory database; any other `scheme://` url raises `ValueError`. The
parent directory of a file path is created. `Database` is a context manager and
closes its connection on exit.

`init_database(url)` opens one shared `Database` for the process and raises
`RuntimeError` if called a second time; `get_database()` returns it, or raises
a `JsonError` (status 400, `"msg": "database is unusable"`) if it was never
opened.

Amounts are stored rounded half-up to two decimal places; an amount with more
than twelve digits is refused with a 500 `JsonError`. Storage failures are
raised as 500 `JsonError`s.

## Usage

```python
from billnote.config import load_config
from billnote.database import init_database, get_database
from billnote.service import register, authenticate, add_tag, add_bill, list_bills

config = load_config("config.toml")
init_database(config.database_url)
db = get_database()

password = "password"
register(db, "alice", password)
user = authenticate(db, "alice", password)

add_tag(db, user.id, "food")
add_bill(db, user.id, "12.50", "cash", "lunch", "2024-05-01", 1)
result = list_bills(db, user.id, "2024-05-01", "2024-05-31")
print(result["msg"]["data"]["pay_amount"])  # "12.50"
```

`register`, `add_tag` and `add_bill` return
`{"status": "success", "code": 200, "msg": ...}`. `authenticate` returns the
matching `billnote.models.User`. `list_bills` returns
`{"status": "success", "code": 200, "msg": {"data": {"list": [...], "pay_amount": "..."}}}`,
where each list entry is `Bill.to_dict()` (dates in ISO form, `pay` as a
string, and the tag's name under `"tagName"`), ordered by bill id.

The service functions take a `user_id` that may be `None`; then they raise a
401 `JsonError` ("unknown user"). Dates may be given as `date` objects or as
`YYYY-MM-DD` strings, amounts as `Decimal` or strings, and tag ids as integers
or numeric strings.

## Rules

- An account needs a non-empty name and a non-empty password of at least six
  characters; an account name can be registered only once.
- Passwords are stored as lower-case hex MD5 digests (`hash_password`).
- A tag name is unique per user.
- A bill must refer to a tag that belongs to the same user.
- A bill amount must be a finite decimal number.
- A date range whose end comes before its beginning is refused; both ends are
  inclusive.

## Errors

Every refusal is raised as `billnote.errors.JsonError`, an `Exception` with a
`status` and a JSON `body`. `JsonError.from_error(code, message)` builds the
body `{"status": "error", "code": <code>, "msg": <message>}`, with `status`
set to `code`, or to 400 when `code` is outside 100–999.
`JsonError.from_value(value)` wraps any value with status 400. `to_json()`
serialises the body compactly with sorted keys, keeping non-ASCII text as is.

## Modules

- `billnote.config` – `Config`, `ConfigError`, `load_config`
- `billnote.database` – `Database`, `init_database`, `get_database`
- `billnote.models` – `User`, `Tag`, `Bill`
- `billnote.errors` – `JsonError`
- `billnote.service` – `hash_password`, `register`, `authenticate`,
  `add_tag`, `add_bill`, `list_bills`

## What it does not do

billnote is a library only. It has no HTTP server and no command to start one,
does not listen on `host` or route under `base_path`, and does not issue or
check sign-in tokens with `secret_key`: `authenticate` returns the user, and
the caller decides how to keep them signed in. It sets up no logging. Storage
is SQLite only.