"""Errors that carry a JSON body and an HTTP status."""

from __future__ import annotations

import json
from typing import Any

_DEFAULT_STATUS = 400


def _status_from_code(code: int) -> int:
    """Return ``code`` if it is a valid HTTP status number, else 400."""
    if 100 <= code <= 999:
        return code
    return _DEFAULT_STATUS


class JsonError(Exception):
    """An error answered to the client as a JSON document."""

    def __init__(self, status: int, body: Any) -> None:
        super().__init__(body)
        self.status = status
        self.body = body

    @classmethod
    def from_value(cls, value: Any) -> JsonError:
        """Wrap an arbitrary JSON value; the status is always 400."""
        return cls(_DEFAULT_STATUS, value)

    @classmethod
    def from_error(cls, code: int, message: object) -> JsonError:
        """Build the standard ``{"status": "error", ...}`` body for ``message``."""
        body = {"status": "error", "code": code, "msg": str(message)}
        return cls(_status_from_code(code), body)

    def to_json(self) -> str:
        """Serialise the body compactly, keeping non-ASCII text as is."""
        return json.dumps(
            self.body, ensure_ascii=False, separators=(",", ":"), sort_keys=True
        )

    def __str__(self) -> str:
        return self.to_json()