"""Personal bill bookkeeping on SQLite: accounts, tags and dated expense records."""

__version__ = "0.1.0"