import os
import sys

import pytest


sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))


class FakeCursor:
    """Stands in for an oracledb cursor; plays back the connection's queued responses."""

    def __init__(self, connection):
        self.connection = connection
        self.description = None
        self.rowcount = 0
        self.closed = False
        self._rows = []
        self._fetch_error = None

    def execute(self, sql, params=None):
        self.connection.executed.append((sql, list(params or [])))
        response = self.connection.responses.pop(0) if self.connection.responses else {}
        if isinstance(response, Exception):
            raise response
        columns = response.get("columns")
        self.description = [(name, None) for name in columns] if columns else None
        self._rows = list(response.get("rows", []))
        self.rowcount = response.get("rowcount", len(self._rows))
        self._fetch_error = response.get("fetch_error")

    def fetchone(self):
        if not self._rows and self._fetch_error is not None:
            raise self._fetch_error
        return self._rows.pop(0) if self._rows else None

    def close(self):
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()


class FakeConnection:
    def __init__(self, responses=()):
        self.responses = list(responses)
        self.executed = []
        self.cursors = []
        self.commits = 0
        self.open = True

    def cursor(self):
        cursor = FakeCursor(self)
        self.cursors.append(cursor)
        return cursor

    def is_healthy(self):
        return self.open

    def commit(self):
        self.commits += 1

    def close(self):
        self.open = False


@pytest.fixture()
def connection():
    return FakeConnection()


@pytest.fixture()
def executor(connection):
    from db_utils import QueryExecutor
    return QueryExecutor(connection)
