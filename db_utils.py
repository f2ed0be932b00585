# db_utils.py
import logging

import oracledb
import pandas as pd

from errors import (
    CatalogError, ConnectionClosedError, DatabaseConnectionError, ExecutionError,
    MissingColumnError, StatementRejectedError, ValidationError,
)
from sanitizer import clean_identifier

logger = logging.getLogger(__name__)

# Separator used by QueryExecutor.columns for one row
COLUMN_SEPARATOR = ":"


def _error_message(exc):
    """Extracts the ORA-xxxxx message from a driver exception."""
    if not exc.args:
        return str(exc)
    error_obj = exc.args[0]
    return getattr(error_obj, "message", str(error_obj))


# --- Connection Management ---

def connect(host, port, user, password, service):
    """Opens a connection to the Oracle server at host:port/service."""
    if not host or not port or int(port) <= 0 or user is None or password is None:
        raise DatabaseConnectionError("Bad database information entered.")

    dsn = f"{host}:{int(port)}/{service}"
    try:
        connection = oracledb.connect(user=user, password=password, dsn=dsn)
    except oracledb.Error as e:
        logger.warning("Connection to %s as %s failed: %s", dsn, user, _error_message(e))
        raise DatabaseConnectionError("Invalid database address/port or credentials entered.") from e

    logger.info("Connected to %s as %s", dsn, user)
    return connection


def select_catalog(connection, schema):
    """Makes `schema` the default schema for unqualified table names."""
    try:
        schema_name = clean_identifier(schema)
    except ValidationError as e:
        raise CatalogError(f"Invalid schema name: {schema!r}") from e

    try:
        with connection.cursor() as cursor:
            cursor.execute(f"ALTER SESSION SET CURRENT_SCHEMA = {schema_name}")
    except oracledb.DatabaseError as e:
        raise CatalogError(f"Could not select the {schema_name} schema: {_error_message(e)}") from e
    logger.info("Current schema set to %s", schema_name)


# --- Result Sets ---

class RowCursor:
    """An open result set, read one row at a time."""

    def __init__(self, cursor, on_error=None):
        self._cursor = cursor
        self._on_error = on_error
        # Oracle reports unquoted column names in upper case.
        self.column_names = [col[0] for col in cursor.description or []]
        self._index = {name.upper(): i for i, name in enumerate(self.column_names)}
        self.current = None
        self.closed = False

    def advance(self):
        """
        Moves to the next row. Returns False once the rows are exhausted.
        Row level errors (e.g. ORA-01722) can surface here rather than at execute time.
        """
        if self.closed:
            return False
        try:
            self.current = self._cursor.fetchone()
        except oracledb.DatabaseError as e:
            self.current = None
            error = StatementRejectedError(_error_message(e))
            if self._on_error is not None:
                self._on_error(error)
            raise error from e
        return self.current is not None

    def index_of(self, name):
        try:
            return self._index[name.upper()]
        except KeyError:
            raise MissingColumnError(name) from None

    def close(self):
        if self.closed:
            return
        self.closed = True
        self.current = None
        try:
            self._cursor.close()
        except oracledb.Error as e:
            # The server side cursor is gone already (connection dropped).
            logger.debug("Ignoring error while closing cursor: %s", _error_message(e))


class QueryExecutor:
    """
    Runs statements on one connection. Only one RowCursor is live at a time:
    every new statement releases the previous result set first.
    """

    def __init__(self, connection):
        self.connection = connection
        self.last_error = None
        self._cursor = None

    def is_open(self):
        if self.connection is None:
            return False
        try:
            return self.connection.is_healthy()
        except oracledb.Error:
            return False

    def release(self):
        if self._cursor is not None:
            self._cursor.close()
            self._cursor = None

    def _fail(self, error):
        self.last_error = error
        logger.warning("%s", error)
        return error

    def _open_cursor(self):
        if not self.is_open():
            raise self._fail(ConnectionClosedError())
        try:
            return self.connection.cursor()
        except oracledb.Error as e:
            raise self._fail(ConnectionClosedError(_error_message(e))) from e

    def execute(self, statement):
        """Runs a query and returns its RowCursor."""
        self.release()
        cursor = self._open_cursor()

        logger.debug("Query: %s", statement.sql)
        try:
            cursor.execute(statement.sql, list(statement.params))
        except oracledb.DatabaseError as e:
            cursor.close()
            raise self._fail(StatementRejectedError(_error_message(e))) from e

        self._cursor = RowCursor(cursor, on_error=self._fail)
        return self._cursor

    def run(self, statement):
        """Runs a statement without a result set and commits it. Returns the affected row count."""
        self.release()
        cursor = self._open_cursor()

        logger.debug("Command: %s", statement.sql)
        try:
            with cursor:
                cursor.execute(statement.sql, list(statement.params))
                row_count = cursor.rowcount
            self.connection.commit()
        except oracledb.DatabaseError as e:
            raise self._fail(StatementRejectedError(_error_message(e))) from e
        return row_count

    def column(self, cursor, name):
        """Value of `name` in the cursor's current row, as text (None for SQL NULL)."""
        if cursor.current is None:
            raise self._fail(ExecutionError("The result set is not positioned on a row."))
        try:
            value = cursor.current[cursor.index_of(name)]
        except MissingColumnError as e:
            raise self._fail(e)
        return None if value is None else str(value)

    def columns(self, cursor, *names):
        values = [self.column(cursor, name) for name in names]
        return COLUMN_SEPARATOR.join("" if v is None else v for v in values)

    def fetch_tuples(self, statement, *names):
        """One separator-joined string per row holding the requested columns."""
        cursor = self.execute(statement)
        try:
            rows = []
            while cursor.advance():
                rows.append(self.columns(cursor, *names))
            return rows
        finally:
            self.release()

    def fetch_frame(self, statement):
        """Runs a query and returns every row as a DataFrame."""
        cursor = self.execute(statement)
        try:
            rows = []
            while cursor.advance():
                rows.append(cursor.current)
            return pd.DataFrame(rows, columns=cursor.column_names)
        finally:
            self.release()

    def close(self):
        self.release()
        if self.connection is None:
            return
        try:
            self.connection.close()
        except oracledb.Error as e:
            logger.debug("Ignoring error while closing connection: %s", _error_message(e))
        self.connection = None
