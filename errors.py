# errors.py
"""Exception types raised by the query layer.

Only ``db_utils`` talks to the driver; everything above it sees these types.
"""


class ValidationError(ValueError):
    """Caller input is malformed or missing (empty selector, empty value...)."""


class ExecutionError(Exception):
    """The store could not run a statement or deliver its results."""


class ConnectionClosedError(ExecutionError):
    def __init__(self, message="The database connection is closed."):
        super().__init__(message)


class StatementRejectedError(ExecutionError):
    """The store refused the statement (constraint, syntax, privileges...)."""


class MissingColumnError(ExecutionError):
    def __init__(self, column):
        super().__init__(f"Column '{column}' is not part of the current result set.")
        self.column = column


class AuthError(Exception):
    def __init__(self, message="Invalid credentials supplied."):
        super().__init__(message)


class DatabaseConnectionError(Exception):
    """Bad address, port or credentials when opening the connection."""


class CatalogError(Exception):
    """The requested schema does not exist or cannot be selected."""
