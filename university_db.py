# university_db.py
"""
University specific operations on top of the query layer.

Every action is checked against the logged in user's capabilities before a
statement is built. Failures come back as False (or an empty DataFrame); the
store's own error, if any, stays available in ``last_error``.
"""
import logging

import pandas as pd

import config
from auth import AuthSession
from db_utils import QueryExecutor, connect, select_catalog
from errors import AuthError, ExecutionError, ValidationError
from permissions import Operation, Role
from statements import build_delete, build_insert, build_select, build_update
from transcript import TRANSCRIPT_COLUMNS, TRANSCRIPT_ORDER, TranscriptRow, compute

logger = logging.getLogger(__name__)

# Columns prompted for, in table order (inserts supply every one of them).
TABLE_FIELDS = {
    "department": ("dept_name", "building"),
    "course": ("course_id", "title", "dept_name", "credits"),
    "section": ("course_id", "sec_id", "semester", "year", "building", "room_number", "time_slot_id"),
    "takes": ("course_id", "sec_id", "semester", "year"),
}

PRIMARY_KEYS = {
    "course": ("course_id",),
    "section": ("course_id", "sec_id", "semester", "year"),
}


def non_empty(values):
    """Keeps only the fields the user actually filled in."""
    return {key: value for key, value in values.items() if value is not None and str(value).strip()}


class UniversityDatabase:

    def __init__(self, executor, session=None, current_semester=None, current_year=None):
        self.executor = executor
        self.session = session if session is not None else AuthSession()
        self.current_semester = current_semester or config.CURRENT_SEMESTER
        self.current_year = current_year or config.CURRENT_YEAR

    @classmethod
    def open(cls, host=None, port=None, user=None, password=None, schema=None, service=None):
        """
        Connects and selects the university schema. DatabaseConnectionError and
        CatalogError propagate: the console cannot run without either.
        """
        connection = connect(
            host or config.DB_HOST,
            port or config.DB_PORT,
            user or config.DB_USER,
            password or config.DB_PASSWORD,
            service or config.DB_SERVICE,
        )
        try:
            select_catalog(connection, schema or config.UNIVERSITY_SCHEMA)
        except Exception:
            connection.close()
            raise
        return cls(QueryExecutor(connection))

    @property
    def last_error(self):
        return self.executor.last_error

    def close(self):
        self.executor.close()

    # --- Users ---

    def add_user(self, name, secret, role):
        try:
            principal = self.session.register(name, secret, role)
        except ValidationError:
            return False
        if principal.role == Role.STUDENT:
            return self._ensure_student_record(principal)
        return True

    def _ensure_student_record(self, principal):
        query = build_select("student", "WHERE ID = :1", ("ID",), (principal.student_id,))
        try:
            if principal.student_id in self.executor.fetch_tuples(query, "ID"):
                return True
            self.executor.run(build_insert(
                "student",
                [principal.student_id, principal.name, config.DEFAULT_STUDENT_DEPARTMENT, "0"],
            ))
        except ExecutionError:
            return False
        return True

    def authenticate(self, name, secret):
        try:
            self.session.authenticate(name, secret)
        except AuthError:
            return False
        return True

    def current_user(self):
        return self.session.current()

    def _allowed(self, table, operation):
        if self.session.authorize(table, operation):
            return True
        logger.warning("%s is not allowed to %s on %s", self.current_user(), operation.value, table)
        return False

    # --- Retrieval ---

    def _frame(self, table, clause=None, params=(), columns=None):
        statement = build_select(table, clause, columns or TABLE_FIELDS[table], params)
        try:
            return self.executor.fetch_frame(statement)
        except ExecutionError:
            return pd.DataFrame()

    def department_info(self):
        if not self._allowed("department", Operation.RETRIEVE):
            return pd.DataFrame()
        return self._frame("department")

    def course_info(self):
        if not self._allowed("course", Operation.RETRIEVE):
            return pd.DataFrame()
        return self._frame("course", "ORDER BY course_id")

    def section_info(self):
        if not self._allowed("section", Operation.RETRIEVE):
            return pd.DataFrame()
        return self._frame("section", "ORDER BY year DESC, course_id, sec_id")

    def current_sections(self):
        """Sections offered in the current year; used by students picking a section."""
        if not (self.session.authorize("takes", Operation.REGISTER)
                or self.session.authorize("section", Operation.RETRIEVE)):
            return pd.DataFrame()
        return self._frame("section", "WHERE year = :1 ORDER BY course_id, sec_id", (self.current_year,))

    def enrolled_sections(self):
        """Sections the current student is taking and has no grade for yet."""
        if not self._allowed("takes", Operation.RETRIEVE):
            return pd.DataFrame()
        return self._frame(
            "takes",
            "WHERE ID = :1 AND grade IS NULL ORDER BY course_id",
            (self.current_user().student_id,),
        )

    # --- Generic CRUD ---

    def insert_tuple(self, table, *values):
        if not self._allowed(table, Operation.CREATE):
            return False
        try:
            self.executor.run(build_insert(table, values))
        except (ValidationError, ExecutionError):
            return False
        return True

    def update_table(self, table, primary_keys, attributes):
        if not self._allowed(table, Operation.UPDATE):
            return False
        try:
            self.executor.run(build_update(table, primary_keys, attributes))
        except (ValidationError, ExecutionError):
            return False
        return True

    def delete_tuple(self, table, primary_keys):
        if not self._allowed(table, Operation.DELETE):
            return False
        try:
            self.executor.run(build_delete(table, primary_keys))
        except (ValidationError, ExecutionError):
            return False
        return True

    # --- Student Actions ---

    def register_for_section(self, course_id, sec_id):
        if not self._allowed("takes", Operation.REGISTER):
            return False
        values = [
            self.current_user().student_id, course_id, sec_id,
            self.current_semester, str(self.current_year), "null",
        ]
        try:
            self.executor.run(build_insert("takes", values))
        except (ValidationError, ExecutionError):
            return False
        return True

    def drop_section(self, course_id):
        """Drops an ungraded enrollment. False when nothing matched."""
        if not self._allowed("takes", Operation.DROP):
            return False
        selector = {"course_id": course_id, "ID": self.current_user().student_id}
        try:
            removed = self.executor.run(build_delete("takes", selector, "grade IS NULL"))
        except (ValidationError, ExecutionError):
            return False
        return removed > 0

    def transcript(self):
        """GPA and graded courses of the current student, None for anyone else."""
        if not self._allowed("transcript", Operation.RETRIEVE):
            return None
        user = self.current_user()
        query = build_select(
            "takes",
            f"NATURAL JOIN course WHERE ID = :1 AND grade IS NOT NULL {TRANSCRIPT_ORDER}",
            params=(user.student_id,),
        )
        try:
            rows = [TranscriptRow.parse(line) for line in self.executor.fetch_tuples(query, *TRANSCRIPT_COLUMNS)]
        except (ValidationError, ExecutionError):
            return None
        return compute(rows, user.name)
