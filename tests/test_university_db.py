import oracledb
import pytest

import university_db
from auth import Principal
from db_utils import QueryExecutor
from errors import CatalogError, StatementRejectedError
from permissions import Role
from university_db import UniversityDatabase, non_empty

from conftest import FakeConnection

GREY_ID = Principal("grey", "grey123", Role.STUDENT).student_id


@pytest.fixture()
def db(connection, executor):
    db = UniversityDatabase(executor, current_semester="Spring", current_year=2016)
    connection.responses.append({"columns": ["ID"], "rows": [(GREY_ID,)]})
    assert db.add_user("brown", "brown123", "Staff")
    assert db.add_user("grey", "grey123", "Student")
    connection.executed.clear()
    return db


def test_add_student_creates_missing_student_row(connection, executor):
    db = UniversityDatabase(executor)
    connection.responses.extend([{"columns": ["ID"], "rows": []}, {"rowcount": 1}])
    assert db.add_user("grey", "grey123", Role.STUDENT)
    select, insert = connection.executed
    assert select == ("SELECT ID FROM student WHERE ID = :1", [GREY_ID])
    assert insert == ("INSERT INTO student VALUES (:1, :2, :3, :4)", [GREY_ID, "grey", "Biology", "0"])


def test_add_student_skips_existing_row(connection, executor):
    db = UniversityDatabase(executor)
    connection.responses.append({"columns": ["ID"], "rows": [(GREY_ID,)]})
    assert db.add_user("grey", "grey123", Role.STUDENT)
    assert len(connection.executed) == 1


def test_add_user_rejects_blank_credentials(executor):
    assert not UniversityDatabase(executor).add_user("", "pw", Role.STAFF)


def test_add_staff_does_not_touch_the_store(connection, executor):
    assert UniversityDatabase(executor).add_user("brown", "brown123", Role.STAFF)
    assert connection.executed == []


def test_authenticate(db):
    assert not db.authenticate("grey", "wrong")
    assert db.current_user() is None
    assert db.authenticate("grey", "grey123")
    assert db.current_user().name == "grey"


def test_staff_inserts_course(db, connection):
    db.authenticate("brown", "brown123")
    connection.responses.append({"rowcount": 1})
    assert db.insert_tuple("course", "CS-347", "Database System Concepts", "Comp. Sci.", "3")
    assert connection.executed == [
        ("INSERT INTO course VALUES (:1, :2, :3, :4)", ["CS-347", "Database System Concepts", "Comp. Sci.", "3"]),
    ]
    assert connection.commits == 1


def test_insert_with_empty_value_never_reaches_the_store(db, connection):
    db.authenticate("brown", "brown123")
    assert not db.insert_tuple("course", "CS-347", "", "Comp. Sci.", "3")
    assert connection.executed == []


def test_student_cannot_insert_section(db, connection):
    db.authenticate("grey", "grey123")
    assert not db.insert_tuple("section", "CS-101", "1", "Fall", "2016", "Taylor", "3128", "A")
    assert connection.executed == []


def test_rejected_insert_is_recorded(db, connection):
    db.authenticate("brown", "brown123")
    connection.responses.append(oracledb.IntegrityError("ORA-00001: unique constraint violated"))
    assert not db.insert_tuple("course", "CS-101", "Intro", "Comp. Sci.", "4")
    assert isinstance(db.last_error, StatementRejectedError)


def test_update_requires_primary_key(db, connection):
    db.authenticate("brown", "brown123")
    assert not db.update_table("course", non_empty({"course_id": ""}), {"title": "Databases"})
    assert connection.executed == []


def test_update_course(db, connection):
    db.authenticate("brown", "brown123")
    connection.responses.append({"rowcount": 1})
    assert db.update_table("course", {"course_id": "CS-347"}, non_empty({"title": "Databases", "credits": " "}))
    assert connection.executed == [("UPDATE course SET title = :1 WHERE course_id = :2", ["Databases", "CS-347"])]


def test_delete_section(db, connection):
    db.authenticate("brown", "brown123")
    connection.responses.append({"rowcount": 1})
    assert db.delete_tuple("section", {"course_id": "CS-101", "sec_id": "1"})
    assert connection.executed == [("DELETE FROM section WHERE course_id = :1 AND sec_id = :2", ["CS-101", "1"])]


def test_delete_requires_selector(db, connection):
    db.authenticate("brown", "brown123")
    assert not db.delete_tuple("course", {})
    assert connection.executed == []


def test_register_for_section(db, connection):
    db.authenticate("grey", "grey123")
    connection.responses.append({"rowcount": 1})
    assert db.register_for_section("BIO-101", "1")
    assert connection.executed == [
        ("INSERT INTO takes VALUES (:1, :2, :3, :4, :5, NULL)", [GREY_ID, "BIO-101", "1", "Spring", "2016"]),
    ]


def test_staff_cannot_register(db, connection):
    db.authenticate("brown", "brown123")
    assert not db.register_for_section("BIO-101", "1")
    assert connection.executed == []


def test_drop_section(db, connection):
    db.authenticate("grey", "grey123")
    connection.responses.append({"rowcount": 1})
    assert db.drop_section("BIO-101")
    assert connection.executed == [
        ("DELETE FROM takes WHERE course_id = :1 AND ID = :2 AND grade IS NULL", ["BIO-101", GREY_ID]),
    ]


def test_drop_section_not_enrolled(db, connection):
    db.authenticate("grey", "grey123")
    connection.responses.append({"rowcount": 0})
    assert not db.drop_section("BIO-101")


def test_enrolled_sections(db, connection):
    db.authenticate("grey", "grey123")
    connection.responses.append({
        "columns": ["COURSE_ID", "SEC_ID", "SEMESTER", "YEAR"],
        "rows": [("BIO-101", "1", "Spring", 2016)],
    })
    df = db.enrolled_sections()
    assert df.iloc[0]["COURSE_ID"] == "BIO-101"
    sql, params = connection.executed[0]
    assert sql == "SELECT course_id, sec_id, semester, year FROM takes WHERE ID = :1 AND grade IS NULL ORDER BY course_id"
    assert params == [GREY_ID]


def test_department_info_for_staff_only(db, connection):
    db.authenticate("grey", "grey123")
    assert db.department_info().empty
    assert connection.executed == []

    db.authenticate("brown", "brown123")
    connection.responses.append({"columns": ["DEPT_NAME", "BUILDING"], "rows": [("Biology", "Watson")]})
    assert db.department_info().iloc[0]["BUILDING"] == "Watson"
    assert connection.executed[0][0] == "SELECT dept_name, building FROM department"


def test_current_sections_filters_on_year(db, connection):
    db.authenticate("grey", "grey123")
    connection.responses.append({"columns": list(university_db.TABLE_FIELDS["section"]), "rows": []})
    assert db.current_sections().empty
    assert connection.executed[0][1] == [2016]


def test_failed_retrieve_returns_empty_frame(db, connection):
    db.authenticate("brown", "brown123")
    connection.responses.append(oracledb.DatabaseError("ORA-00942: table or view does not exist"))
    assert db.course_info().empty
    assert "ORA-00942" in str(db.last_error)


def test_fetch_error_returns_empty_frame(db, connection):
    db.authenticate("brown", "brown123")
    connection.responses.append({
        "columns": ["COURSE_ID", "TITLE", "DEPT_NAME", "CREDITS"],
        "fetch_error": oracledb.DatabaseError("ORA-01722: invalid number"),
    })
    assert db.course_info().empty
    assert "ORA-01722" in str(db.last_error)


def test_fetch_error_hides_transcript(db, connection):
    db.authenticate("grey", "grey123")
    connection.responses.append({"columns": ["TITLE"], "fetch_error": oracledb.DatabaseError("ORA-01722: invalid number")})
    assert db.transcript() is None


def test_transcript(db, connection):
    db.authenticate("grey", "grey123")
    connection.responses.append({
        "columns": ["ID", "COURSE_ID", "SEC_ID", "SEMESTER", "YEAR", "GRADE", "TITLE", "DEPT_NAME", "CREDITS"],
        "rows": [
            (GREY_ID, "102", "1", "Spring", 2016, "C", "Y", "Biology", 4),
            (GREY_ID, "101", "1", "Fall", 2015, "A", "X", "Biology", 3),
        ],
    })
    transcript = db.transcript()
    assert transcript.gpa == pytest.approx(20.0 / 7)
    assert transcript.lines[0] == "***Transcript for: grey***"
    assert transcript.lines[2].startswith("Took Y (102) in Spring of 2016")

    sql, params = connection.executed[0]
    assert sql.startswith("SELECT * FROM takes NATURAL JOIN course WHERE ID = :1 AND grade IS NOT NULL ORDER BY year DESC")
    assert params == [GREY_ID]


def test_transcript_is_for_students_only(db, connection):
    db.authenticate("brown", "brown123")
    assert db.transcript() is None
    assert connection.executed == []


def test_open_closes_connection_when_schema_is_missing(monkeypatch):
    connection = FakeConnection([oracledb.DatabaseError("ORA-01435: user does not exist")])
    monkeypatch.setattr(university_db, "connect", lambda *args: connection)
    with pytest.raises(CatalogError):
        UniversityDatabase.open(schema="nowhere")
    assert not connection.open


def test_open(monkeypatch):
    connection = FakeConnection()
    monkeypatch.setattr(university_db, "connect", lambda *args: connection)
    db = UniversityDatabase.open(schema="university")
    assert isinstance(db.executor, QueryExecutor)
    assert connection.executed == [("ALTER SESSION SET CURRENT_SCHEMA = university", [])]


def test_non_empty():
    assert non_empty({"a": "x", "b": "", "c": "  ", "d": None}) == {"a": "x"}
