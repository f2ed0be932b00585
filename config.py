# config.py
import os

# =================================================================
# Oracle Connection Details
# =================================================================
# Every value can be overridden through the environment.

DB_HOST = os.environ.get("DB_HOST", "localhost")
DB_PORT = int(os.environ.get("DB_PORT", "1521"))
DB_SERVICE = os.environ.get("DB_SERVICE", "ORCLCDB")

DB_USER = os.environ.get("DB_USER", "university_app")
DB_PASSWORD = os.environ.get("DB_PASSWORD", "university_password")

# The schema holding department, course, section, takes and student.
# It is selected right after connecting (ALTER SESSION SET CURRENT_SCHEMA).
UNIVERSITY_SCHEMA = os.environ.get("UNIVERSITY_SCHEMA", "UNIVERSITY")

# =================================================================
# Current Term
# =================================================================
# New registrations are recorded for this semester/year and the
# "current sections" listing only shows this year.

CURRENT_SEMESTER = os.environ.get("CURRENT_SEMESTER", "Spring")
CURRENT_YEAR = int(os.environ.get("CURRENT_YEAR", "2016"))

# =================================================================
# Console Users
# =================================================================
# Users are registered in memory at startup; they are not stored in
# the database. Students additionally get a row in the student table.

APP_USERS = {
    "brown": {
        "pass": "brown123",
        "role": "Staff"
    },
    "grey": {
        "pass": "grey123",
        "role": "Student"
    }
}

# Department given to student rows created for console users.
DEFAULT_STUDENT_DEPARTMENT = "Biology"

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
