# seed_data.py
import random
import sys

from faker import Faker

import config
from auth import Principal
from db_utils import QueryExecutor, connect, select_catalog
from errors import CatalogError, DatabaseConnectionError, StatementRejectedError
from permissions import Role
from statements import Statement, build_insert

# --- CONFIGURATION ---
DEPARTMENTS = {
    # dept_name: course prefix
    "Biology": "BIO",
    "Comp. Sci.": "CS",
    "History": "HIS",
    "Physics": "PHY",
}
NUM_COURSES_PER_DEPT = 4
NUM_ROOMS_PER_BUILDING = 2
NUM_EXTRA_STUDENTS = 20
FIRST_YEAR = 2013
OFFER_RATE = 0.6  # 60% chance a course is offered in a given term
COURSES_PER_TERM = 3
GRADES = ["A", "A-", "B+", "B", "B-", "C+", "C", "C-", "D", "F", "W"]
SEMESTERS = ["Spring", "Summer", "Fall"]
TIME_SLOTS = list("ABCDEFGH")

# Initialize Faker
fake = Faker()


def clear_existing_data(executor):
    """Clears data from the university tables, children first."""
    print("🗑️  Clearing all existing data...")
    tables = [
        'takes', 'teaches', 'advisor', 'prereq', 'section', 'course',
        'student', 'instructor', 'classroom', 'department'
    ]
    for table in tables:
        try:
            executor.run(Statement(f"DELETE FROM {table}"))
        except StatementRejectedError as e:
            if "ORA-00942" not in str(e): print(f"Warning: Cannot clear {table}. {e}")
    print("✅ Data cleared.")


def insert(executor, table, *values):
    executor.run(build_insert(table, [str(v) for v in values]))


def terms():
    """Every (semester, year) up to the current term, oldest first."""
    for year in range(FIRST_YEAR, config.CURRENT_YEAR + 1):
        for semester in SEMESTERS:
            if year == config.CURRENT_YEAR and SEMESTERS.index(semester) > SEMESTERS.index(config.CURRENT_SEMESTER):
                return
            yield semester, year


def run_seed():
    """Seeds the university schema with departments, courses, sections and student histories."""
    try:
        connection = connect(config.DB_HOST, config.DB_PORT, config.DB_USER, config.DB_PASSWORD, config.DB_SERVICE)
        select_catalog(connection, config.UNIVERSITY_SCHEMA)
    except (DatabaseConnectionError, CatalogError) as e:
        print(f"❌ Could not connect. Check config.py. Error: {e}")
        sys.exit(1)

    executor = QueryExecutor(connection)
    try:
        clear_existing_data(executor)
        print("\n🌱 Starting data seeding process...")

        # --- 1. Departments & Classrooms ---
        print("\n--- 1. Seeding Departments & Classrooms ---")
        rooms = []
        for dept_name in DEPARTMENTS:
            building = fake.unique.last_name()[:15]
            insert(executor, 'department', dept_name, building, fake.random_int(50000, 120000))
            for _ in range(NUM_ROOMS_PER_BUILDING):
                room_number = str(fake.unique.random_int(100, 999))
                insert(executor, 'classroom', building, room_number, fake.random_int(20, 150))
                rooms.append((building, room_number))
        print(f"✅ {len(DEPARTMENTS)} departments and {len(rooms)} classrooms created.")

        # --- 2. Courses ---
        print("\n--- 2. Seeding Courses ---")
        course_ids = []
        for dept_name, prefix in DEPARTMENTS.items():
            for number in random.sample(range(101, 500), NUM_COURSES_PER_DEPT):
                course_id = f"{prefix}-{number}"
                insert(executor, 'course', course_id, fake.catch_phrase()[:50], dept_name, random.choice([3, 4]))
                course_ids.append(course_id)
        print(f"✅ {len(course_ids)} courses created.")

        # --- 3. Sections ---
        print("\n--- 3. Seeding Sections ---")
        sections = {}
        for semester, year in terms():
            offered = [c for c in course_ids if random.random() < OFFER_RATE]
            for course_id in offered:
                building, room_number = random.choice(rooms)
                insert(executor, 'section', course_id, '1', semester, year, building, room_number, random.choice(TIME_SLOTS))
            sections[(semester, year)] = offered
        print(f"✅ {sum(len(v) for v in sections.values())} sections created.")

        # --- 4. Students ---
        print("\n--- 4. Seeding Students ---")
        students = {}
        for name, details in config.APP_USERS.items():
            if Role.parse(details["role"]) == Role.STUDENT:
                students[Principal(name, details["pass"], Role.STUDENT).student_id] = name
        wanted = len(students) + NUM_EXTRA_STUDENTS
        while len(students) < wanted:
            students.setdefault(f"{fake.random_int(0, 99999):05d}", fake.first_name()[:20])
        for student_id, name in students.items():
            insert(executor, 'student', student_id, name, random.choice(list(DEPARTMENTS)), 0)
        print(f"✅ {len(students)} students created.")

        # --- 5. Enrollment history ---
        print("\n--- 5. Seeding Enrollments & Grades ---")
        current_term = (config.CURRENT_SEMESTER, config.CURRENT_YEAR)
        enrollments = 0
        for student_id in students:
            for term, offered in sections.items():
                picks = random.sample(offered, min(COURSES_PER_TERM, len(offered)))
                for course_id in picks:
                    # Current term enrollments have no grade yet
                    grade = 'null' if term == current_term else random.choice(GRADES)
                    insert(executor, 'takes', student_id, course_id, '1', term[0], term[1], grade)
                    enrollments += 1
        print(f"✅ {enrollments} enrollments created.")

        print("\n🎉 Seeding complete.")
    except StatementRejectedError as e:
        print(f"❌ Seeding stopped: {e}", file=sys.stderr)
        sys.exit(1)
    finally:
        executor.close()


if __name__ == "__main__":
    run_seed()
