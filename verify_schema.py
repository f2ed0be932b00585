# verify_schema.py
import sys

import config
from db_utils import QueryExecutor, connect
from errors import DatabaseConnectionError, ExecutionError
from statements import Statement
from university_db import TABLE_FIELDS

# Tables and columns the console reads or writes.
REQUIRED_COLUMNS = {
    "department": TABLE_FIELDS["department"],
    "course": TABLE_FIELDS["course"],
    "section": TABLE_FIELDS["section"],
    "takes": ("ID",) + TABLE_FIELDS["takes"] + ("grade",),
    "student": ("ID", "name", "dept_name", "tot_cred"),
}


def missing_columns(executor, owner):
    """Returns {table: [missing columns]} for every required table that is incomplete."""
    statement = Statement(
        "SELECT table_name, column_name FROM all_tab_columns WHERE owner = :1",
        (owner.upper(),),
    )
    present = set()
    for line in executor.fetch_tuples(statement, "table_name", "column_name"):
        table, column = line.split(":", 1)
        present.add((table.upper(), column.upper()))

    missing = {}
    for table, columns in REQUIRED_COLUMNS.items():
        absent = [c for c in columns if (table.upper(), c.upper()) not in present]
        if absent:
            missing[table] = absent
    return missing


def main():
    print("--- University Schema Verification Script ---")
    print(f"Attempting to connect to database: {config.DB_HOST}:{config.DB_PORT}/{config.DB_SERVICE}")
    print(f"User: {config.DB_USER}")

    try:
        connection = connect(config.DB_HOST, config.DB_PORT, config.DB_USER, config.DB_PASSWORD, config.DB_SERVICE)
    except DatabaseConnectionError as e:
        print(f"\n❌ ERROR: {e}")
        print("\n--- Troubleshooting ---")
        print("1. Is the Oracle database container running?")
        print("2. Are DB_HOST, DB_PORT, DB_SERVICE, DB_USER and DB_PASSWORD correct?")
        print("3. Is the database listener running and the Pluggable Database (PDB) open?")
        sys.exit(1)

    print("\n✅ Connection successful!")
    executor = QueryExecutor(connection)
    try:
        print(f"\n--- Checking tables in schema {config.UNIVERSITY_SCHEMA} ---")
        missing = missing_columns(executor, config.UNIVERSITY_SCHEMA)
        for table, columns in REQUIRED_COLUMNS.items():
            if table in missing:
                print(f"  ❌ {table}: missing {', '.join(missing[table])}")
            else:
                print(f"  ✅ {table} ({len(columns)} columns)")
    except ExecutionError as e:
        print(f"\n❌ ERROR: An error occurred during verification.\nDetails: {e}")
        sys.exit(1)
    finally:
        executor.close()
        print("\nConnection closed.")

    if missing:
        print("\n❌ Schema verification failed.")
        sys.exit(1)
    print("\n--- Verification Complete ---")


if __name__ == "__main__":
    main()
