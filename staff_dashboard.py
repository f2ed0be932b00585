# staff_dashboard.py
import streamlit as st

from permissions import Operation
from university_db import PRIMARY_KEYS, TABLE_FIELDS, non_empty

FIELD_LABELS = {
    "course_id": "Course ID",
    "title": "Title",
    "dept_name": "Department Name",
    "credits": "Credit Hours",
    "sec_id": "Section ID",
    "semester": "Semester",
    "year": "Year",
    "building": "Building",
    "room_number": "Room Number",
    "time_slot_id": "Time Slot ID",
}

DELETE_WARNINGS = {
    "course": "You will be unable to delete courses that are pre-reqs for other classes.",
    "section": "You will be unable to delete sections that are already assigned for a class.",
}


def _report(success, done_msg, failed_msg, db):
    if success:
        st.success(done_msg)
    else:
        st.error(failed_msg)
        if db.last_error is not None:
            with st.expander("Details"):
                st.code(str(db.last_error))


# --- Operation Forms ---

def display_retrieve(db, table):
    frames = {
        "course": db.course_info,
        "section": db.section_info,
        "department": db.department_info,
    }
    df = frames[table]()
    if df.empty:
        st.info(f"No {table} records found.")
    else:
        st.dataframe(df, use_container_width=True, hide_index=True)


def display_create(db, table):
    with st.form(f"create_{table}_form", clear_on_submit=True):
        values = [st.text_input(FIELD_LABELS[f], key=f"create_{table}_{f}") for f in TABLE_FIELDS[table]]
        st.caption("Enter null for a value that should be left empty.")
        if st.form_submit_button(f"Add {table.title()}"):
            _report(
                db.insert_tuple(table, *values),
                f"{table.title()} successfully added!",
                f"{table.title()} could not be added. Please try again.",
                db,
            )


def display_update(db, table):
    keys = PRIMARY_KEYS[table]
    st.caption("Key fields denoted with '*' are required; leave a new value blank to keep it.")
    with st.form(f"update_{table}_form"):
        selector = {k: st.text_input(f"{FIELD_LABELS[k]}*", key=f"update_{table}_key_{k}") for k in keys}
        attributes = {
            f: st.text_input(f"New {FIELD_LABELS[f]}", key=f"update_{table}_{f}")
            for f in TABLE_FIELDS[table] if f not in keys
        }
        if st.form_submit_button(f"Update {table.title()}"):
            _report(
                db.update_table(table, non_empty(selector), non_empty(attributes)),
                f"{table.title()} successfully updated!",
                f"{table.title()} could not be updated. Please try again.",
                db,
            )


def display_delete(db, table):
    st.warning(DELETE_WARNINGS[table])
    with st.form(f"delete_{table}_form"):
        selector = {k: st.text_input(FIELD_LABELS[k], key=f"delete_{table}_{k}") for k in PRIMARY_KEYS[table]}
        confirmed = st.checkbox("Yes, remove this record")
        if st.form_submit_button(f"Delete {table.title()}"):
            if not confirmed:
                st.info("Please confirm the deletion first.")
                return
            _report(
                db.delete_tuple(table, non_empty(selector)),
                f"{table.title()} successfully deleted!",
                f"{table.title()} could not be deleted. Please try again.",
                db,
            )


OPERATION_VIEWS = {
    Operation.RETRIEVE: display_retrieve,
    Operation.CREATE: display_create,
    Operation.UPDATE: display_update,
    Operation.DELETE: display_delete,
}


# --- Main Function ---
def display_staff_dashboard(db):
    """One tab per accessible table, with the commands allowed on it."""
    tables = db.session.available_tables()
    if not tables:
        st.info("You do not have access to any table.")
        return

    for tab, table in zip(st.tabs([t.title() for t in tables]), tables):
        with tab:
            operations = [op for op in db.session.available_operations(table) if op in OPERATION_VIEWS]
            operation = st.radio(
                f'Available Commands for "{table}"',
                operations,
                format_func=lambda op: op.value,
                horizontal=True,
                key=f"command_{table}",
            )
            OPERATION_VIEWS[operation](db, table)
