# app.py
import logging

import streamlit as st

import config
from errors import CatalogError, DatabaseConnectionError
from permissions import Role
from university_db import UniversityDatabase

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


def get_database():
    """
    Opens the connection once per browser session and registers the
    console users. A bad connection or schema stops the app.
    """
    if "db" not in st.session_state:
        try:
            db = UniversityDatabase.open()
        except DatabaseConnectionError as e:
            st.error(f"Fatal: {e}")
            st.stop()
        except CatalogError:
            st.error(f"Fatal: Could not select the {config.UNIVERSITY_SCHEMA} schema.")
            st.stop()

        for name, details in config.APP_USERS.items():
            if not db.add_user(name, details["pass"], details["role"]):
                st.warning(f"Could not register user '{name}'.")
        st.session_state.db = db

    return st.session_state.db


def display_login_form(db):
    """Displays the login form; failed attempts simply show the form again."""
    st.header("Login")
    with st.form("login_form"):
        username = st.text_input("Username")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Login")

        if submitted:
            if not username or not password:
                st.warning("Please enter both username and password.")
                return

            if db.authenticate(username, password):
                st.success("Login successful!")
                st.rerun()
            else:
                st.error("Invalid credentials supplied. Please try again.")


def main():
    """Main function to run the Streamlit app."""
    st.set_page_config(layout="wide", page_title="University Database Console")
    st.title("🎓 University Database Console")

    db = get_database()
    user = db.current_user()

    if user is None:
        display_login_form(db)
        return

    st.sidebar.success(f"Hello {user}, you have successfully logged in!")
    st.sidebar.write(f"Role: **{user.role.value}**")

    from staff_dashboard import display_staff_dashboard
    from student_dashboard import display_student_dashboard

    if user.role == Role.STAFF:
        display_staff_dashboard(db)
    elif user.role == Role.STUDENT:
        display_student_dashboard(db)
    else:
        st.error("Unknown role. Access denied.")

    if st.sidebar.button("Logout"):
        # Dropping the whole database object also drops the logged in user
        st.session_state.db.close()
        for key in list(st.session_state.keys()):
            del st.session_state[key]
        st.rerun()


if __name__ == "__main__":
    main()
