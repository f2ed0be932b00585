# student_dashboard.py
import streamlit as st

from permissions import Operation


def display_enrollments(db):
    """Current enrollments plus registering for and dropping sections."""
    operations = db.session.available_operations("takes")

    if Operation.RETRIEVE in operations:
        st.markdown("#### My Enrolled Sections")
        enrolled_df = db.enrolled_sections()
        if enrolled_df.empty:
            st.info("You are not enrolled in any section this semester.")
        else:
            st.dataframe(enrolled_df, use_container_width=True, hide_index=True)

    if Operation.REGISTER in operations:
        with st.expander("Register for a Section"):
            sections_df = db.current_sections()
            if not sections_df.empty:
                st.dataframe(sections_df, use_container_width=True, hide_index=True)
            with st.form("register_form", clear_on_submit=True):
                course_id = st.text_input("Course ID to register for")
                sec_id = st.text_input("Section ID to register for")
                if st.form_submit_button("Register"):
                    if db.register_for_section(course_id, sec_id):
                        st.success(f"Successfully registered for {course_id}")
                        st.rerun()
                    else:
                        st.error("There is no matching section available this semester or you are already enrolled.")

    if Operation.DROP in operations:
        with st.expander("Drop a Section"):
            with st.form("drop_form"):
                course_id = st.text_input("Course ID to drop")
                confirmed = st.checkbox("Yes, drop this enrollment")
                if st.form_submit_button("Drop"):
                    if not confirmed:
                        st.info("Please confirm the drop first.")
                    elif db.drop_section(course_id):
                        st.success("Section enrollment successfully dropped")
                        st.rerun()
                    else:
                        st.error("You do not appear to be enrolled in this class. Please try again.")


def display_transcript(db):
    transcript = db.transcript()
    if transcript is None:
        st.error("Could not retrieve your transcript. Please try again later.")
        return

    st.markdown(f"### {transcript.lines[0].strip('*')}")
    st.metric("GPA", f"{transcript.gpa:.2f}")
    st.write(f"**Total Credit Hours:** {transcript.total_credits}")

    if transcript.rows:
        st.dataframe(transcript.to_frame(), use_container_width=True, hide_index=True)
        with st.expander("Printable transcript"):
            st.text("\n".join(transcript.lines))
    else:
        st.info("No graded courses yet.")


VIEWS = {
    "takes": ("My Enrollments", display_enrollments),
    "transcript": ("My Transcript", display_transcript),
}


# --- Main Function ---
def display_student_dashboard(db):
    """Main function to render the student dashboard."""
    user = db.current_user()
    st.title(f"👋 Welcome, {user.name}!")

    tables = [t for t in db.session.available_tables() if t in VIEWS]
    if not tables:
        st.info("You do not have access to any table.")
        return
    tabs = st.tabs([VIEWS[t][0] for t in tables])
    for tab, table in zip(tabs, tables):
        with tab:
            VIEWS[table][1](db)
