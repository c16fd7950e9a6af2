# counselor_dashboard/repositories/students_repo.py
import structlog

from counselor_dashboard.services.gsheets_client import get_spreadsheet
from counselor_dashboard.repositories.worksheets import gateway_errors, open_tab
from counselor_dashboard.config import SESSIONS_HEADERS, SESSIONS_TAB, USERS_HEADERS, USERS_TAB
from counselor_dashboard.models.student import Student, parse_student

logger = structlog.get_logger(__name__)


def fetch_counselor_students(counselor_id: str) -> list[Student]:
    """
    Students are not registered against a counselor; they are whoever
    appears in the counselor's sessions. Each distinct student id is looked
    up in the Users tab, and incomplete profiles are skipped.
    """
    sh = get_spreadsheet()
    with gateway_errors("fetch_counselor_students", counselor_id=counselor_id):
        # cells stay text: ids and phone numbers keep leading zeros and "+"
        session_records = open_tab(sh, SESSIONS_TAB, SESSIONS_HEADERS).get_all_records(numericise_ignore=["all"])
        mine = [r for r in session_records if str(r.get("counselorId", "")) == str(counselor_id)]
        if not mine:
            logger.info("students_fetched", counselor_id=counselor_id, count=0)
            return []
        user_records = open_tab(sh, USERS_TAB, USERS_HEADERS).get_all_records(numericise_ignore=["all"])
        users = {str(r.get("uid", "")): r for r in user_records}

    students: dict[str, Student] = {}
    for r in mine:
        student_id = str(r.get("userId") or r.get("studentId") or "")
        if not student_id or student_id in students:
            continue
        user = users.get(student_id)
        if user is None:
            logger.debug("student_profile_missing", student_id=student_id)
            continue
        student = parse_student(user, uid=student_id)
        if student is None:
            logger.debug("student_profile_incomplete", student_id=student_id)
            continue
        students[student_id] = student

    logger.info("students_fetched", counselor_id=counselor_id, sessions=len(mine), count=len(students))
    return list(students.values())
