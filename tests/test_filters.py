from datetime import datetime

import pytest
import pytz

from counselor_dashboard.models.resource import RESOURCES
from counselor_dashboard.models.session import Session
from counselor_dashboard.models.student import Student
from counselor_dashboard.services.filters import (
    filter_resources,
    filter_sessions,
    filter_students,
    session_status_label,
)

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=pytz.UTC)

SESSIONS = [
    Session(session_id="future", session_date="2026-10-25T10:00:00Z", status="scheduled"),
    Session(session_id="missed", session_date="2026-10-01T10:00:00Z", status="scheduled"),
    Session(session_id="done", session_date="2026-10-02T10:00:00Z", status="completed"),
    Session(session_id="off", session_date="2026-10-26T10:00:00Z", status="cancelled"),
]


@pytest.mark.parametrize(
    "tab, expected",
    [
        ("upcoming", ["future"]),
        ("past", ["missed", "done"]),
        ("cancelled", ["off"]),
    ],
)
def test_filter_sessions(tab, expected):
    assert [s.session_id for s in filter_sessions(SESSIONS, tab, now=NOW)] == expected


def test_filter_sessions_unknown_tab():
    with pytest.raises(ValueError):
        filter_sessions(SESSIONS, "archived", now=NOW)


def test_status_label():
    assert session_status_label(SESSIONS[0], now=NOW) == "Scheduled"
    assert session_status_label(SESSIONS[1], now=NOW) == "Past"
    assert session_status_label(SESSIONS[2], now=NOW) == "Completed"


STUDENTS = [
    Student(uid="1", name="Ama Mensah", email="ama@example.com", concerns=["anxiety"], goals=["sleep"]),
    Student(uid="2", name="Kofi Boateng", email="kofi@example.com", concerns=["grief"], goals=["focus"]),
    Student(uid="3", name="Unknown", email="x@example.com"),
]


def test_filter_students_by_query():
    assert [s.uid for s in filter_students(STUDENTS, "KOFI")] == ["2"]
    assert [s.uid for s in filter_students(STUDENTS, "ama@")] == ["1"]


def test_filter_students_drops_placeholder_names():
    assert [s.uid for s in filter_students(STUDENTS)] == ["1", "2"]


def test_filter_students_by_concern_and_goal():
    assert [s.uid for s in filter_students(STUDENTS, concerns=["grief", "anxiety"])] == ["1", "2"]
    assert [s.uid for s in filter_students(STUDENTS, concerns=["anxiety"], goals=["focus"])] == []


def test_filter_resources():
    guides = filter_resources(RESOURCES, "guides")
    assert guides and all(r.category == "guides" for r in guides)

    by_tag = filter_resources(RESOURCES, "guides", "documentation")
    assert {r.id for r in by_tag} == {"g2", "g3"}

    assert filter_resources(RESOURCES, "guides", "no such thing") == []
