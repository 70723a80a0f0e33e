"""
Shared fixtures for plugin tests.

Provides:
- An in-memory SQLite session with all tables created
- A populated site: users, contexts, Arlo enrolment instances,
  registrations, contacts, queued emails and group memberships
"""
from dataclasses import dataclass
from typing import Generator

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from enrol_arlo.database import Base
from enrol_arlo.models import (
    CONTEXT_COURSE,
    CONTEXT_USER,
    Contact,
    Context,
    EmailQueueEntry,
    EnrolmentInstance,
    Group,
    GroupMember,
    Registration,
    User,
)
from enrol_arlo.privacy.audit import PrivacyAuditLogModel  # noqa: F401
from enrol_arlo.settings import Settings

COURSE_C = 10
COURSE_D = 20


@pytest.fixture
def sqlite_test_db() -> Generator[Session, None, None]:
    """
    Create an in-memory SQLite database for unit tests.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False}
    )
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def settings() -> Settings:
    return Settings(database_url="sqlite:///:memory:", erase_atomically=True)


@pytest.fixture
def non_atomic_settings() -> Settings:
    return Settings(database_url="sqlite:///:memory:", erase_atomically=False)


@dataclass
class Site:
    """Ids of the records created by the ``site`` fixture."""
    u1: int
    u2: int
    u3: int
    u1_context: int
    u2_context: int
    u3_context: int
    course_c_context: int
    course_d_context: int
    course_c: int
    course_d: int
    e1: int
    e2: int
    e_manual: int
    group_c: int


def add_user(db: Session, userid: int, username: str) -> Context:
    db.add(User(id=userid, username=username, firstname=username.title(), email=f"{username}@example.com"))
    context = Context(contextlevel=CONTEXT_USER, instanceid=userid)
    db.add(context)
    db.flush()
    return context


def add_contact(db: Session, userid: int, sourceid: int) -> Contact:
    contact = Contact(
        userid=userid,
        sourceid=sourceid,
        sourceguid=f"guid-{sourceid}",
        firstname=f"First{userid}",
        lastname=f"Last{userid}",
        email=f"contact{userid}@example.com",
        codeprimary=f"C{userid}",
        phonework="04 123 4567",
        phonemobile="021 123 4567",
    )
    db.add(contact)
    db.flush()
    return contact


def add_registration(db: Session, enrolid: int, userid: int, sourceid: int) -> Registration:
    registration = Registration(
        enrolid=enrolid,
        userid=userid,
        sourceid=sourceid,
        sourceguid=f"reg-{sourceid}",
        grade="A",
        outcome="Pass",
        lastactivity=1700000000,
        progressstatus="Completed",
        progresspercent=100,
        sourcecontactid=userid * 100,
        sourcecontactguid=f"guid-{userid * 100}",
    )
    db.add(registration)
    db.flush()
    return registration


def add_email(db: Session, area: str, instanceid: int, userid: int, type_: str = "newaccountdetails") -> EmailQueueEntry:
    email = EmailQueueEntry(area=area, instanceid=instanceid, userid=userid, type=type_, status=0, extra="{}")
    db.add(email)
    db.flush()
    return email


class Records:
    """Adds site records to a session."""

    def __init__(self, db: Session):
        self.db = db

    def user(self, userid: int, username: str) -> Context:
        return add_user(self.db, userid, username)

    def contact(self, userid: int, sourceid: int) -> Contact:
        return add_contact(self.db, userid, sourceid)

    def registration(self, enrolid: int, userid: int, sourceid: int) -> Registration:
        return add_registration(self.db, enrolid, userid, sourceid)

    def email(self, area: str, instanceid: int, userid: int) -> EmailQueueEntry:
        return add_email(self.db, area, instanceid, userid)


@pytest.fixture
def records(sqlite_test_db: Session) -> Records:
    return Records(sqlite_test_db)


@pytest.fixture
def site(sqlite_test_db: Session) -> Site:
    """
    A site with two courses.

    Course C has Arlo instance E1 (U1, U2 registered) and a manual
    instance. Course D has Arlo instance E2 (U1 registered). U1 and U2
    have Arlo contacts; U3 has neither contact nor registration.
    """
    db = sqlite_test_db
    u1_ctx = add_user(db, 1, "ursula")
    u2_ctx = add_user(db, 2, "victor")
    u3_ctx = add_user(db, 3, "wendy")
    c_ctx = Context(contextlevel=CONTEXT_COURSE, instanceid=COURSE_C)
    d_ctx = Context(contextlevel=CONTEXT_COURSE, instanceid=COURSE_D)
    db.add_all([c_ctx, d_ctx])

    e1 = EnrolmentInstance(enrol="arlo", courseid=COURSE_C, name="Event 1")
    e2 = EnrolmentInstance(enrol="arlo", courseid=COURSE_D, name="Event 2")
    e_manual = EnrolmentInstance(enrol="manual", courseid=COURSE_C)
    db.add_all([e1, e2, e_manual])
    db.flush()

    add_contact(db, 1, sourceid=501)
    add_contact(db, 2, sourceid=502)
    add_registration(db, e1.id, 1, sourceid=9001)
    add_registration(db, e1.id, 2, sourceid=9002)
    add_registration(db, e2.id, 1, sourceid=9003)

    add_email(db, "site", 0, 1)
    add_email(db, "enrolment", e1.id, 1, "coursewelcome")
    add_email(db, "enrolment", e1.id, 2, "coursewelcome")
    add_email(db, "enrolment", e2.id, 1, "coursewelcome")

    group = Group(courseid=COURSE_C, name="Arlo event group")
    db.add(group)
    db.flush()
    db.add_all([
        GroupMember(groupid=group.id, userid=1, component="enrol_arlo", itemid=e1.id),
        GroupMember(groupid=group.id, userid=2, component="enrol_arlo", itemid=e1.id),
        GroupMember(groupid=group.id, userid=3, component="", itemid=0),
    ])
    db.commit()

    return Site(
        u1=1, u2=2, u3=3,
        u1_context=u1_ctx.id, u2_context=u2_ctx.id, u3_context=u3_ctx.id,
        course_c_context=c_ctx.id, course_d_context=d_ctx.id,
        course_c=COURSE_C, course_d=COURSE_D,
        e1=e1.id, e2=e2.id, e_manual=e_manual.id,
        group_c=group.id,
    )
