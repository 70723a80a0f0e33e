import enum
import time

import sqlalchemy as sa
from sqlalchemy import (
    Column,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from enrol_arlo.database import Base


def get_current_timestamp() -> int:
    """Get current time as a unix timestamp"""
    return int(time.time())


# Host framework context levels.
CONTEXT_SYSTEM = 10
CONTEXT_USER = 30
CONTEXT_COURSECAT = 40
CONTEXT_COURSE = 50
CONTEXT_MODULE = 70

# Enrolment instance status.
ENROL_INSTANCE_ENABLED = 0
ENROL_INSTANCE_DISABLED = 1

# Action taken when a user is removed from the external source.
ENROL_EXT_REMOVED_UNENROL = 0
ENROL_EXT_REMOVED_KEEP = 1
ENROL_EXT_REMOVED_SUSPEND = 2
ENROL_EXT_REMOVED_SUSPENDNOROLES = 3


class EmailArea(enum.Enum):
    site = "site"
    enrolment = "enrolment"


# =============================================================================
# Host framework tables
# =============================================================================


class User(Base):
    __tablename__ = "user"
    id = Column(Integer, primary_key=True)
    username = Column(String(100), nullable=False, unique=True)
    firstname = Column(String(100), nullable=False, default="")
    lastname = Column(String(100), nullable=False, default="")
    email = Column(String(100), nullable=False, default="")
    deleted = Column(Integer, nullable=False, default=0)


class Context(Base):
    __tablename__ = "context"
    id = Column(Integer, primary_key=True)
    contextlevel = Column(Integer, nullable=False)
    instanceid = Column(Integer, nullable=False)

    __table_args__ = (
        sa.UniqueConstraint("contextlevel", "instanceid", name="idx_context_level_instance"),
    )


class Role(Base):
    __tablename__ = "role"
    id = Column(Integer, primary_key=True)
    shortname = Column(String(100), nullable=False, unique=True)
    archetype = Column(String(30), nullable=False, default="")
    sortorder = Column(Integer, nullable=False, default=0)


class EnrolmentInstance(Base):
    """A course-scoped enrolment method instance (host ``enrol`` table)."""
    __tablename__ = "enrol"
    id = Column(Integer, primary_key=True)
    enrol = Column(String(20), nullable=False, index=True)
    courseid = Column(Integer, nullable=False, index=True)
    status = Column(Integer, nullable=False, default=ENROL_INSTANCE_ENABLED)
    name = Column(String(255), nullable=True)
    roleid = Column(Integer, nullable=True)
    timecreated = Column(Integer, nullable=False, default=get_current_timestamp)
    timemodified = Column(Integer, nullable=False,
                          default=get_current_timestamp,
                          onupdate=get_current_timestamp)

    registrations = relationship("Registration", back_populates="instance")


class Group(Base):
    __tablename__ = "groups"
    id = Column(Integer, primary_key=True)
    courseid = Column(Integer, nullable=False, index=True)
    name = Column(String(254), nullable=False)
    idnumber = Column(String(100), nullable=False, default="")

    members = relationship("GroupMember", back_populates="group")


class GroupMember(Base):
    __tablename__ = "groups_members"
    id = Column(Integer, primary_key=True)
    groupid = Column(Integer, ForeignKey("groups.id"), nullable=False, index=True)
    userid = Column(Integer, nullable=False, index=True)
    component = Column(String(100), nullable=False, default="")
    itemid = Column(Integer, nullable=False, default=0)
    timeadded = Column(Integer, nullable=False, default=get_current_timestamp)

    group = relationship("Group", back_populates="members")


class PluginConfigValue(Base):
    """Key-value row backing a plugin's configuration properties."""
    __tablename__ = "config_plugins"
    id = Column(Integer, primary_key=True)
    plugin = Column(String(100), nullable=False)
    name = Column(String(100), nullable=False)
    value = Column(Text, nullable=True)

    __table_args__ = (
        sa.UniqueConstraint("plugin", "name", name="idx_config_plugin_name"),
    )


# =============================================================================
# Plugin tables
# =============================================================================


class Contact(Base):
    """An Arlo contact linked to a local user account."""
    __tablename__ = "enrol_arlo_contact"
    id = Column(Integer, primary_key=True)
    userid = Column(Integer, nullable=False, unique=True, index=True)
    sourceid = Column(Integer, nullable=False, index=True)
    sourceguid = Column(String(36), nullable=False, default="")
    firstname = Column(String(64), nullable=False, default="")
    lastname = Column(String(64), nullable=False, default="")
    email = Column(String(256), nullable=False, default="")
    codeprimary = Column(String(50), nullable=False, default="")
    phonework = Column(String(64), nullable=False, default="")
    phonemobile = Column(String(64), nullable=False, default="")
    timecreated = Column(Integer, nullable=False, default=get_current_timestamp)
    timemodified = Column(Integer, nullable=False,
                          default=get_current_timestamp,
                          onupdate=get_current_timestamp)


class Registration(Base):
    """An Arlo registration tied to one enrolment instance and one user."""
    __tablename__ = "enrol_arlo_registration"
    id = Column(Integer, primary_key=True)
    enrolid = Column(Integer, ForeignKey("enrol.id"), nullable=False, index=True)
    userid = Column(Integer, nullable=False, index=True)
    sourceid = Column(Integer, nullable=False)
    sourceguid = Column(String(36), nullable=False, default="")
    grade = Column(String(64), nullable=False, default="")
    outcome = Column(String(64), nullable=False, default="")
    lastactivity = Column(Integer, nullable=False, default=0)
    progressstatus = Column(String(64), nullable=False, default="")
    progresspercent = Column(Integer, nullable=False, default=0)
    sourcecontactid = Column(Integer, nullable=False, default=0)
    sourcecontactguid = Column(String(36), nullable=False, default="")
    timecreated = Column(Integer, nullable=False, default=get_current_timestamp)
    timemodified = Column(Integer, nullable=False,
                          default=get_current_timestamp,
                          onupdate=get_current_timestamp)

    instance = relationship("EnrolmentInstance", back_populates="registrations")

    __table_args__ = (
        Index("idx_arlo_registration_enrol_user", "enrolid", "userid"),
    )


class EmailQueueEntry(Base):
    """A queued outbound email, scoped to the site or an enrolment instance."""
    __tablename__ = "enrol_arlo_emailqueue"
    id = Column(Integer, primary_key=True)
    area = Column(String(20), nullable=False, index=True)
    instanceid = Column(Integer, nullable=False, index=True)
    userid = Column(Integer, nullable=False, index=True)
    type = Column(String(50), nullable=False)
    status = Column(Integer, nullable=False, default=0)
    extra = Column(Text, nullable=True)
    timecreated = Column(Integer, nullable=False, default=get_current_timestamp)
    timemodified = Column(Integer, nullable=False,
                          default=get_current_timestamp,
                          onupdate=get_current_timestamp)

    __table_args__ = (
        Index("idx_arlo_emailqueue_area_instance", "area", "instanceid"),
    )
