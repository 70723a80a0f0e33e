"""Access contexts and privacy request lists.

A context is one of:

- UserContext: personal to a user (context level ``CONTEXT_USER``)
- CourseContext: scoped to a course (context level ``CONTEXT_COURSE``)
- OtherContext: any other level; the provider holds no data there

Request lists carry the contexts or users a privacy request applies to.
Approved lists have been validated by the host and are the only input
accepted for export and erasure.
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Set, Union

from sqlalchemy.orm import Query, Session

from enrol_arlo.models import CONTEXT_COURSE, CONTEXT_USER, Context


@dataclass(frozen=True)
class UserContext:
    id: int
    userid: int

    @property
    def contextlevel(self) -> int:
        return CONTEXT_USER

    @property
    def instanceid(self) -> int:
        return self.userid


@dataclass(frozen=True)
class CourseContext:
    id: int
    courseid: int

    @property
    def contextlevel(self) -> int:
        return CONTEXT_COURSE

    @property
    def instanceid(self) -> int:
        return self.courseid


@dataclass(frozen=True)
class OtherContext:
    id: int
    contextlevel: int
    instanceid: int


PrivacyContext = Union[UserContext, CourseContext, OtherContext]


def context_from_record(record: Context) -> PrivacyContext:
    """Build the typed context for a ``context`` row."""
    if record.contextlevel == CONTEXT_USER:
        return UserContext(id=record.id, userid=record.instanceid)
    if record.contextlevel == CONTEXT_COURSE:
        return CourseContext(id=record.id, courseid=record.instanceid)
    return OtherContext(
        id=record.id,
        contextlevel=record.contextlevel,
        instanceid=record.instanceid,
    )


def load_contexts(db: Session, contextids: Iterable[int]) -> List[PrivacyContext]:
    """Load typed contexts by id, ordered by id. Unknown ids are skipped."""
    ids = list(contextids)
    if not ids:
        return []
    records = db.query(Context).filter(Context.id.in_(ids)).order_by(Context.id).all()
    return [context_from_record(r) for r in records]


def _instance_context(db: Session, contextlevel: int, instanceid: int) -> Optional[PrivacyContext]:
    record = db.query(Context).filter(
        Context.contextlevel == contextlevel,
        Context.instanceid == instanceid,
    ).first()
    return context_from_record(record) if record else None


def user_context(db: Session, userid: int) -> Optional[UserContext]:
    return _instance_context(db, CONTEXT_USER, userid)


def course_context(db: Session, courseid: int) -> Optional[CourseContext]:
    return _instance_context(db, CONTEXT_COURSE, courseid)


@dataclass
class ContextList:
    """Set of context ids holding data for a user."""
    component: str = ""
    contextids: Set[int] = field(default_factory=set)

    def add_from_query(self, query: Query) -> None:
        """Add the first column of every row returned by ``query``."""
        self.contextids.update(row[0] for row in query.all())

    def get_contextids(self) -> List[int]:
        return sorted(self.contextids)

    def __len__(self) -> int:
        return len(self.contextids)


@dataclass
class UserList:
    """Set of user ids holding data in one context."""
    context: PrivacyContext
    component: str = ""
    userids: Set[int] = field(default_factory=set)

    def get_context(self) -> PrivacyContext:
        return self.context

    def add_from_query(self, query: Query) -> None:
        self.userids.update(row[0] for row in query.all())

    def get_userids(self) -> List[int]:
        return sorted(self.userids)

    def __len__(self) -> int:
        return len(self.userids)


@dataclass(frozen=True)
class ApprovedContextList:
    """Contexts approved for export or erasure of one user's data."""
    userid: int
    contexts: tuple
    component: str = ""

    def __post_init__(self):
        object.__setattr__(self, "contexts", tuple(self.contexts))

    def get_user(self) -> int:
        return self.userid

    def get_contexts(self) -> List[PrivacyContext]:
        return list(self.contexts)

    def get_contextids(self) -> List[int]:
        return [c.id for c in self.contexts]

    def count(self) -> int:
        return len(self.contexts)


@dataclass(frozen=True)
class ApprovedUserList:
    """Users approved for erasure within one context."""
    context: PrivacyContext
    userids: tuple
    component: str = ""

    def __post_init__(self):
        object.__setattr__(self, "userids", tuple(sorted(set(self.userids))))

    def get_context(self) -> PrivacyContext:
        return self.context

    def get_userids(self) -> List[int]:
        return list(self.userids)

    def count(self) -> int:
        return len(self.userids)
