"""Group membership cleanup for privacy erasure.

The plugin adds users to course groups, tagging each membership with its
component name. Erasure hands membership cleanup to a ``GroupPrivacy``
collaborator; ``SqlGroupPrivacy`` deletes the tagged ``groups_members``
rows directly.
"""

import logging
from typing import Protocol

from sqlalchemy import select
from sqlalchemy.orm import Session

from enrol_arlo.models import Group, GroupMember
from enrol_arlo.privacy.contexts import (
    ApprovedContextList,
    ApprovedUserList,
    CourseContext,
    PrivacyContext,
)

logger = logging.getLogger(__name__)


class GroupPrivacy(Protocol):
    def delete_groups_for_all_users(self, context: PrivacyContext, component: str) -> int:
        ...

    def delete_groups_for_user(self, contextlist: ApprovedContextList, component: str) -> int:
        ...

    def delete_groups_for_users(self, userlist: ApprovedUserList, component: str) -> int:
        ...


class SqlGroupPrivacy:
    """Deletes component-owned group memberships in course contexts.

    Runs on the caller's session and does not commit, so the deletes
    share the caller's transaction.
    """

    def __init__(self, db: Session):
        self._db = db

    def _course_groups(self, courseid: int):
        return select(Group.id).where(Group.courseid == courseid)

    def delete_groups_for_all_users(self, context: PrivacyContext, component: str) -> int:
        if not isinstance(context, CourseContext):
            return 0
        count = self._db.query(GroupMember).filter(
            GroupMember.component == component,
            GroupMember.groupid.in_(self._course_groups(context.courseid)),
        ).delete(synchronize_session=False)
        logger.debug(f"Deleted {count} {component} group memberships in course {context.courseid}")
        return count

    def delete_groups_for_user(self, contextlist: ApprovedContextList, component: str) -> int:
        count = 0
        for context in contextlist.get_contexts():
            if not isinstance(context, CourseContext):
                continue
            count += self._db.query(GroupMember).filter(
                GroupMember.component == component,
                GroupMember.userid == contextlist.get_user(),
                GroupMember.groupid.in_(self._course_groups(context.courseid)),
            ).delete(synchronize_session=False)
        logger.debug(f"Deleted {count} {component} group memberships for user {contextlist.get_user()}")
        return count

    def delete_groups_for_users(self, userlist: ApprovedUserList, component: str) -> int:
        context = userlist.get_context()
        userids = userlist.get_userids()
        if not isinstance(context, CourseContext) or not userids:
            return 0
        count = self._db.query(GroupMember).filter(
            GroupMember.component == component,
            GroupMember.userid.in_(userids),
            GroupMember.groupid.in_(self._course_groups(context.courseid)),
        ).delete(synchronize_session=False)
        logger.debug(f"Deleted {count} {component} group memberships for {len(userids)} users")
        return count
