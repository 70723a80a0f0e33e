"""Privacy provider for the Arlo enrolment plugin.

Implements discovery, export and erasure of the personal data the plugin
stores:

- enrol_arlo_contact: the Arlo contact linked to a user (user context)
- enrol_arlo_emailqueue: emails queued for a user (user context)
- enrol_arlo_registration: Arlo registrations per enrolment (course context)

Erasure order within a course:
1. Disable the Arlo enrolment instance
2. Delete its registrations
3. Delete its enrolment-scoped email queue entries
4. Hand group membership cleanup to the group privacy collaborator

With ``erase_atomically`` each erasure call runs in one transaction;
otherwise every statement is committed as it runs.
"""

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from sqlalchemy import and_
from sqlalchemy.orm import Session

from enrol_arlo.database import step_commit, unit_of_work
from enrol_arlo.models import (
    CONTEXT_COURSE,
    CONTEXT_USER,
    ENROL_INSTANCE_DISABLED,
    Contact,
    Context,
    EmailArea,
    EmailQueueEntry,
    EnrolmentInstance,
    Registration,
    User,
)
from enrol_arlo.privacy.audit import PrivacyAuditLogger, PrivacyOperation
from enrol_arlo.privacy.contexts import (
    ApprovedContextList,
    ApprovedUserList,
    ContextList,
    CourseContext,
    PrivacyContext,
    UserContext,
    UserList,
)
from enrol_arlo.privacy.groups import GroupPrivacy, SqlGroupPrivacy
from enrol_arlo.privacy.metadata import (
    PERSONAL_DATA_FIELDS,
    MetadataCollection,
    describe_plugin_data,
)
from enrol_arlo.privacy.schemas import ErasureResult
from enrol_arlo.privacy.writer import ExportWriter, MemoryExportWriter
from enrol_arlo.settings import Settings, get_settings
from enrol_arlo.strings import StringManager

logger = logging.getLogger(__name__)


def _record(row: Any, table: str) -> Dict[str, Any]:
    return {name: getattr(row, name) for name in PERSONAL_DATA_FIELDS[table]}


class ArloPrivacyProvider:
    """Privacy provider over the Arlo plugin tables.

    Attributes:
        component: Component name passed to collaborators
        enrol_name: Enrolment method name of Arlo instances in ``enrol``
        atomic: Whether erasure calls run in a single transaction
    """

    def __init__(
        self,
        db: Session,
        writer: Optional[ExportWriter] = None,
        groups: Optional[GroupPrivacy] = None,
        strings: Optional[StringManager] = None,
        audit: Optional[PrivacyAuditLogger] = None,
        settings: Optional[Settings] = None,
    ):
        """Initialize the provider with its collaborators.

        Args:
            db: SQLAlchemy database session
            writer: Export destination (defaults to an in-memory writer)
            groups: Group membership cleanup (defaults to SQL on ``db``)
            strings: Language string lookup for export labels
            audit: Audit trail for requests (optional)
            settings: Plugin settings (defaults to the process settings)
        """
        settings = settings or get_settings()
        self._db = db
        self._writer = writer if writer is not None else MemoryExportWriter()
        self._groups = groups if groups is not None else SqlGroupPrivacy(db)
        self._strings = strings or StringManager()
        self._audit = audit
        self.component = settings.component
        self.enrol_name = settings.enrol_name
        self.atomic = settings.erase_atomically

    @property
    def writer(self) -> ExportWriter:
        return self._writer

    # =========================================================================
    # Metadata
    # =========================================================================

    def get_metadata(self, collection: Optional[MetadataCollection] = None) -> MetadataCollection:
        """Describe the personal data stored by the plugin."""
        if collection is None:
            collection = MetadataCollection(self.component)
        return describe_plugin_data(collection)

    # =========================================================================
    # Discovery
    # =========================================================================

    def get_contexts_for_userid(self, userid: int) -> ContextList:
        """Get the contexts that contain data for the specified user.

        The user context is included when the user has an Arlo contact;
        course contexts are included for every course with an Arlo
        registration for that contact.
        """
        contextlist = ContextList(component=self.component)

        contextlist.add_from_query(
            self._db.query(Context.id)
            .join(User, and_(User.id == Context.instanceid, Context.contextlevel == CONTEXT_USER))
            .join(Contact, Contact.userid == User.id)
            .filter(User.id == userid)
        )
        contextlist.add_from_query(
            self._db.query(Context.id)
            .join(EnrolmentInstance, and_(
                EnrolmentInstance.courseid == Context.instanceid,
                Context.contextlevel == CONTEXT_COURSE,
            ))
            .join(Registration, Registration.enrolid == EnrolmentInstance.id)
            .join(Contact, Contact.userid == Registration.userid)
            .join(User, User.id == Contact.userid)
            .filter(User.id == userid)
        )
        return contextlist

    def get_users_in_context(self, userlist: UserList) -> UserList:
        """Fill ``userlist`` with the users who have data in its context.

        Contexts other than user and course contexts hold no plugin data
        and leave the list unchanged.
        """
        context = userlist.get_context()
        if isinstance(context, UserContext):
            userlist.add_from_query(
                self._db.query(User.id)
                .join(Contact, Contact.userid == User.id)
                .filter(User.id == context.userid)
            )
        elif isinstance(context, CourseContext):
            userlist.add_from_query(
                self._db.query(User.id)
                .join(Registration, Registration.userid == User.id)
                .join(EnrolmentInstance, EnrolmentInstance.id == Registration.enrolid)
                .filter(EnrolmentInstance.courseid == context.courseid)
                .distinct()
            )
        return userlist

    # =========================================================================
    # Export
    # =========================================================================

    def export_user_data(self, contextlist: ApprovedContextList) -> int:
        """Export all user data for the user, in the approved contexts.

        Returns:
            Number of records written
        """
        if not contextlist.count():
            return 0

        userid = contextlist.get_user()
        audit_id = self._audit_start(PrivacyOperation.EXPORT, userid=userid)
        pluginname = self._strings.get_string("pluginname")
        written = 0

        try:
            for context in contextlist.get_contexts():
                if isinstance(context, UserContext):
                    written += self._export_user_context(context, userid, pluginname)
                elif isinstance(context, CourseContext):
                    written += self._export_course_context(context, userid, pluginname)
        except Exception as e:
            logger.error(f"Export failed for user {userid}: {e}")
            self._audit_complete(audit_id, "failed", {"error": str(e)})
            raise

        logger.info(f"Exported {written} records for user {userid}")
        self._audit_complete(audit_id, "completed", {"records": written})
        return written

    def _export_user_context(self, context: UserContext, userid: int, pluginname: str) -> int:
        written = 0
        contacts = (
            self._db.query(Contact)
            .join(User, User.id == Contact.userid)
            .join(Context, and_(Context.instanceid == User.id, Context.contextlevel == CONTEXT_USER))
            .filter(Context.id == context.id, User.id == userid)
        )
        subcontext = [pluginname, self._strings.get_string("metadata:enrol_arlo_contact")]
        for contact in contacts:
            self._writer.with_context(context).export_data(
                subcontext, _record(contact, "enrol_arlo_contact")
            )
            written += 1

        emails = self._db.query(EmailQueueEntry).filter(
            EmailQueueEntry.userid == userid
        ).order_by(EmailQueueEntry.id)
        subcontext = [pluginname, self._strings.get_string("communications")]
        for email in emails:
            self._writer.with_context(context).export_data(
                subcontext, _record(email, "enrol_arlo_emailqueue")
            )
            written += 1
        return written

    def _export_course_context(self, context: CourseContext, userid: int, pluginname: str) -> int:
        written = 0
        subcontext = [
            self._strings.get_string("enrolments", "core_enrol"),
            pluginname,
            self._strings.get_string("metadata:enrol_arlo_registration"),
        ]
        registrations = (
            self._db.query(Registration)
            .join(EnrolmentInstance, EnrolmentInstance.id == Registration.enrolid)
            .join(Context, and_(
                Context.instanceid == EnrolmentInstance.courseid,
                Context.contextlevel == CONTEXT_COURSE,
            ))
            .join(Contact, Contact.userid == Registration.userid)
            .join(User, User.id == Contact.userid)
            .filter(Context.id == context.id, User.id == userid)
            .order_by(Registration.id)
        )
        for registration in registrations:
            self._writer.with_context(context).export_data(
                subcontext, _record(registration, "enrol_arlo_registration")
            )
            written += 1
        return written

    # =========================================================================
    # Erasure
    # =========================================================================

    def delete_data_for_all_users_in_context(self, context: PrivacyContext) -> ErasureResult:
        """Delete all user data which matches the specified context."""
        result = ErasureResult("delete_data_for_all_users_in_context", contextid=context.id)
        if not isinstance(context, (CourseContext, UserContext)):
            return result
        if isinstance(context, UserContext):
            result.userid = context.userid

        with self._erasure(PrivacyOperation.DELETE_CONTEXT, result):
            if isinstance(context, CourseContext):
                for instance in self._course_instances([context.courseid]):
                    self._set_instance_disabled(instance, result)
                    result.add("enrol_arlo_registration", self._delete(
                        self._db.query(Registration).filter(Registration.enrolid == instance.id)
                    ))
                    result.add("enrol_arlo_emailqueue", self._delete(
                        self._db.query(EmailQueueEntry).filter(
                            EmailQueueEntry.area == EmailArea.enrolment.value,
                            EmailQueueEntry.instanceid == instance.id,
                        )
                    ))
                result.add("groups_members", self._groups.delete_groups_for_all_users(
                    context, self.component
                ))
                step_commit(self._db, self.atomic)
            else:
                self._delete_user_records(context.userid, result)
        return result

    def delete_data_for_user(self, contextlist: ApprovedContextList) -> ErasureResult:
        """Delete all user data for the user, in the approved contexts.

        The contact and queued emails are removed whichever contexts were
        approved; registrations only in the approved courses.
        """
        userid = contextlist.get_user()
        result = ErasureResult("delete_data_for_user", userid=userid)
        if not contextlist.count():
            return result

        courseids = [c.courseid for c in contextlist.get_contexts() if isinstance(c, CourseContext)]
        with self._erasure(PrivacyOperation.DELETE_USER, result):
            enrolids = [i.id for i in self._course_instances(courseids)]
            if enrolids:
                result.add("enrol_arlo_registration", self._delete(
                    self._db.query(Registration).filter(
                        Registration.enrolid.in_(enrolids),
                        Registration.userid == userid,
                    )
                ))
            self._delete_user_records(userid, result)
            result.add("groups_members", self._groups.delete_groups_for_user(
                contextlist, self.component
            ))
            step_commit(self._db, self.atomic)
        return result

    def delete_data_for_users(self, userlist: ApprovedUserList) -> ErasureResult:
        """Delete data for several users within a single course context."""
        context = userlist.get_context()
        userids = userlist.get_userids()
        result = ErasureResult("delete_data_for_users", contextid=context.id)
        if not isinstance(context, CourseContext) or not userids:
            return result

        with self._erasure(PrivacyOperation.DELETE_USERS, result):
            enrolids = [i.id for i in self._course_instances([context.courseid])]
            if enrolids:
                result.add("enrol_arlo_registration", self._delete(
                    self._db.query(Registration).filter(
                        Registration.enrolid.in_(enrolids),
                        Registration.userid.in_(userids),
                    )
                ))
                result.add("enrol_arlo_emailqueue", self._delete(
                    self._db.query(EmailQueueEntry).filter(
                        EmailQueueEntry.area == EmailArea.enrolment.value,
                        EmailQueueEntry.instanceid.in_(enrolids),
                        EmailQueueEntry.userid.in_(userids),
                    )
                ))
            result.add("groups_members", self._groups.delete_groups_for_users(
                userlist, self.component
            ))
            step_commit(self._db, self.atomic)
        return result

    def _course_instances(self, courseids: List[int]) -> List[EnrolmentInstance]:
        """Arlo enrolment instances in the given courses."""
        if not courseids:
            return []
        return self._db.query(EnrolmentInstance).filter(
            EnrolmentInstance.enrol == self.enrol_name,
            EnrolmentInstance.courseid.in_(courseids),
        ).order_by(EnrolmentInstance.id).all()

    def _set_instance_disabled(self, instance: EnrolmentInstance, result: ErasureResult) -> None:
        result.add("enrol", self._db.query(EnrolmentInstance).filter(
            EnrolmentInstance.id == instance.id
        ).update({EnrolmentInstance.status: ENROL_INSTANCE_DISABLED}, synchronize_session=False))
        step_commit(self._db, self.atomic)

    def _delete_user_records(self, userid: int, result: ErasureResult) -> None:
        result.add("enrol_arlo_contact", self._delete(
            self._db.query(Contact).filter(Contact.userid == userid)
        ))
        result.add("enrol_arlo_emailqueue", self._delete(
            self._db.query(EmailQueueEntry).filter(EmailQueueEntry.userid == userid)
        ))

    def _delete(self, query) -> int:
        count = query.delete(synchronize_session=False)
        step_commit(self._db, self.atomic)
        return count

    @contextmanager
    def _erasure(self, operation: PrivacyOperation, result: ErasureResult) -> Iterator[None]:
        audit_id = self._audit_start(operation, userid=result.userid, contextid=result.contextid)
        logger.info(
            f"Starting {result.operation}: userid={result.userid}, "
            f"contextid={result.contextid}, atomic={self.atomic}"
        )
        try:
            with unit_of_work(self._db, atomic=self.atomic):
                yield
        except Exception as e:
            logger.error(f"{result.operation} failed: {e}")
            self._audit_complete(audit_id, "failed", {"error": str(e)})
            raise
        logger.info(f"Completed {result.operation}: {result.counts}")
        self._audit_complete(audit_id, "completed", result.to_dict())

    def _audit_start(
        self,
        operation: PrivacyOperation,
        userid: Optional[int] = None,
        contextid: Optional[int] = None,
    ) -> Optional[str]:
        if self._audit is None:
            return None
        entry = self._audit.log_operation_start(
            operation, target_userid=userid, target_contextid=contextid
        )
        return entry.audit_id

    def _audit_complete(self, audit_id: Optional[str], status: str, details: Dict[str, Any]) -> None:
        if self._audit is not None and audit_id is not None:
            self._audit.log_operation_complete(audit_id, status, details)
