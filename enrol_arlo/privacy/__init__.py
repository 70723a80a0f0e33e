"""Privacy provider for Arlo enrolment data.

This module provides:
- Contexts: typed user/course contexts and privacy request lists
- Metadata: inventory of the personal data the plugin stores
- Provider: discovery, export and erasure over the plugin tables
- Group cleanup: component-owned group membership erasure
- Audit Logging: trail of privacy requests that survives erasure
"""

from enrol_arlo.privacy.audit import PrivacyAuditEntry, PrivacyAuditLogger, PrivacyOperation
from enrol_arlo.privacy.contexts import (
    ApprovedContextList,
    ApprovedUserList,
    ContextList,
    CourseContext,
    OtherContext,
    PrivacyContext,
    UserContext,
    UserList,
    context_from_record,
    course_context,
    load_contexts,
    user_context,
)
from enrol_arlo.privacy.groups import GroupPrivacy, SqlGroupPrivacy
from enrol_arlo.privacy.metadata import MetadataCollection
from enrol_arlo.privacy.provider import ArloPrivacyProvider
from enrol_arlo.privacy.schemas import ErasureResult
from enrol_arlo.privacy.writer import ExportWriter, MemoryExportWriter

__all__ = [
    # Audit
    "PrivacyAuditEntry",
    "PrivacyAuditLogger",
    "PrivacyOperation",
    # Contexts
    "ApprovedContextList",
    "ApprovedUserList",
    "ContextList",
    "CourseContext",
    "OtherContext",
    "PrivacyContext",
    "UserContext",
    "UserList",
    "context_from_record",
    "course_context",
    "load_contexts",
    "user_context",
    # Groups
    "GroupPrivacy",
    "SqlGroupPrivacy",
    # Metadata
    "MetadataCollection",
    # Provider
    "ArloPrivacyProvider",
    "ErasureResult",
    # Export
    "ExportWriter",
    "MemoryExportWriter",
]
