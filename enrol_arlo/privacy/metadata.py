"""Personal data held by the plugin.

Declares every plugin table that stores personal data, the fields in it,
and the host subsystems the plugin passes data to. Descriptions are
language-string keys resolved by ``StringManager``.
"""

from dataclasses import dataclass, field
from typing import Dict, List


@dataclass(frozen=True)
class DatabaseTable:
    name: str
    fields: Dict[str, str]
    summary: str


@dataclass(frozen=True)
class SubsystemLink:
    name: str
    fields: Dict[str, str]
    summary: str


@dataclass
class MetadataCollection:
    component: str
    items: List[object] = field(default_factory=list)

    def add_database_table(self, name: str, fields: Dict[str, str], summary: str) -> "MetadataCollection":
        self.items.append(DatabaseTable(name, dict(fields), summary))
        return self

    def add_subsystem_link(self, name: str, fields: Dict[str, str], summary: str) -> "MetadataCollection":
        self.items.append(SubsystemLink(name, dict(fields), summary))
        return self

    def get_database_tables(self) -> List[DatabaseTable]:
        return [i for i in self.items if isinstance(i, DatabaseTable)]

    def get_subsystem_links(self) -> List[SubsystemLink]:
        return [i for i in self.items if isinstance(i, SubsystemLink)]


PERSONAL_DATA_FIELDS: Dict[str, List[str]] = {
    "enrol_arlo_contact": [
        "userid",
        "sourceid",
        "sourceguid",
        "firstname",
        "lastname",
        "email",
        "codeprimary",
        "phonework",
        "phonemobile",
    ],
    "enrol_arlo_emailqueue": [
        "area",
        "instanceid",
        "userid",
        "type",
        "status",
        "extra",
    ],
    "enrol_arlo_registration": [
        "enrolid",
        "userid",
        "sourceid",
        "sourceguid",
        "grade",
        "outcome",
        "lastactivity",
        "progressstatus",
        "progresspercent",
        "sourcecontactid",
        "sourcecontactguid",
    ],
}


def describe_plugin_data(collection: MetadataCollection) -> MetadataCollection:
    """Add the plugin tables and the group subsystem link to ``collection``."""
    for table, fields in PERSONAL_DATA_FIELDS.items():
        collection.add_database_table(
            table,
            {f: f"privacy:metadata:{table}:{f}" for f in fields},
            f"privacy:metadata:{table}",
        )
    collection.add_subsystem_link("core_group", {}, "privacy:metadata:core_group")
    return collection
