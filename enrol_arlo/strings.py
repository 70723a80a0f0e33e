"""Language strings for the Arlo enrolment plugin."""

from typing import Dict, Optional

STRINGS: Dict[str, Dict[str, str]] = {
    "enrol_arlo": {
        "pluginname": "Arlo enrolments",
        "communications": "Communications",
        "metadata:enrol_arlo_contact": "Contact",
        "metadata:enrol_arlo_registration": "Registration",
        "privacy:metadata:core_group": "The Arlo enrolment plugin creates groups and adds users to them.",
        "privacy:metadata:enrol_arlo_contact": "Arlo contacts associated with user accounts.",
        "privacy:metadata:enrol_arlo_contact:userid": "The ID of the associated user account.",
        "privacy:metadata:enrol_arlo_contact:sourceid": "The ID of the contact in Arlo.",
        "privacy:metadata:enrol_arlo_contact:sourceguid": "The GUID of the contact in Arlo.",
        "privacy:metadata:enrol_arlo_contact:firstname": "The first name of the contact.",
        "privacy:metadata:enrol_arlo_contact:lastname": "The last name of the contact.",
        "privacy:metadata:enrol_arlo_contact:email": "The email address of the contact.",
        "privacy:metadata:enrol_arlo_contact:codeprimary": "The primary code of the contact.",
        "privacy:metadata:enrol_arlo_contact:phonework": "The work phone number of the contact.",
        "privacy:metadata:enrol_arlo_contact:phonemobile": "The mobile phone number of the contact.",
        "privacy:metadata:enrol_arlo_emailqueue": "Emails queued for sending to users.",
        "privacy:metadata:enrol_arlo_emailqueue:area": "The area the email belongs to, site or enrolment.",
        "privacy:metadata:enrol_arlo_emailqueue:instanceid": "The ID of the instance within the area.",
        "privacy:metadata:enrol_arlo_emailqueue:userid": "The ID of the user the email is for.",
        "privacy:metadata:enrol_arlo_emailqueue:type": "The type of email.",
        "privacy:metadata:enrol_arlo_emailqueue:status": "The delivery status of the email.",
        "privacy:metadata:enrol_arlo_emailqueue:extra": "Extra information used to build the email.",
        "privacy:metadata:enrol_arlo_registration": "Arlo registrations associated with enrolments.",
        "privacy:metadata:enrol_arlo_registration:enrolid": "The ID of the enrolment instance.",
        "privacy:metadata:enrol_arlo_registration:userid": "The ID of the enrolled user.",
        "privacy:metadata:enrol_arlo_registration:sourceid": "The ID of the registration in Arlo.",
        "privacy:metadata:enrol_arlo_registration:sourceguid": "The GUID of the registration in Arlo.",
        "privacy:metadata:enrol_arlo_registration:grade": "The grade of the registration.",
        "privacy:metadata:enrol_arlo_registration:outcome": "The outcome of the registration.",
        "privacy:metadata:enrol_arlo_registration:lastactivity": "The time of last activity.",
        "privacy:metadata:enrol_arlo_registration:progressstatus": "The progress status of the registration.",
        "privacy:metadata:enrol_arlo_registration:progresspercent": "The progress percent of the registration.",
        "privacy:metadata:enrol_arlo_registration:sourcecontactid": "The ID of the Arlo contact registered.",
        "privacy:metadata:enrol_arlo_registration:sourcecontactguid": "The GUID of the Arlo contact registered.",
    },
    "core_enrol": {
        "enrolments": "Enrolments",
    },
}


class StringManager:
    """Looks up display strings by key and component."""

    def __init__(self, strings: Optional[Dict[str, Dict[str, str]]] = None):
        self._strings = STRINGS if strings is None else strings

    def get_string(self, key: str, component: str = "enrol_arlo") -> str:
        """Return the string, or ``[[key]]`` when it is not defined."""
        return self._strings.get(component, {}).get(key, f"[[{key}]]")
