"""Arlo enrolment plugin settings."""

import logging
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from enrol_arlo import COMPONENT
from enrol_arlo.config.plugin_config import (
    PARAM_INT,
    PARAM_RAW,
    PARAM_TEXT,
    PluginConfig,
)
from enrol_arlo.errors import ConfigurationError
from enrol_arlo.models import (
    ENROL_EXT_REMOVED_SUSPEND,
    ENROL_EXT_REMOVED_UNENROL,
    Role,
)

logger = logging.getLogger(__name__)


def get_archetype_roles(db: Session, archetype: str) -> List[Role]:
    """Roles with the given archetype, in role sort order."""
    return db.query(Role).filter(
        Role.archetype == archetype
    ).order_by(Role.sortorder, Role.id).all()


def get_student_role_id(db: Session) -> int:
    """Id of the first role with the ``student`` archetype.

    Raises:
        ConfigurationError: If the site defines no student role
    """
    roles = get_archetype_roles(db, "student")
    if not roles:
        raise ConfigurationError("No role with the 'student' archetype exists")
    return roles[0].id


class ArloPluginConfig(PluginConfig):

    FRANKEN_NAME = COMPONENT

    def define_properties(self) -> Dict[str, Dict[str, Any]]:
        return {
            "platform": {
                "type": PARAM_RAW,
            },
            "apiusername": {
                "type": PARAM_RAW,
            },
            "apipassword": {
                "type": PARAM_RAW,
            },
            "apistatus": {
                "type": PARAM_INT,
                "default": -1,
            },
            "apierrormessage": {
                "type": PARAM_TEXT,
                "default": "",
            },
            "apierrortime": {
                "type": PARAM_INT,
                "default": 0,
            },
            "apierrorcounter": {
                "type": PARAM_INT,
                "default": 0,
            },
            "matchuseraccountsby": {
                "type": PARAM_INT,
            },
            "authplugin": {
                "type": PARAM_TEXT,
                "default": "manual",
            },
            "roleid": {
                "type": PARAM_INT,
                "default": lambda: get_student_role_id(self._db),
            },
            "unenrolaction": {
                "type": PARAM_INT,
                "default": ENROL_EXT_REMOVED_UNENROL,
            },
            "expiredaction": {
                "type": PARAM_INT,
                "default": ENROL_EXT_REMOVED_SUSPEND,
            },
            "pushonlineactivityresults": {
                "type": PARAM_INT,
                "default": 1,
            },
            "pusheventresults": {
                "type": PARAM_INT,
                "default": 1,
            },
            "alertsiteadmins": {
                "type": PARAM_INT,
                "default": 1,
            },
            "sendnewaccountdetailsemail": {
                "type": PARAM_INT,
                "default": 1,
            },
            "sendemailimmediately": {
                "type": PARAM_INT,
                "default": 1,
            },
            "emailprocessingviacli": {
                "type": PARAM_INT,
                "default": 0,
            },
        }

    def install_defaults(self) -> List[str]:
        """Persist every non-null default, in declaration order.

        Returns:
            Names of the properties that were written

        Raises:
            ConfigurationError: If a deferred default cannot be resolved
        """
        installed = []
        for name in self.properties_definition():
            default = self.get_property_default(name)
            if default is not None:
                logger.info(f"Installing default for {self.FRANKEN_NAME}/{name}")
                self.raw_set(name, default)
                installed.append(name)
        return installed
