"""Plugin configuration store.

- PluginConfig: typed, defaulted properties persisted in ``config_plugins``
- ArloPluginConfig: the Arlo enrolment property set and default installer
"""

from enrol_arlo.config.arlo_plugin_config import (
    ArloPluginConfig,
    get_archetype_roles,
    get_student_role_id,
)
from enrol_arlo.config.plugin_config import (
    PARAM_INT,
    PARAM_RAW,
    PARAM_TEXT,
    DeferredDefault,
    ParamType,
    PluginConfig,
    PropertyDefinition,
    StaticDefault,
    clean_param,
)

__all__ = [
    "ArloPluginConfig",
    "get_archetype_roles",
    "get_student_role_id",
    "PARAM_INT",
    "PARAM_RAW",
    "PARAM_TEXT",
    "DeferredDefault",
    "ParamType",
    "PluginConfig",
    "PropertyDefinition",
    "StaticDefault",
    "clean_param",
]
