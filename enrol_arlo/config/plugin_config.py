"""Typed, defaulted plugin configuration backed by ``config_plugins``.

Subclasses declare their properties in ``define_properties`` as a mapping
of property name to ``{"type": ..., "default": ...}``. A default may be:

- absent or ``None``: the property has no default
- a plain value: used as-is
- a zero-argument callable: evaluated when the default is requested,
  e.g. to look up a record that only exists once the site is installed

Values are stored as text and cleaned to the property type on read and
on ``set``.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional, Union

from sqlalchemy.orm import Session

from enrol_arlo.errors import CodingError
from enrol_arlo.models import PluginConfigValue

logger = logging.getLogger(__name__)

TAG_RE = re.compile(r"<[^>]*>")


class ParamType(Enum):
    """Cleaning applied to a property value."""
    RAW = "raw"    # Stored and returned unchanged
    INT = "int"    # Integer
    TEXT = "text"  # Plain text, markup stripped


PARAM_RAW = ParamType.RAW
PARAM_INT = ParamType.INT
PARAM_TEXT = ParamType.TEXT


@dataclass(frozen=True)
class StaticDefault:
    value: Any

    def resolve(self) -> Any:
        return self.value


@dataclass(frozen=True)
class DeferredDefault:
    """A default computed on demand by a zero-argument callable."""
    compute: Callable[[], Any]

    def resolve(self) -> Any:
        return self.compute()


PropertyDefault = Optional[Union[StaticDefault, DeferredDefault]]


@dataclass(frozen=True)
class PropertyDefinition:
    name: str
    type: ParamType
    default: PropertyDefault = None
    null: bool = True


def clean_param(value: Any, param_type: ParamType) -> Any:
    """Clean a value to the given parameter type.

    Raises:
        CodingError: If the value cannot be represented as the type
    """
    if value is None:
        return None
    if param_type is ParamType.INT:
        try:
            return int(value)
        except (TypeError, ValueError) as e:
            raise CodingError(f"Invalid integer value: {value!r}") from e
    if param_type is ParamType.TEXT:
        return TAG_RE.sub("", str(value))
    return str(value)


def _to_default(default: Any) -> PropertyDefault:
    if default is None or isinstance(default, (StaticDefault, DeferredDefault)):
        return default
    if callable(default):
        return DeferredDefault(default)
    return StaticDefault(default)


class PluginConfig:
    """Base class for a plugin's configuration properties.

    Persisted values are read once per instance and cached. Writes through
    this instance keep the cache current; call ``refresh`` to see values
    written by another instance or session.

    Attributes:
        FRANKEN_NAME: Component name the values are stored under
    """

    FRANKEN_NAME: str = ""

    def __init__(self, db: Session):
        self._db = db
        self._definition: Optional[Dict[str, PropertyDefinition]] = None
        self._values: Optional[Dict[str, Optional[str]]] = None

    def define_properties(self) -> Dict[str, Dict[str, Any]]:
        """Return the property declarations for this plugin."""
        raise NotImplementedError

    def properties_definition(self) -> Dict[str, PropertyDefinition]:
        """Normalised property definitions, in declaration order."""
        if self._definition is None:
            definition: Dict[str, PropertyDefinition] = {}
            for name, settings in self.define_properties().items():
                if "type" not in settings:
                    raise CodingError(f"Property '{name}' has no type")
                definition[name] = PropertyDefinition(
                    name=name,
                    type=settings["type"],
                    default=_to_default(settings.get("default")),
                    null=settings.get("null", True),
                )
            self._definition = definition
        return self._definition

    def has_property(self, name: str) -> bool:
        return name in self.properties_definition()

    def _property(self, name: str) -> PropertyDefinition:
        try:
            return self.properties_definition()[name]
        except KeyError:
            raise CodingError(f"Unexpected property '{name}' requested") from None

    def get_property_type(self, name: str) -> ParamType:
        return self._property(name).type

    def get_property_default(self, name: str) -> Any:
        """Resolve the default for a property.

        Deferred defaults are evaluated on every call; failures such as
        ``ConfigurationError`` propagate to the caller.
        """
        default = self._property(name).default
        if default is None:
            return None
        return default.resolve()

    def refresh(self) -> None:
        """Drop cached values so the next read comes from the database."""
        self._values = None

    def _load(self) -> Dict[str, Optional[str]]:
        if self._values is None:
            rows = self._db.query(PluginConfigValue).filter(
                PluginConfigValue.plugin == self.FRANKEN_NAME
            ).all()
            self._values = {row.name: row.value for row in rows}
        return self._values

    def get(self, name: str) -> Any:
        """Get a property value, falling back to its default."""
        prop = self._property(name)
        values = self._load()
        if name in values:
            return clean_param(values[name], prop.type)
        return clean_param(self.get_property_default(name), prop.type)

    def set(self, name: str, value: Any) -> None:
        """Clean a value to the property type and persist it."""
        prop = self._property(name)
        if value is None and not prop.null:
            raise CodingError(f"Property '{name}' cannot be null")
        self.raw_set(name, clean_param(value, prop.type))

    def raw_set(self, name: str, value: Any) -> None:
        """Persist a value without cleaning."""
        self._property(name)
        stored = None if value is None else str(value)
        row = self._db.query(PluginConfigValue).filter(
            PluginConfigValue.plugin == self.FRANKEN_NAME,
            PluginConfigValue.name == name,
        ).first()
        if row is None:
            row = PluginConfigValue(plugin=self.FRANKEN_NAME, name=name, value=stored)
            self._db.add(row)
        else:
            row.value = stored
        self._db.commit()
        self._load()[name] = stored
        logger.debug(f"Set {self.FRANKEN_NAME}/{name}")

    def unset(self, name: str) -> None:
        """Remove a persisted value so the default applies again."""
        self._property(name)
        self._db.query(PluginConfigValue).filter(
            PluginConfigValue.plugin == self.FRANKEN_NAME,
            PluginConfigValue.name == name,
        ).delete()
        self._db.commit()
        self._load().pop(name, None)

    def to_dict(self) -> Dict[str, Any]:
        """All properties with their effective values."""
        return {name: self.get(name) for name in self.properties_definition()}
