"""Tests for the generic plugin configuration store.

These tests verify property definitions, default resolution, type
cleaning and persistence in ``config_plugins``.
"""

import pytest

from enrol_arlo.config.plugin_config import (
    PARAM_INT,
    PARAM_RAW,
    PARAM_TEXT,
    DeferredDefault,
    PluginConfig,
    StaticDefault,
    clean_param,
)
from enrol_arlo.errors import CodingError, ConfigurationError
from enrol_arlo.models import PluginConfigValue


class SamplePluginConfig(PluginConfig):
    FRANKEN_NAME = "local_sample"

    def __init__(self, db, computed=None):
        super().__init__(db)
        self.computed = computed or (lambda: 42)
        self.calls = 0

    def _compute(self):
        self.calls += 1
        return self.computed()

    def define_properties(self):
        return {
            "name": {"type": PARAM_TEXT, "default": "sample"},
            "token": {"type": PARAM_RAW},
            "limit": {"type": PARAM_INT, "default": 5},
            "computed": {"type": PARAM_INT, "default": self._compute},
            "required": {"type": PARAM_INT, "default": 1, "null": False},
        }


class TestPropertiesDefinition:
    """Tests for normalising property declarations."""

    def test_definition_keeps_declaration_order(self, sqlite_test_db):
        """Properties are listed in declaration order."""
        config = SamplePluginConfig(sqlite_test_db)
        assert list(config.properties_definition()) == [
            "name", "token", "limit", "computed", "required",
        ]

    def test_defaults_are_normalised_to_variants(self, sqlite_test_db):
        """Plain values become static defaults and callables deferred ones."""
        definition = SamplePluginConfig(sqlite_test_db).properties_definition()
        assert definition["token"].default is None
        assert definition["limit"].default == StaticDefault(5)
        assert isinstance(definition["computed"].default, DeferredDefault)

    def test_property_without_type_is_rejected(self, sqlite_test_db):
        """A declaration without a type is a coding error."""
        class Broken(PluginConfig):
            FRANKEN_NAME = "local_broken"

            def define_properties(self):
                return {"oops": {"default": 1}}

        with pytest.raises(CodingError):
            Broken(sqlite_test_db).properties_definition()

    def test_has_property_and_type(self, sqlite_test_db):
        """Declared properties report their type."""
        config = SamplePluginConfig(sqlite_test_db)
        assert config.has_property("limit")
        assert not config.has_property("missing")
        assert config.get_property_type("token") is PARAM_RAW


class TestDefaults:
    """Tests for default resolution."""

    def test_static_and_missing_defaults(self, sqlite_test_db):
        """Static defaults resolve to their value and missing ones to None."""
        config = SamplePluginConfig(sqlite_test_db)
        assert config.get_property_default("limit") == 5
        assert config.get_property_default("token") is None

    def test_deferred_default_is_evaluated_on_request(self, sqlite_test_db):
        """A deferred default runs only when requested."""
        config = SamplePluginConfig(sqlite_test_db)
        assert config.calls == 0
        assert config.get_property_default("computed") == 42
        assert config.calls == 1

    def test_deferred_default_failure_propagates(self, sqlite_test_db):
        """Errors raised by a deferred default reach the caller."""
        def fail():
            raise ConfigurationError("nothing to look up")

        config = SamplePluginConfig(sqlite_test_db, computed=fail)
        with pytest.raises(ConfigurationError):
            config.get_property_default("computed")

    def test_unknown_property_default_raises(self, sqlite_test_db):
        """Requesting the default of an undeclared property is a coding error."""
        with pytest.raises(CodingError):
            SamplePluginConfig(sqlite_test_db).get_property_default("missing")


class TestGetSet:
    """Tests for reading and writing persisted values."""

    def test_get_falls_back_to_default(self, sqlite_test_db):
        """Unset properties read as their default."""
        config = SamplePluginConfig(sqlite_test_db)
        assert config.get("limit") == 5
        assert config.get("token") is None

    def test_set_cleans_and_persists(self, sqlite_test_db):
        """set cleans the value to its type before storing it."""
        config = SamplePluginConfig(sqlite_test_db)
        config.set("limit", "12")
        config.set("name", "<b>Bold</b> name")

        row = sqlite_test_db.query(PluginConfigValue).filter(
            PluginConfigValue.plugin == "local_sample",
            PluginConfigValue.name == "limit",
        ).one()
        assert row.value == "12"

        fresh = SamplePluginConfig(sqlite_test_db)
        assert fresh.get("limit") == 12
        assert fresh.get("name") == "Bold name"

    def test_set_invalid_integer_raises(self, sqlite_test_db):
        """A value that is not an integer cannot be set on an integer property."""
        with pytest.raises(CodingError):
            SamplePluginConfig(sqlite_test_db).set("limit", "many")

    def test_set_null_on_non_nullable_raises(self, sqlite_test_db):
        """None cannot be set on a non-nullable property."""
        with pytest.raises(CodingError):
            SamplePluginConfig(sqlite_test_db).set("required", None)

    def test_raw_set_overwrites_existing_row(self, sqlite_test_db):
        """raw_set updates the existing row instead of adding another."""
        config = SamplePluginConfig(sqlite_test_db)
        config.raw_set("token", "abc")
        config.raw_set("token", "def")

        rows = sqlite_test_db.query(PluginConfigValue).filter(
            PluginConfigValue.name == "token"
        ).all()
        assert [r.value for r in rows] == ["def"]

    def test_unset_restores_default(self, sqlite_test_db):
        """unset removes the stored value so the default applies again."""
        config = SamplePluginConfig(sqlite_test_db)
        config.set("limit", 9)
        config.unset("limit")
        assert config.get("limit") == 5
        assert SamplePluginConfig(sqlite_test_db).get("limit") == 5

    def test_values_are_scoped_to_plugin(self, sqlite_test_db):
        """Values stored for another plugin are not read."""
        sqlite_test_db.add(PluginConfigValue(plugin="other_plugin", name="limit", value="99"))
        sqlite_test_db.commit()
        assert SamplePluginConfig(sqlite_test_db).get("limit") == 5

    def test_values_are_cached_per_instance(self, sqlite_test_db):
        """Writes from another instance are seen only after refresh."""
        reader = SamplePluginConfig(sqlite_test_db)
        assert reader.get("limit") == 5

        SamplePluginConfig(sqlite_test_db).set("limit", 20)
        assert reader.get("limit") == 5

        reader.refresh()
        assert reader.get("limit") == 20

    def test_unknown_property_raises(self, sqlite_test_db):
        """Reading or writing an undeclared property is a coding error."""
        config = SamplePluginConfig(sqlite_test_db)
        with pytest.raises(CodingError):
            config.get("missing")
        with pytest.raises(CodingError):
            config.raw_set("missing", 1)


class TestCleanParam:
    """Tests for type cleaning."""

    @pytest.mark.parametrize("value,expected", [
        ("7", 7),
        (3, 3),
        (True, 1),
    ])
    def test_int(self, value, expected):
        """Integer cleaning converts numeric values."""
        assert clean_param(value, PARAM_INT) == expected

    def test_text_strips_markup(self):
        """Text cleaning removes markup tags."""
        assert clean_param("<p>Hello <i>there</i></p>", PARAM_TEXT) == "Hello there"

    def test_raw_is_unchanged(self):
        """Raw values are returned as given."""
        assert clean_param("<p>keep</p>", PARAM_RAW) == "<p>keep</p>"

    def test_none_passes_through(self):
        """None is never cleaned."""
        assert clean_param(None, PARAM_INT) is None
