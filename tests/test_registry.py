"""Tests for the field registry."""

import pytest

from formengine.registry import FieldRegistry
from formengine.types import FieldStatus, Rule


@pytest.fixture
def registry():
    return FieldRegistry({"username": "ada", "user": {"email": "a@b.com"}})


class TestRegister:
    def test_register_creates_record(self, registry):
        record = registry.register("username", [Rule(required=True)])
        assert record.path == "username"
        assert record.status is FieldStatus.NONE
        assert record.errors == []
        assert registry.get("username") is record
        assert "username" in registry
        assert len(registry) == 1

    def test_segment_paths_are_canonicalized(self, registry):
        registry.register(["user", "email"], [])
        assert registry.get("user.email") is not None
        assert registry.paths() == ["user.email"]

    def test_registration_order_preserved(self, registry):
        for path in ["c", "a", "b"]:
            registry.register(path, [])
        assert registry.paths() == ["c", "a", "b"]
        assert [r.path for r in registry.all()] == ["c", "a", "b"]

    def test_reregister_replaces_rules_keeps_state(self, registry):
        record = registry.register("username", [Rule(required=True)])
        record.status = FieldStatus.ERROR
        record.errors = ["username is required"]

        new_rules = [Rule(min=3)]
        again = registry.register("username", new_rules)

        assert again is record
        assert again.rules == new_rules
        assert again.status is FieldStatus.ERROR
        assert again.errors == ["username is required"]

    def test_reregister_keeps_position(self, registry):
        registry.register("a", [])
        registry.register("b", [])
        registry.register("a", [Rule(required=True)])
        assert registry.paths() == ["a", "b"]

    def test_disabled_flag_stored(self, registry):
        assert registry.register("username", [], disabled=True).disabled


class TestUnregister:
    def test_unregister_removes_record(self, registry):
        registry.register("username", [])
        registry.unregister("username")
        assert registry.get("username") is None
        assert "username" not in registry

    def test_unregister_unknown_is_noop(self, registry):
        registry.unregister("nope")
        assert len(registry) == 0

    def test_unregister_invalidates_in_flight_runs(self, registry):
        record = registry.register("username", [])
        generation = record.generation
        registry.unregister("username")
        assert record.generation > generation
        assert not registry.is_current(record)

    def test_reregistered_path_is_a_new_record(self, registry):
        old = registry.register("username", [])
        registry.unregister("username")
        new = registry.register("username", [])
        assert new is not old
        assert registry.is_current(new)
        assert not registry.is_current(old)


class TestModelAccess:
    def test_get_and_set_value(self, registry):
        assert registry.get_value("user.email") == "a@b.com"
        registry.set_value("user.email", "x@y.io")
        assert registry.model["user"]["email"] == "x@y.io"

    def test_snapshot_taken_at_first_registration(self, registry):
        registry.register("username", [])
        registry.set_value("username", "changed")
        registry.register("username", [])
        assert registry.initial_value("username") == "ada"

    def test_snapshot_is_deep_copied(self):
        registry = FieldRegistry({"tags": ["a"]})
        registry.register("tags", [])
        registry.model["tags"].append("b")
        assert registry.initial_value("tags") == ["a"]

    def test_snapshot_survives_unmount(self, registry):
        registry.register("username", [])
        registry.unregister("username")
        registry.set_value("username", "changed")
        registry.register("username", [])
        assert registry.initial_value("username") == "ada"

    def test_default_model(self):
        registry = FieldRegistry()
        registry.set_value("a.b", 1)
        assert registry.model == {"a": {"b": 1}}
