"""Tests for the context, hook registry and control sentinel."""

from unittest.mock import MagicMock

from plugtree import CONTINUE, Context, HookRegistry
from plugtree.sentinel import Control, is_continue


class TestSentinel:
    """Test the control sentinel."""

    def test_identity(self):
        assert CONTINUE is Control.CONTINUE
        assert is_continue(CONTINUE)

    def test_ordinary_values_are_not_sentinel(self):
        assert not is_continue(None)
        assert not is_continue("continue")
        assert not is_continue(Control.CONTINUE.value)

    def test_repr(self):
        assert repr(CONTINUE) == "<CONTINUE>"


class TestHookRegistry:
    """Test hook registration and lookup."""

    def test_lookup_missing_name(self):
        registry = HookRegistry()

        assert registry.get_overrides("missing") == []
        assert registry.get_transforms("missing") == []

    def test_preserves_registration_order(self):
        registry = HookRegistry()
        hooks = [MagicMock() for _ in range(3)]
        for hook in hooks:
            registry.add_override("emit", hook)

        assert registry.get_overrides("emit") == hooks

    def test_lookup_returns_copy(self):
        registry = HookRegistry()
        registry.add_transform("emit", MagicMock())

        registry.get_transforms("emit").clear()

        assert len(registry.transform["emit"]) == 1

    def test_counts(self):
        registry = HookRegistry()
        registry.add_override("load", MagicMock())
        registry.add_transform("load", MagicMock())
        registry.add_transform("emit", MagicMock())

        assert registry.hook_count() == 3
        assert registry.hooked_names() == {"load", "emit"}


class TestContext:
    """Test context property access and derivation."""

    def test_property_access(self):
        cxt = Context(props={"target": "es5"})

        assert cxt["target"] == "es5"
        assert cxt.get("target") == "es5"
        assert cxt.get("missing", "default") == "default"
        assert "target" in cxt
        assert "missing" not in cxt

    def test_derive_copies_props_and_shares_registry(self):
        cxt = Context(props={"a": 1})

        clone = cxt.derive({})
        clone["a"] = 2

        assert cxt["a"] == 1
        assert clone.registry is cxt.registry

    def test_derive_binds_deps_to_clone(self):
        cxt = Context(deps={"inherited": MagicMock()})
        factory = MagicMock(return_value="entry")

        clone = cxt.derive({"dep": factory})

        factory.assert_called_once_with(clone)
        assert clone.deps == {"dep": "entry"}
        assert "dep" not in cxt.deps
