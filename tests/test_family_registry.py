"""Tests for FamilyRegistry: build order, cycles and atomic registration."""

import pytest

from eavmodel.context import ContextManager
from eavmodel.errors import (
    ConfigurationError,
    DuplicateCodeError,
    MissingFamilyError,
)
from eavmodel.registry import AttributeRegistry, FamilyRegistry
from eavmodel.utils import CircularDependencyError, topological_sort


def _registry():
    return FamilyRegistry(AttributeRegistry(), ContextManager())


class TestParseGlobalConfig:
    def test_children_may_be_declared_before_parents(self):
        registry = _registry()
        registry.parse_global_config(
            {
                "news": {"parent": "article", "attributes": {"source": {}}},
                "article": {"attributes": {"title": {}}},
            }
        )
        news = registry.get_family("news")
        assert news.parent is registry.get_family("article")
        assert list(news.get_attributes()) == ["title", "source"]
        assert registry.get_family_codes() == ["article", "news"]

    def test_parent_registered_earlier(self):
        registry = _registry()
        registry.parse_global_config({"article": {}})
        registry.parse_global_config({"news": {"parent": "article"}})
        assert registry.get_family("news").parent.code == "article"

    def test_unknown_parent(self):
        registry = _registry()
        with pytest.raises(ConfigurationError, match="unknown parent 'ghost'"):
            registry.parse_global_config({"news": {"parent": "ghost"}})
        assert len(registry) == 0

    def test_inheritance_cycle(self):
        registry = _registry()
        with pytest.raises(ConfigurationError, match="cycle"):
            registry.parse_global_config({"a": {"parent": "b"}, "b": {"parent": "a"}})
        assert len(registry) == 0

    def test_self_parent_is_a_cycle(self):
        with pytest.raises(ConfigurationError, match="cycle"):
            _registry().parse_global_config({"a": {"parent": "a"}})

    def test_failed_build_registers_nothing(self):
        registry = _registry()
        with pytest.raises(ConfigurationError):
            registry.parse_global_config(
                {
                    "root": {},
                    "broken": {"parent": "root", "attributeAsIdentifier": "missing"},
                }
            )
        assert not registry.has_family("root")
        assert not registry.has_family("broken")
        assert len(registry) == 0

    def test_code_already_registered(self):
        registry = _registry()
        registry.parse_global_config({"article": {}})
        with pytest.raises(DuplicateCodeError):
            registry.parse_global_config({"article": {}})


class TestLookup:
    def test_unknown_family(self):
        with pytest.raises(MissingFamilyError, match="Unknown family nope"):
            _registry().get_family("nope")

    def test_missing_family_is_a_lookup_error(self):
        with pytest.raises(LookupError):
            _registry().get_family("nope")

    def test_get_by_parent(self):
        registry = _registry()
        registry.parse_global_config(
            {"root": {}, "b": {"parent": "root"}, "a": {"parent": "root"}, "c": {"parent": "b"}}
        )
        root = registry.get_family("root")
        assert [f.code for f in registry.get_by_parent(root)] == ["b", "a"]

    def test_add_family_twice(self):
        registry = _registry()
        family = registry.build_family("article")
        registry.add_family(family)
        with pytest.raises(DuplicateCodeError):
            registry.add_family(registry.build_family("article"))

    def test_build_family_does_not_register(self):
        registry = _registry()
        family = registry.build_family("article", {"label": "Article"})
        assert family.get_label() == "Article"
        assert not registry.has_family("article")
        assert not family.published


class TestTopologicalSort:
    def test_orders_dependencies_first(self):
        assert topological_sort({"leaf": ["mid"], "mid": ["root"], "root": []}) == [
            "root",
            "mid",
            "leaf",
        ]

    def test_keeps_input_order_when_free(self):
        assert topological_sort({"b": [], "a": [], "c": []}) == ["b", "a", "c"]

    def test_ignores_unknown_dependencies(self):
        assert topological_sort({"a": ["external"]}) == ["a"]

    def test_cycle(self):
        with pytest.raises(CircularDependencyError) as exc_info:
            topological_sort({"a": ["b"], "b": ["c"], "c": ["a"]})
        assert exc_info.value.cycle == ["a", "b", "c", "a"]
