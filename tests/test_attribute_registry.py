"""Tests for the global attribute registry."""

import pytest

from eavmodel.errors import (
    ConfigurationError,
    DuplicateCodeError,
    MissingAttributeError,
    ReservedCodeError,
)
from eavmodel.registry import RESERVED_CODES, AttributeRegistry


class TestParseGlobalConfig:
    def test_registers_every_attribute(self):
        registry = AttributeRegistry()
        registry.parse_global_config(
            {
                "title": {"required": True},
                "price": {"type": "decimal"},
                "notes": None,
            }
        )
        assert len(registry) == 3
        assert registry.get_attribute("title").required is True
        assert registry.get_attribute("price").type.code == "decimal"
        assert registry.has_attribute("notes")
        assert list(registry.get_attributes()) == ["title", "price", "notes"]

    def test_global_mask_applies(self):
        registry = AttributeRegistry(global_context_mask=["locale"])
        registry.parse_global_config({"title": {}, "sku": {"contextMask": []}})
        assert registry.get_attribute("title").context_mask == ["locale"]
        assert registry.get_attribute("sku").context_mask == []

    @pytest.mark.parametrize("code", sorted(RESERVED_CODES))
    def test_reserved_codes_are_rejected(self, code):
        registry = AttributeRegistry()
        with pytest.raises(ReservedCodeError, match="reserved"):
            registry.parse_global_config({code: {}})
        assert not registry.has_attribute(code)

    def test_reserved_code_is_a_configuration_error(self):
        with pytest.raises(ConfigurationError):
            AttributeRegistry().create_attribute("family")

    def test_failed_parse_registers_nothing(self):
        registry = AttributeRegistry()
        with pytest.raises(ReservedCodeError):
            registry.parse_global_config({"title": {}, "price": {"type": "decimal"}, "id": {}})
        assert len(registry) == 0
        assert not registry.has_attribute("title")

    def test_failed_parse_keeps_earlier_registrations(self):
        registry = AttributeRegistry()
        registry.parse_global_config({"title": {}})
        with pytest.raises(DuplicateCodeError):
            registry.parse_global_config({"summary": {}, "title": {}})
        assert list(registry.get_attributes()) == ["title"]

    def test_invalid_attribute_config(self):
        with pytest.raises(ConfigurationError):
            AttributeRegistry().parse_global_config({"title": {"type": "nope"}})


class TestRegistration:
    def test_create_attribute_does_not_register(self):
        registry = AttributeRegistry()
        attribute = registry.create_attribute("title", {"required": True})
        assert attribute.required is True
        assert not registry.has_attribute("title")

    def test_duplicate_code(self):
        registry = AttributeRegistry()
        registry.add_attribute(registry.create_attribute("title"))
        with pytest.raises(DuplicateCodeError):
            registry.add_attribute(registry.create_attribute("title"))

    def test_unknown_code(self):
        registry = AttributeRegistry()
        with pytest.raises(MissingAttributeError, match="No attribute with code : nope"):
            registry.get_attribute("nope")

    def test_missing_attribute_is_a_lookup_error(self):
        with pytest.raises(LookupError):
            AttributeRegistry().get_attribute("nope")

    def test_get_attributes_returns_a_copy(self):
        registry = AttributeRegistry()
        registry.parse_global_config({"title": {}})
        registry.get_attributes().clear()
        assert registry.has_attribute("title")
