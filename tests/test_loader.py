"""Tests for loading complete models from YAML/JSON files and mappings."""

import json

import pytest

from eavmodel.config import EAVConfig
from eavmodel.core.models import ModelConfig
from eavmodel.entities import ContextualValue, Data
from eavmodel.errors import ConfigurationError
from eavmodel.loader import load_model, read_model_config


MODEL_YAML = """\
context:
  default:
    locale: en
    channel: web
  mask: [locale]
attributes:
  title:
    type: string
    required: true
  sku:
    unique: true
    required: true
    contextMask: []
families:
  book:
    parent: product
    attributes:
      isbn:
        unique: true
  product:
    attributeAsLabel: [title]
    attributeAsIdentifier: sku
    attributes:
      title: ~
      sku: ~
      price:
        type: decimal
        contextMask: [channel]
        options:
          currency: EUR
"""


@pytest.fixture
def model_file(tmp_path):
    path = tmp_path / "model.yaml"
    path.write_text(MODEL_YAML)
    return path


class TestLoadModel:
    def test_load_yaml(self, model_file):
        model = load_model(model_file, config=EAVConfig())

        assert list(model.attributes) == ["title", "sku"]
        assert list(model.families) == ["product", "book"]

        product = model.get_family("product")
        assert product.get_attribute("title").required is True
        assert product.get_attribute("title").context_mask == ["locale"]
        assert product.get_attribute("sku").context_mask == []
        assert product.get_attribute("price").context_mask == ["channel"]
        assert product.get_attribute("price").get_option("currency") == "EUR"
        assert product.attribute_as_identifier.code == "sku"

        book = model.get_family("book")
        assert list(book.get_attributes()) == ["title", "sku", "price", "isbn"]
        assert book.get_attribute("isbn").context_mask == ["locale"]
        assert [a.code for a in book.attribute_as_label] == ["title"]
        assert product.get_matching_codes() == ["product", "book"]

    def test_model_context_overrides_settings(self, model_file):
        settings = EAVConfig(default_context={"locale": "de"}, context_mask=["scope"])
        model = load_model(model_file, config=settings)
        assert model.context_manager.get_default_context() == {"locale": "en", "channel": "web"}
        assert model.attribute_registry.global_context_mask == ["locale"]

    def test_settings_apply_when_model_is_silent(self):
        settings = EAVConfig(
            default_context={"locale": "de"},
            context_mask=["locale"],
            data_class="eavmodel.entities.Data",
        )
        model = load_model({"families": {"note": {"attributes": {"body": {}}}}}, config=settings)
        note = model.get_family("note")
        assert note.get_attribute("body").context_mask == ["locale"]
        assert note.data_class is Data
        assert model.context_manager.get_default_context() == {"locale": "de"}

    def test_values_end_to_end(self, model_file):
        model = load_model(model_file, config=EAVConfig())
        book = model.get_family("book")
        data = book.create_data()

        title = book.create_value(data, book.get_attribute("title"))
        price = book.create_value(data, book.get_attribute("price"), {"channel": "print"})

        assert isinstance(title, ContextualValue)
        assert title.context == {"locale": "en"}
        assert price.context == {"channel": "print"}

    def test_load_json(self, tmp_path):
        path = tmp_path / "model.json"
        path.write_text(json.dumps({"families": {"note": {"attributes": {"body": {"type": "text"}}}}}))
        model = load_model(path, config=EAVConfig())
        assert model.get_family("note").get_attribute("body").type.code == "text"

    def test_summary(self, model_file):
        summary = load_model(model_file, config=EAVConfig()).summary()
        assert "Families: 2" in summary
        assert "book < product" in summary

    def test_empty_model(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        model = load_model(path, config=EAVConfig())
        assert model.families == {}


class TestInvalidModels:
    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_model(tmp_path / "missing.yaml", config=EAVConfig())

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("families: [unclosed\n")
        with pytest.raises(ConfigurationError):
            load_model(path, config=EAVConfig())

    def test_unknown_top_level_key(self):
        with pytest.raises(ConfigurationError):
            load_model({"familes": {}}, config=EAVConfig())

    def test_unknown_family_key(self):
        with pytest.raises(ConfigurationError):
            load_model({"families": {"note": {"atributes": {}}}}, config=EAVConfig())

    def test_unknown_attribute_key(self):
        with pytest.raises(ConfigurationError):
            load_model({"attributes": {"title": {"requird": True}}}, config=EAVConfig())

    def test_reserved_global_attribute(self):
        with pytest.raises(ConfigurationError, match="reserved"):
            load_model({"attributes": {"createdAt": {}}}, config=EAVConfig())

    def test_unknown_parent(self):
        with pytest.raises(ConfigurationError, match="unknown parent"):
            load_model({"families": {"note": {"parent": "ghost"}}}, config=EAVConfig())


class TestModelConfig:
    def test_aliases_and_field_names(self):
        config = read_model_config(
            {
                "families": {
                    "a": {"attributeAsLabel": "title", "attributes": {"title": None}},
                    "b": {"attribute_as_label": ["title"], "attributes": {"title": None}},
                }
            }
        )
        assert config.families["a"].attribute_as_label == ["title"]
        assert config.families["b"].attribute_as_label == ["title"]

    def test_yaml_round_trip(self, model_file, tmp_path):
        original = ModelConfig.from_yaml(model_file)
        output = tmp_path / "out" / "model.yaml"
        original.to_yaml(output)

        reloaded = ModelConfig.from_yaml(output)
        assert reloaded.families["product"].attribute_as_identifier == "sku"
        assert reloaded.attributes["sku"].context_mask == []
        assert "contextMask" in output.read_text()
