"""Unit tests for configuration management."""

import json
from pathlib import Path
from tempfile import TemporaryDirectory

import pytest

from valkit.config import (
    CatalogConfig,
    LogLevel,
    OutputFormat,
    RuleConfig,
    RuleKind,
    ValkitConfig,
    create_default_config,
    find_config_file,
    load_config,
)
from valkit.errors import ConfigurationError
from valkit.validation import LengthRule, OneOfRule, RangeRule, RegexRule, StartsWithRule


class TestRuleConfig:
    """Test RuleConfig model."""

    def test_range_rule(self):
        rule = RuleConfig(name="port_range", kind=RuleKind.RANGE, minimum=1, maximum=65535)
        validator = rule.to_validator()

        assert isinstance(validator, RangeRule)
        assert validator.summary == "value must be a number between 1 and 65535 inclusive"

    def test_kind_from_string(self):
        rule = RuleConfig(name="env", kind="starts_with", prefix="env-")
        assert rule.kind == RuleKind.STARTS_WITH
        assert isinstance(rule.to_validator(), StartsWithRule)

    def test_length_rule_bounds_are_integers(self):
        validator = RuleConfig(name="short", kind="length", maximum=8).to_validator()
        assert isinstance(validator, LengthRule)
        assert validator.summary == "value must be at most 8 characters long"

    def test_regex_and_one_of(self):
        assert isinstance(RuleConfig(name="slug", kind="regex", pattern="[a-z-]+").to_validator(), RegexRule)
        assert isinstance(RuleConfig(name="tier", kind="one_of", choices=["a"]).to_validator(), OneOfRule)

    @pytest.mark.parametrize(
        "data",
        [
            {"name": "r", "kind": "range"},
            {"name": "c", "kind": "contains"},
            {"name": "p", "kind": "regex"},
            {"name": "o", "kind": "one_of"},
        ],
    )
    def test_missing_required_options(self, data):
        with pytest.raises(ValueError, match="needs"):
            RuleConfig(**data)

    @pytest.mark.parametrize("bound", [2.5, 0.1])
    def test_length_bounds_must_be_whole_numbers(self, bound):
        with pytest.raises(ValueError, match="whole number"):
            RuleConfig(name="short", kind="length", minimum=bound)

    def test_length_bound_written_as_float(self):
        validator = RuleConfig(name="short", kind="length", minimum=2.0).to_validator()
        assert validator.summary == "value must be at least 2 characters long"

    @pytest.mark.parametrize("kind", ["length", "range"])
    @pytest.mark.parametrize("bound", [float("inf"), float("-inf"), float("nan")])
    def test_bounds_must_be_finite(self, kind, bound):
        with pytest.raises(ValueError):
            RuleConfig(name="r", kind=kind, maximum=bound)

    def test_non_finite_bound_in_file(self, tmp_path):
        config_file = tmp_path / ".valkit.json"
        config_file.write_text(
            '{"catalog": {"rules": [{"name": "r", "kind": "length", "maximum": Infinity}]}}',
            encoding="utf-8",
        )

        with pytest.raises(ValueError, match="Failed to load config"):
            load_config(config_file)

    @pytest.mark.parametrize("name", ["Upper", "1abc", "has-dash", ""])
    def test_invalid_names(self, name):
        with pytest.raises(ValueError):
            RuleConfig(name=name, kind="contains", substring="x")

    def test_unknown_kind(self):
        with pytest.raises(ValueError):
            RuleConfig(name="x", kind="telepathy")

    def test_unknown_option_forbidden(self):
        with pytest.raises(ValueError):
            RuleConfig(name="x", kind="contains", substring="x", flavour="mint")

    def test_rule_level_error_surfaces_on_construction(self):
        rule = RuleConfig(name="bad", kind="regex", pattern="(")
        with pytest.raises(ConfigurationError):
            rule.to_validator()


class TestValkitConfig:
    """Test complete ValkitConfig model."""

    def test_defaults(self):
        config = ValkitConfig()
        assert config.catalog.disabled == []
        assert config.catalog.rules == []
        assert config.output.format == OutputFormat.TABLE.value
        assert config.logging.level == LogLevel.WARN.value

    def test_config_from_dict(self):
        config_data = {
            "catalog": {
                "disabled": ["is_uuid"],
                "rules": [{"name": "port_range", "kind": "range", "minimum": 1, "maximum": 65535}],
            },
            "output": {"format": "json"},
            "logging": {"level": "debug"},
        }

        config = ValkitConfig(**config_data)
        assert config.catalog.disabled == ["is_uuid"]
        assert config.catalog.rules[0].name == "port_range"
        assert config.output.format == "json"
        assert config.logging.level == "debug"

    def test_config_validation_error(self):
        with pytest.raises(ValueError):
            ValkitConfig(output={"format": "yaml"})

    def test_config_extra_fields_forbidden(self):
        with pytest.raises(ValueError):
            ValkitConfig(invalid_field="should-fail")

    def test_create_default_config(self):
        assert create_default_config() == ValkitConfig(catalog=CatalogConfig())


class TestConfigFileOperations:
    """Test configuration file loading and discovery."""

    def test_load_config_with_file(self, config_file):
        config = load_config(config_file)
        assert [r.name for r in config.catalog.rules] == ["port_range", "has_env_prefix", "tier"]
        assert config.catalog.disabled == ["is_uppercase"]
        assert config.logging.level == "error"

    def test_load_config_file_not_found(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nonexistent.json")

    def test_load_config_invalid_json(self, tmp_path):
        config_file = tmp_path / ".valkit.json"
        config_file.write_text("{invalid json", encoding="utf-8")

        with pytest.raises(ValueError, match="Invalid JSON"):
            load_config(config_file)

    def test_load_config_invalid_structure(self, tmp_path):
        config_file = tmp_path / ".valkit.json"
        config_file.write_text(json.dumps({"invalid": "structure"}), encoding="utf-8")

        with pytest.raises(ValueError, match="Failed to load config"):
            load_config(config_file)

    def test_find_config_file_in_parent(self):
        with TemporaryDirectory() as temp_dir:
            root = Path(temp_dir).resolve()
            (root / ".valkit.json").write_text("{}", encoding="utf-8")
            nested = root / "a" / "b"
            nested.mkdir(parents=True)

            assert find_config_file(nested) == root / ".valkit.json"

    def test_load_config_searches_cwd(self, tmp_path, monkeypatch, config_file):
        monkeypatch.chdir(tmp_path)
        config = load_config()
        assert config.logging.level == "error"

    def test_load_config_defaults_without_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr("valkit.config.find_config_file", lambda: None)
        assert load_config() == create_default_config()
