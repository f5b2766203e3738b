"""Tests for the function registry and its builder."""

import pytest

from valkit.config import CatalogConfig, RuleConfig, ValkitConfig
from valkit.errors import (
    ConfigurationError,
    DuplicateFunctionError,
    FunctionNotFoundError,
    RegistryFrozenError,
)
from valkit.functions import (
    DEFAULT_FUNCTIONS,
    Registry,
    RegistryBuilder,
    ValidationFunction,
    build_registry,
    function_constructor,
)
from valkit.validation import Base64Rule, CidrRule, ContainsRule, RangeRule
from valkit.values import ParameterType, Value


class TestRegistryBuilder:
    """Test catalog construction."""

    def test_distinct_names_build_n_entries(self):
        registry = (
            RegistryBuilder()
            .add(function_constructor("is_base64", Base64Rule))
            .add(function_constructor("is_cidr", CidrRule))
            .add_validator("in_range", RangeRule(1, 10))
            .build()
        )

        assert len(registry) == 3
        assert registry.names() == ["is_base64", "is_cidr", "in_range"]
        assert registry.call("is_base64", Value.known("aGVsbG8=")).passed
        assert registry.call("is_cidr", Value.known("10.0.0.0/8")).passed
        assert registry.call("in_range", Value.known("5")).passed

    def test_duplicate_names_fail_build(self):
        builder = (
            RegistryBuilder()
            .add(function_constructor("is_valid", Base64Rule))
            .add(function_constructor("is_valid", CidrRule))
        )

        with pytest.raises(DuplicateFunctionError, match="is_valid"):
            builder.build()

    def test_duplicate_is_configuration_error(self):
        builder = RegistryBuilder().extend([function_constructor("x", Base64Rule)] * 2)
        with pytest.raises(ConfigurationError):
            builder.build()

    def test_each_constructor_called_once(self):
        calls = []

        def factory():
            calls.append(1)
            return Base64Rule()

        RegistryBuilder().add(function_constructor("is_base64", factory)).build()
        assert calls == [1]

    @pytest.mark.parametrize("name", ["IsBase64", "1st", "has-dash", ""])
    def test_invalid_names_rejected(self, name):
        with pytest.raises(ConfigurationError, match="Invalid function name"):
            RegistryBuilder().add(function_constructor(name, Base64Rule))

    def test_builder_is_single_use(self):
        builder = RegistryBuilder().add(function_constructor("is_base64", Base64Rule))
        builder.build()

        with pytest.raises(RegistryFrozenError):
            builder.add(function_constructor("is_cidr", CidrRule))
        with pytest.raises(RegistryFrozenError):
            builder.build()

    def test_sink_reaches_functions(self):
        received = []
        registry = (
            RegistryBuilder()
            .add(function_constructor("is_base64", Base64Rule))
            .build(sink=lambda name, d: received.append(name))
        )

        registry.call("is_base64", Value.known("!!"))
        assert received == ["is_base64"]


class TestRegistry:
    """Test the built catalog."""

    @pytest.fixture
    def registry(self):
        return RegistryBuilder().extend(DEFAULT_FUNCTIONS).build()

    def test_lookup(self, registry):
        function = registry["is_cidr"]
        assert isinstance(function, ValidationFunction)
        assert registry.get("is_cidr") is function
        assert "is_cidr" in registry
        assert registry.get("missing") is None

    def test_unknown_name(self, registry):
        with pytest.raises(FunctionNotFoundError) as exc_info:
            registry["is_missing"]

        assert "is_missing" in str(exc_info.value)
        assert "is_base64" in str(exc_info.value)

    def test_not_found_is_key_error(self, registry):
        with pytest.raises(KeyError):
            registry["is_missing"]

    def test_stable_order(self, registry):
        assert registry.names() == [c.name for c in DEFAULT_FUNCTIONS]
        assert list(registry) == registry.names()
        assert [f.name for f in registry.functions()] == registry.names()

    def test_catalog_is_read_only(self, registry):
        with pytest.raises(TypeError):
            registry._functions["is_new"] = registry["is_cidr"]

    def test_functions_returns_copy(self, registry):
        functions = registry.functions()
        functions.clear()
        assert len(registry) == len(DEFAULT_FUNCTIONS)

    def test_direct_construction_rejects_duplicates(self):
        function = ValidationFunction("is_base64", Base64Rule())
        with pytest.raises(DuplicateFunctionError):
            Registry([function, function])

    def test_every_default_function_propagates_unknown(self, registry):
        for function in registry.functions():
            assert function.call(Value.unknown()).is_unknown
            assert function.call(Value.null()).is_unknown

    @pytest.mark.parametrize("payload", ["http://[::1", "1e5000", "[" * 100000, "\x00", "\udcff"])
    def test_every_default_function_answers_awkward_strings(self, registry, payload):
        for function in registry.functions():
            result = function.call(Value.known(payload))
            assert result.passed or result.failed, function.name

    def test_awkward_strings_are_rejected_where_malformed(self, registry):
        assert registry.call("is_url", Value.known("http://[::1")).failed
        assert registry.call("is_json", Value.known("[" * 100000)).failed
        assert registry.call("is_json", Value.known("\x00")).failed
        assert registry.call("is_uuid", Value.known("\udcff")).failed
        assert registry.call("is_base64", Value.known("\udcff")).failed
        assert registry.call("is_numeric", Value.known("1e5000")).passed


class TestBuildRegistry:
    """Test assembling the catalog from configuration."""

    def test_defaults_only(self):
        registry = build_registry()
        assert registry.names() == [c.name for c in DEFAULT_FUNCTIONS]

    def test_configured_rules_are_appended(self):
        config = ValkitConfig(
            catalog=CatalogConfig(
                rules=[
                    RuleConfig(name="port_range", kind="range", minimum=1, maximum=65535),
                    RuleConfig(name="has_team", kind="contains", substring="team"),
                ]
            )
        )

        registry = build_registry(config)

        assert registry.names()[-2:] == ["port_range", "has_team"]
        assert registry["port_range"].parameter.type == ParameterType.NUMBER
        assert registry.call("port_range", Value.known("8080")).passed
        assert registry.call("port_range", Value.known("70000")).failed
        assert registry.call("has_team", Value.known("team-a")).passed

    def test_parameter_type_override(self):
        config = ValkitConfig(
            catalog=CatalogConfig(
                rules=[RuleConfig(name="count", kind="range", minimum=0, parameterType="string")]
            )
        )
        assert build_registry(config)["count"].parameter.type == ParameterType.STRING

    def test_disabled_functions_are_skipped(self):
        config = ValkitConfig(catalog=CatalogConfig(disabled=["is_uuid"]))
        registry = build_registry(config)

        assert "is_uuid" not in registry
        assert len(registry) == len(DEFAULT_FUNCTIONS) - 1

    def test_disabling_unknown_name_fails(self):
        config = ValkitConfig(catalog=CatalogConfig(disabled=["is_nonsense"]))
        with pytest.raises(ConfigurationError, match="is_nonsense"):
            build_registry(config)

    def test_configured_name_clashing_with_builtin_fails(self):
        config = ValkitConfig(
            catalog=CatalogConfig(rules=[RuleConfig(name="is_base64", kind="contains", substring="=")])
        )
        with pytest.raises(DuplicateFunctionError, match="is_base64"):
            build_registry(config)

    def test_invalid_rule_configuration_fails_build(self):
        config = ValkitConfig(
            catalog=CatalogConfig(rules=[RuleConfig(name="bad_range", kind="range", minimum=10, maximum=1)])
        )
        with pytest.raises(ConfigurationError, match="greater than maximum"):
            build_registry(config)

    def test_shared_validator_instance(self):
        rule = ContainsRule("x")
        registry = RegistryBuilder().add_validator("has_x", rule).build()
        assert registry["has_x"].validator is rule
