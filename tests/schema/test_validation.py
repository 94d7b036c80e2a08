"""Tests for esconn.schema.validation module."""

import pytest

from esconn.errors import ConnectionConfigError, ConnectionValidationError
from esconn.schema.resolver import Scope, build_effective_model
from esconn.schema.validation import (
    MASK,
    apply_defaults,
    load_connection,
    mask_sensitive,
    parse_bool,
    unwrap_block,
    validate_connection,
    validate_connection_block,
)

SECRET = "s3cr3t-value"


@pytest.fixture
def resource_model():
    return build_effective_model(Scope.RESOURCE)


@pytest.fixture
def provider_model():
    return build_effective_model(Scope.PROVIDER)


class TestValidateConnection:
    """Test rule checking on a single connection object."""

    def test_empty_block_is_valid(self, resource_model, provider_model):
        assert validate_connection({}, resource_model).status == "ok"
        assert validate_connection({}, provider_model).status == "ok"

    def test_basic_auth(self, resource_model):
        result = validate_connection({"username": "elastic", "password": SECRET}, resource_model)
        assert result.status == "ok"
        assert result.issues == ()

    def test_username_without_password_at_resource_scope(self, resource_model):
        result = validate_connection({"username": "elastic"}, resource_model)
        assert result.status == "error"
        assert [i.kind for i in result.issues] == ["requires"]
        assert result.issues[0].fields == ("username", "password")
        assert result.field_names == ["password", "username"]
        assert "elasticsearch_connection.0.password" in result.issues[0].message

    def test_username_without_password_at_provider_scope(self, provider_model):
        assert validate_connection({"username": "elastic"}, provider_model).status == "ok"

    def test_certificate_without_key_at_both_scopes(self, resource_model, provider_model):
        for model in (resource_model, provider_model):
            result = validate_connection({"cert_file": "/etc/client.crt"}, model)
            assert result.status == "error"
            assert result.issues[0].fields == ("cert_file", "key_file")

    def test_api_key_conflicts_with_basic_auth(self, provider_model):
        result = validate_connection(
            {"api_key": SECRET, "username": "elastic", "password": SECRET}, provider_model
        )
        assert [i.kind for i in result.issues] == ["conflicts", "conflicts"]
        assert [i.fields for i in result.issues] == [
            ("api_key", "password"),
            ("api_key", "username"),
        ]

    def test_mixed_encodings(self, provider_model):
        result = validate_connection(
            {"cert_file": "/etc/client.crt", "key_data": SECRET}, provider_model
        )
        kinds = sorted(i.kind for i in result.issues)
        assert kinds == ["conflicts", "requires", "requires"]
        assert ("cert_file", "key_data") in [i.fields for i in result.issues]

    def test_ca_file_and_ca_data(self, resource_model):
        result = validate_connection({"ca_file": "/etc/ca.pem", "ca_data": "PEM"}, resource_model)
        assert [i.fields for i in result.issues] == [("ca_data", "ca_file")]

    def test_none_counts_as_unset(self, resource_model):
        result = validate_connection(
            {"api_key": SECRET, "username": None, "password": None}, resource_model
        )
        assert result.status == "ok"

    def test_types(self, resource_model):
        result = validate_connection(
            {"insecure": "yes", "endpoints": "https://localhost:9200", "ca_file": 1},
            resource_model,
        )
        assert {i.fields for i in result.issues} == {("insecure",), ("endpoints",), ("ca_file",)}
        assert all(i.kind == "type" for i in result.issues)

    def test_valid_types(self, resource_model):
        result = validate_connection(
            {"insecure": True, "endpoints": ["https://localhost:9200"]}, resource_model
        )
        assert result.status == "ok"

    def test_unknown_field(self, resource_model):
        result = validate_connection({"token": SECRET}, resource_model)
        assert result.issues[0].kind == "unknown_field"
        assert result.field_names == ["token"]

    def test_non_string_key(self, resource_model):
        result = validate_connection({1: "x", "username": "elastic"}, resource_model)
        assert [i.kind for i in result.issues] == ["unknown_field", "requires"]
        assert result.field_names == ["1", "password", "username"]
        with pytest.raises(ConnectionValidationError) as exc_info:
            result.raise_for_issues()
        assert exc_info.value.field_names == ["1", "password", "username"]
        assert "elasticsearch_connection.0.1" in str(exc_info.value)

    def test_messages_never_include_values(self, resource_model):
        result = validate_connection(
            {"username": SECRET, "api_key": SECRET, "insecure": SECRET}, resource_model
        )
        assert result.issues
        assert all(SECRET not in i.message for i in result.issues)

    def test_raise_for_issues(self, resource_model):
        result = validate_connection({"password": SECRET}, resource_model)
        with pytest.raises(ConnectionValidationError) as exc_info:
            result.raise_for_issues()
        assert exc_info.value.field_names == ["password", "username"]
        assert SECRET not in str(exc_info.value)

        validate_connection({}, resource_model).raise_for_issues()


class TestValidateBlock:
    """Test the list wrapper around the connection object."""

    def test_list_with_one_object(self, resource_model):
        values, issues = unwrap_block([{"api_key": SECRET}], resource_model)
        assert values == {"api_key": SECRET}
        assert issues == []

    def test_mapping_and_empty_blocks(self, resource_model):
        assert unwrap_block({"api_key": SECRET}, resource_model) == ({"api_key": SECRET}, [])
        assert unwrap_block(None, resource_model) == ({}, [])
        assert unwrap_block([], resource_model) == ({}, [])

    def test_too_many_items(self, resource_model):
        result = validate_connection_block([{}, {}], resource_model)
        assert result.status == "error"
        assert result.issues[0].kind == "max_items"

    def test_not_a_block(self, resource_model):
        result = validate_connection_block("https://localhost:9200", resource_model)
        assert result.issues[0].kind == "type"

        result = validate_connection_block(["https://localhost:9200"], resource_model)
        assert result.issues[0].kind == "type"

    def test_object_issues_are_reported(self, resource_model):
        result = validate_connection_block([{"username": "elastic"}, {}], resource_model)
        assert [i.kind for i in result.issues] == ["max_items", "requires"]


class TestApplyDefaults:
    """Test environment defaults at provider scope."""

    def test_fallbacks(self, provider_model):
        assert apply_defaults({}, provider_model, environ={}) == {"insecure": False}

    def test_environment_wins_over_fallback(self, provider_model):
        env = {
            "ELASTICSEARCH_USERNAME": "elastic",
            "ELASTICSEARCH_PASSWORD": SECRET,
            "ELASTICSEARCH_INSECURE": "true",
        }
        assert apply_defaults({}, provider_model, environ=env) == {
            "username": "elastic",
            "password": SECRET,
            "insecure": True,
        }

    def test_explicit_values_win(self, provider_model):
        env = {"ELASTICSEARCH_INSECURE": "false", "ELASTICSEARCH_USERNAME": "env-user"}
        values = {"insecure": True, "username": "elastic"}
        assert apply_defaults(values, provider_model, environ=env) == values

    def test_empty_variable_is_unset(self, provider_model):
        env = {"ELASTICSEARCH_INSECURE": "", "ELASTICSEARCH_API_KEY": ""}
        assert apply_defaults({}, provider_model, environ=env) == {"insecure": False}

    def test_reads_process_environment(self, provider_model, monkeypatch):
        monkeypatch.setenv("ELASTICSEARCH_API_KEY", SECRET)
        assert apply_defaults({}, provider_model)["api_key"] == SECRET

    def test_no_defaults_at_resource_scope(self, resource_model):
        env = {"ELASTICSEARCH_USERNAME": "elastic", "ELASTICSEARCH_INSECURE": "true"}
        assert apply_defaults({}, resource_model, environ=env) == {}

    def test_invalid_boolean(self, provider_model):
        with pytest.raises(ConnectionConfigError, match="ELASTICSEARCH_INSECURE"):
            apply_defaults({}, provider_model, environ={"ELASTICSEARCH_INSECURE": "maybe"})

    def test_input_is_not_mutated(self, provider_model):
        values = {"username": "elastic"}
        apply_defaults(values, provider_model, environ={})
        assert values == {"username": "elastic"}


class TestLoadConnection:
    def test_resource_scope_failure(self):
        with pytest.raises(ConnectionValidationError) as exc_info:
            load_connection({"username": SECRET}, Scope.RESOURCE)
        assert exc_info.value.field_names == ["password", "username"]

    def test_defaults_do_not_trip_rules(self):
        """An api_key with a username in the environment is not a conflict."""
        settings = load_connection(
            {"api_key": SECRET},
            "provider",
            environ={"ELASTICSEARCH_USERNAME": "elastic"},
        )
        assert settings == {"api_key": SECRET, "username": "elastic", "insecure": False}

    def test_defaults_can_complete_a_conflicting_pair(self):
        settings = load_connection(
            {"api_key": SECRET},
            Scope.PROVIDER,
            environ={"ELASTICSEARCH_USERNAME": "elastic", "ELASTICSEARCH_PASSWORD": SECRET},
        )
        assert set(settings) == {"api_key", "username", "password", "insecure"}

    def test_conflicts_at_provider_scope(self):
        with pytest.raises(ConnectionValidationError) as exc_info:
            load_connection({"ca_file": "/etc/ca.pem", "ca_data": "PEM"}, Scope.PROVIDER)
        assert exc_info.value.field_names == ["ca_data", "ca_file"]

    def test_none_values(self):
        assert load_connection(None, Scope.RESOURCE) == {}

    def test_custom_key_name_in_messages(self):
        with pytest.raises(ConnectionValidationError, match='"es.0.key_file"'):
            load_connection({"key_file": "/etc/client.key"}, Scope.RESOURCE, key_name="es")


def test_mask_sensitive(provider_model):
    values = {
        "username": "elastic",
        "password": SECRET,
        "endpoints": ["https://localhost:9200"],
        "key_data": None,
    }
    assert mask_sensitive(values, provider_model) == {
        "username": "elastic",
        "password": MASK,
        "endpoints": MASK,
        "key_data": None,
    }


@pytest.mark.parametrize(
    "raw,expected",
    [("1", True), ("t", True), ("TRUE", True), ("True", True), ("0", False), ("f", False)],
)
def test_parse_bool(raw, expected):
    assert parse_bool(raw) is expected


def test_parse_bool_rejects_other_text():
    with pytest.raises(ConnectionConfigError):
        parse_bool("yes")
