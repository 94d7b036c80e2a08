"""Field catalog for the Elasticsearch connection block.

The catalog is the fixed, ordered list of every field a connection block may
carry. It is built once at import time and never mutated; the constraint graph
and the resolver read it, renderers never declare fields on their own.
"""

from typing import Literal

from pydantic import Field

from esconn.models import EsconnBaseModel

__all__ = [
    "FieldType",
    "DefaultSourceModel",
    "ConnectionFieldModel",
    "CONNECTION_FIELDS",
    "get_catalog",
    "get_field",
    "field_names",
]

FieldType = Literal["string", "boolean", "list_of_string"]


class DefaultSourceModel(EsconnBaseModel):
    """Environment-derived default for a field.

    Attributes:
        env_var: Environment variable consulted first
        fallback: Literal used when the variable is unset (None means no value)
    """

    env_var: str
    fallback: str | bool | None = None


class ConnectionFieldModel(EsconnBaseModel):
    """A single named, typed field of the connection block.

    Attributes:
        name: Field identifier, unique within the catalog
        type: Value type
        description: Markdown description shown to end users
        sensitive: Whether the value must never be echoed or logged
        optional: Always True, no field is unconditionally mandatory
        default_source: Environment default, only honoured where the scope allows it
    """

    name: str
    type: FieldType = "string"
    description: str = ""
    sensitive: bool = False
    optional: Literal[True] = True
    default_source: DefaultSourceModel | None = Field(default=None)


CONNECTION_FIELDS: tuple[ConnectionFieldModel, ...] = (
    ConnectionFieldModel(
        name="username",
        description="Username to use for API authentication to Elasticsearch.",
        default_source=DefaultSourceModel(env_var="ELASTICSEARCH_USERNAME"),
    ),
    ConnectionFieldModel(
        name="password",
        description="Password to use for API authentication to Elasticsearch.",
        sensitive=True,
        default_source=DefaultSourceModel(env_var="ELASTICSEARCH_PASSWORD"),
    ),
    ConnectionFieldModel(
        name="api_key",
        description="API Key to use for authentication to Elasticsearch",
        sensitive=True,
        default_source=DefaultSourceModel(env_var="ELASTICSEARCH_API_KEY"),
    ),
    ConnectionFieldModel(
        name="endpoints",
        type="list_of_string",
        description=(
            "A comma-separated list of endpoints where the terraform provider will point to, "
            "this must include the http(s) schema and port number."
        ),
        sensitive=True,
    ),
    ConnectionFieldModel(
        name="insecure",
        type="boolean",
        description="Disable TLS certificate validation",
        default_source=DefaultSourceModel(env_var="ELASTICSEARCH_INSECURE", fallback=False),
    ),
    ConnectionFieldModel(
        name="ca_file",
        description="Path to a custom Certificate Authority certificate",
    ),
    ConnectionFieldModel(
        name="ca_data",
        description="PEM-encoded custom Certificate Authority certificate",
    ),
    ConnectionFieldModel(
        name="cert_file",
        description="Path to a file containing the PEM encoded certificate for client auth",
    ),
    ConnectionFieldModel(
        name="cert_data",
        description="PEM encoded certificate for client auth",
    ),
    ConnectionFieldModel(
        name="key_file",
        description="Path to a file containing the PEM encoded private key for client auth",
    ),
    ConnectionFieldModel(
        name="key_data",
        description="PEM encoded private key for client auth",
        sensitive=True,
    ),
)

_FIELDS_BY_NAME = {f.name: f for f in CONNECTION_FIELDS}

if len(_FIELDS_BY_NAME) != len(CONNECTION_FIELDS):
    raise RuntimeError("Duplicate field names in connection catalog")


def get_catalog() -> tuple[ConnectionFieldModel, ...]:
    """Return the ordered, read-only connection field catalog."""
    return CONNECTION_FIELDS


def field_names() -> tuple[str, ...]:
    return tuple(f.name for f in CONNECTION_FIELDS)


def get_field(name: str) -> ConnectionFieldModel:
    """Look up a field by name.

    Raises:
        KeyError: If the catalog has no field with that name
    """
    try:
        return _FIELDS_BY_NAME[name]
    except KeyError:
        raise KeyError(f"Unknown connection field: {name}") from None
