"""Scope-aware resolution of the connection model.

The connection block is rendered in two usage contexts:

- ``Scope.PROVIDER``: the block configures the provider itself. Missing
  credentials fall back to environment variables, so the username/password
  pairing cannot be enforced structurally: a value injected by a default
  must not trip an "also required" check.
- ``Scope.RESOURCE``: the block is set on an individual resource. Every
  requires edge is enforced, no environment default is injected and the
  block is flagged as deprecated in favour of provider configuration.

Conflicts edges are active in both contexts.

Example:
    >>> from esconn.schema.resolver import Scope, build_effective_model
    >>> model = build_effective_model(Scope.PROVIDER)
    >>> model.field("insecure").default_directive
    'env:ELASTICSEARCH_INSECURE,fallback:false'
"""

import json
import logging
from collections.abc import Iterable
from enum import Enum

from pydantic import computed_field

from esconn.models import EsconnBaseModel
from esconn.schema.catalog import ConnectionFieldModel, DefaultSourceModel, FieldType, get_catalog
from esconn.schema.constraints import CONSTRAINT_GRAPH, ConstraintGraph, Edge

logger = logging.getLogger(__name__)

__all__ = [
    "Scope",
    "DEFAULT_KEY_NAME",
    "DEPRECATION_MESSAGE",
    "EffectiveFieldModel",
    "EffectiveModel",
    "make_path_ref",
    "get_deprecation_message",
    "resolve",
    "build_effective_model",
]

DEFAULT_KEY_NAME = "elasticsearch_connection"

DEPRECATION_MESSAGE = (
    "This property will be removed in a future provider version. "
    "Configure the Elasticsearch connection via the provider configuration instead."
)

BLOCK_DESCRIPTION = "Elasticsearch connection configuration block."


class Scope(Enum):
    """Usage context of a connection block."""

    PROVIDER = "provider"
    RESOURCE = "resource"


def make_path_ref(key_name: str, field_name: str) -> str:
    """Path of a field inside the single-element connection block list."""
    return f"{key_name}.0.{field_name}"


def get_deprecation_message(scope: Scope) -> str:
    if scope is Scope.PROVIDER:
        return ""
    return DEPRECATION_MESSAGE


def _render_literal(value: str | bool | None) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value)


class EffectiveFieldModel(EsconnBaseModel):
    """A catalog field as seen from one scope.

    Attributes:
        name: Field name
        type: Value type
        description: Markdown description
        sensitive: Whether the value must never be echoed or logged
        optional: Always True
        path: Path of the field inside the block (``<key>.0.<name>``)
        default: Environment default, only set at provider scope
        requires: Fields that must also be set when this one is
        conflicts_with: Fields that must not be set together with this one
    """

    name: str
    type: FieldType
    description: str
    sensitive: bool
    optional: bool = True
    path: str
    default: DefaultSourceModel | None = None
    requires: tuple[str, ...] = ()
    conflicts_with: tuple[str, ...] = ()

    @computed_field  # type: ignore[prop-decorator]
    @property
    def default_directive(self) -> str:
        """Default as ``env:<VAR>,fallback:<value>``, or ``none``."""
        if self.default is None:
            return "none"
        return f"env:{self.default.env_var},fallback:{_render_literal(self.default.fallback)}"


class EffectiveModel(EsconnBaseModel):
    """Fully resolved, scope-specific connection model handed to renderers.

    Attributes:
        scope: The scope the model was resolved for
        key_name: Attribute name of the block in the host configuration
        description: Block description, including the deprecation note if any
        deprecation_message: Non-empty only at resource scope
        max_items: The block is a list holding at most this many objects
        fields: Effective fields in catalog order
        requires_edges: Active requires edges, sorted
        conflicts_edges: All conflicts edges, sorted
    """

    scope: Scope
    key_name: str
    description: str
    deprecation_message: str
    max_items: int = 1
    fields: tuple[EffectiveFieldModel, ...]
    requires_edges: tuple[Edge, ...]
    conflicts_edges: tuple[Edge, ...]

    @computed_field  # type: ignore[prop-decorator]
    @property
    def deprecated(self) -> bool:
        return bool(self.deprecation_message)

    def field(self, name: str) -> EffectiveFieldModel:
        for f in self.fields:
            if f.name == name:
                return f
        raise KeyError(f"Unknown connection field: {name}")

    def field_names(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.fields)

    def default_directives(self) -> dict[str, str]:
        """Map every field name to its rendered default directive."""
        return {f.name: f.default_directive for f in self.fields}


def resolve(
    catalog: Iterable[ConnectionFieldModel],
    graph: ConstraintGraph,
    scope: Scope | str,
    key_name: str = DEFAULT_KEY_NAME,
) -> EffectiveModel:
    """Derive the effective model of a catalog and graph for one scope.

    The result is a pure function of the arguments: identical inputs give
    equal models, which is what keeps independent renderers in sync.

    Args:
        catalog: Ordered connection fields
        graph: Constraint graph built for that catalog
        scope: Usage context, a Scope or its string value
        key_name: Attribute name of the block, used for field paths

    Returns:
        The effective model

    Raises:
        ValueError: If scope is not a known Scope value
    """
    scope = Scope(scope)
    provider = scope is Scope.PROVIDER

    active_requires = graph.requires - graph.scope_gated if provider else graph.requires

    fields = tuple(
        EffectiveFieldModel(
            name=f.name,
            type=f.type,
            description=f.description,
            sensitive=f.sensitive,
            optional=f.optional,
            path=make_path_ref(key_name, f.name),
            default=f.default_source if provider else None,
            requires=graph.requires_of(f.name, active_requires),
            conflicts_with=graph.conflicts_of(f.name),
        )
        for f in catalog
    )

    deprecation = get_deprecation_message(scope)
    model = EffectiveModel(
        scope=scope,
        key_name=key_name,
        description=f"{BLOCK_DESCRIPTION} {deprecation}".rstrip(),
        deprecation_message=deprecation,
        fields=fields,
        requires_edges=tuple(sorted(active_requires)),
        conflicts_edges=tuple(sorted(graph.conflicts)),
    )
    logger.debug(
        "Resolved connection model for %s scope: %d requires edges active, %d defaults",
        scope.value,
        len(model.requires_edges),
        sum(1 for f in fields if f.default is not None),
    )
    return model


def build_effective_model(scope: Scope | str, key_name: str = DEFAULT_KEY_NAME) -> EffectiveModel:
    """Resolve the built-in catalog and constraint graph for a scope."""
    return resolve(get_catalog(), CONSTRAINT_GRAPH, scope, key_name=key_name)
