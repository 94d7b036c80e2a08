"""Connection block field/constraint model.

- `catalog`: the ordered field catalog
- `constraints`: requires and conflicts edges between catalog fields
- `resolver`: scope-aware resolution into an `EffectiveModel`
- `validation`: checking user blocks and applying environment defaults
"""

from .catalog import (
    CONNECTION_FIELDS,
    ConnectionFieldModel,
    DefaultSourceModel,
    FieldType,
    field_names,
    get_catalog,
    get_field,
)
from .constraints import (
    CONSTRAINT_GRAPH,
    ConstraintGraph,
    Edge,
    build_constraint_graph,
    conflicts_edges,
    requires_edges,
    scope_gated_requires,
)
from .resolver import (
    DEFAULT_KEY_NAME,
    DEPRECATION_MESSAGE,
    EffectiveFieldModel,
    EffectiveModel,
    Scope,
    build_effective_model,
    get_deprecation_message,
    make_path_ref,
    resolve,
)
from .validation import (
    MASK,
    ConnectionValidationResult,
    ValidationIssueModel,
    apply_defaults,
    load_connection,
    mask_sensitive,
    parse_bool,
    unwrap_block,
    validate_connection,
    validate_connection_block,
)

__all__ = [
    "CONNECTION_FIELDS",
    "ConnectionFieldModel",
    "DefaultSourceModel",
    "FieldType",
    "field_names",
    "get_catalog",
    "get_field",
    "CONSTRAINT_GRAPH",
    "ConstraintGraph",
    "Edge",
    "build_constraint_graph",
    "conflicts_edges",
    "requires_edges",
    "scope_gated_requires",
    "DEFAULT_KEY_NAME",
    "DEPRECATION_MESSAGE",
    "EffectiveFieldModel",
    "EffectiveModel",
    "Scope",
    "build_effective_model",
    "get_deprecation_message",
    "make_path_ref",
    "resolve",
    "MASK",
    "ConnectionValidationResult",
    "ValidationIssueModel",
    "apply_defaults",
    "load_connection",
    "mask_sensitive",
    "parse_bool",
    "unwrap_block",
    "validate_connection",
    "validate_connection_block",
]
