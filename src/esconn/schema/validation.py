"""Validation of user-supplied connection blocks against an effective model.

Renderers report the same failures the host runtime would: unknown fields,
values of the wrong type, a requires edge whose target is missing, or two
conflicting fields set together. Issues name the offending fields and never
include a field value.

Defaults are applied after validation, so a value injected from the
environment can never trip a requires or conflicts rule.
"""

import logging
import os
from collections.abc import Mapping
from typing import Any, Literal

from esconn.errors import ConnectionConfigError, ConnectionValidationError
from esconn.models import EsconnBaseModel
from esconn.schema.catalog import FieldType
from esconn.schema.resolver import (
    DEFAULT_KEY_NAME,
    EffectiveFieldModel,
    EffectiveModel,
    Scope,
    build_effective_model,
)

logger = logging.getLogger(__name__)

__all__ = [
    "MASK",
    "ValidationIssueModel",
    "ConnectionValidationResult",
    "validate_connection",
    "validate_connection_block",
    "unwrap_block",
    "apply_defaults",
    "load_connection",
    "mask_sensitive",
    "parse_bool",
]

MASK = "****"

IssueKind = Literal["unknown_field", "type", "requires", "conflicts", "max_items"]

_TRUE_VALUES = ("1", "t", "T", "TRUE", "true", "True")
_FALSE_VALUES = ("0", "f", "F", "FALSE", "false", "False")


class ValidationIssueModel(EsconnBaseModel):
    """A single violated rule.

    Attributes:
        kind: Which rule was violated
        fields: Names of the fields involved
        message: Human-readable description, free of field values
    """

    kind: IssueKind
    fields: tuple[str, ...]
    message: str


class ConnectionValidationResult(EsconnBaseModel):
    """Outcome of validating one connection block."""

    status: Literal["ok", "error"]
    scope: Scope
    issues: tuple[ValidationIssueModel, ...] = ()

    @property
    def field_names(self) -> list[str]:
        return sorted({name for issue in self.issues for name in issue.fields})

    def raise_for_issues(self) -> None:
        """Raise ConnectionValidationError if any issue was found."""
        if self.issues:
            raise ConnectionValidationError(
                [issue.message for issue in self.issues], self.field_names
            )


def _is_set(values: Mapping[str, Any], name: str) -> bool:
    return values.get(name) is not None


def _matches_type(value: Any, field_type: FieldType) -> bool:
    if field_type == "boolean":
        return isinstance(value, bool)
    if field_type == "list_of_string":
        return isinstance(value, (list, tuple)) and all(isinstance(v, str) for v in value)
    return isinstance(value, str)


def validate_connection(
    values: Mapping[str, Any], model: EffectiveModel
) -> ConnectionValidationResult:
    """Check a single connection object against an effective model.

    Args:
        values: Field values as supplied by the user; None means unset
        model: Effective model for the scope the block is used in

    Returns:
        The validation result; status is "error" when any issue was found
    """
    issues: list[ValidationIssueModel] = []
    known = {f.name: f for f in model.fields}

    for name in values:
        if name not in known:
            # YAML keys need not be strings (`1: x`)
            issues.append(
                ValidationIssueModel(
                    kind="unknown_field",
                    fields=(str(name),),
                    message=f'Unsupported argument "{model.key_name}.0.{name}"',
                )
            )

    for f in model.fields:
        if _is_set(values, f.name) and not _matches_type(values[f.name], f.type):
            issues.append(
                ValidationIssueModel(
                    kind="type",
                    fields=(f.name,),
                    message=f'"{f.path}": expected a value of type {f.type}',
                )
            )

    for a, b in model.requires_edges:
        if _is_set(values, a) and not _is_set(values, b):
            issues.append(
                ValidationIssueModel(
                    kind="requires",
                    fields=(a, b),
                    message=(
                        f'"{known[a].path}": all of `{known[a].path},{known[b].path}` '
                        "must be specified"
                    ),
                )
            )

    for a, b in model.conflicts_edges:
        # conflicts are stored in both directions, report each pair once
        if a < b and _is_set(values, a) and _is_set(values, b):
            issues.append(
                ValidationIssueModel(
                    kind="conflicts",
                    fields=(a, b),
                    message=f'"{known[a].path}": conflicts with {known[b].path}',
                )
            )

    if issues:
        logger.debug(
            "Connection block failed validation at %s scope: %s",
            model.scope.value,
            ", ".join(sorted({n for i in issues for n in i.fields})),
        )
    return ConnectionValidationResult(
        status="error" if issues else "ok", scope=model.scope, issues=tuple(issues)
    )


def unwrap_block(
    block: Any, model: EffectiveModel
) -> tuple[dict[str, Any], list[ValidationIssueModel]]:
    """Extract the single connection object from a block.

    A block is None, a mapping, or a list holding at most ``model.max_items`` mappings.
    """
    if block is None:
        return {}, []
    if isinstance(block, Mapping):
        return dict(block), []
    if not isinstance(block, (list, tuple)):
        return {}, [
            ValidationIssueModel(
                kind="type",
                fields=(),
                message=f'"{model.key_name}": expected a list of at most {model.max_items} object',
            )
        ]

    issues: list[ValidationIssueModel] = []
    if len(block) > model.max_items:
        issues.append(
            ValidationIssueModel(
                kind="max_items",
                fields=(),
                message=(
                    f'"{model.key_name}": too many list items, '
                    f"at most {model.max_items} allowed, got {len(block)}"
                ),
            )
        )
    if not block:
        return {}, issues
    first = block[0]
    if first is None:
        return {}, issues
    if not isinstance(first, Mapping):
        issues.append(
            ValidationIssueModel(
                kind="type",
                fields=(),
                message=f'"{model.key_name}.0": expected an object',
            )
        )
        return {}, issues
    return dict(first), issues


def validate_connection_block(block: Any, model: EffectiveModel) -> ConnectionValidationResult:
    """Validate a whole connection block, including its item count."""
    values, issues = unwrap_block(block, model)
    result = validate_connection(values, model)
    if not issues:
        return result
    all_issues = tuple(issues) + result.issues
    return ConnectionValidationResult(status="error", scope=model.scope, issues=all_issues)


def parse_bool(raw: str) -> bool:
    """Parse a boolean the way the host runtime parses environment defaults."""
    if raw in _TRUE_VALUES:
        return True
    if raw in _FALSE_VALUES:
        return False
    raise ConnectionConfigError(f"Invalid boolean value: {raw!r}")


def _coerce_env_value(field: EffectiveFieldModel, env_var: str, raw: str) -> Any:
    if field.type == "boolean":
        try:
            return parse_bool(raw)
        except ConnectionConfigError as e:
            raise ConnectionConfigError(
                f"Environment variable {env_var} for {field.name}: {e}"
            ) from e
    return raw


def apply_defaults(
    values: Mapping[str, Any],
    model: EffectiveModel,
    environ: Mapping[str, str] | None = None,
) -> dict[str, Any]:
    """Fill unset fields from their default directive.

    The environment variable wins when it is set to a non-empty value,
    otherwise the literal fallback is used if there is one. Fields without a
    directive, which is every field at resource scope, are left untouched.

    Args:
        values: Validated field values
        model: Effective model the values were validated against
        environ: Environment to read, defaults to os.environ

    Returns:
        A new dict with defaults applied

    Raises:
        ConnectionConfigError: If an environment value cannot be coerced to the field type
    """
    env = os.environ if environ is None else environ
    result = dict(values)

    for f in model.fields:
        if f.default is None or _is_set(result, f.name):
            continue
        raw = env.get(f.default.env_var)
        if raw:
            logger.debug("Using %s for connection field %s", f.default.env_var, f.name)
            result[f.name] = _coerce_env_value(f, f.default.env_var, raw)
        elif f.default.fallback is not None:
            result[f.name] = f.default.fallback

    return result


def load_connection(
    values: Mapping[str, Any] | None,
    scope: Scope | str,
    environ: Mapping[str, str] | None = None,
    key_name: str = DEFAULT_KEY_NAME,
) -> dict[str, Any]:
    """Validate a connection object for a scope and apply its defaults.

    Rules are checked on the supplied values only. At provider scope the
    returned settings can therefore hold a conflicting pair, for example a
    supplied api_key next to a username taken from ELASTICSEARCH_USERNAME.

    Raises:
        ConnectionValidationError: If the values violate the effective model
        ConnectionConfigError: If an environment default is malformed
    """
    model = build_effective_model(scope, key_name=key_name)
    supplied = dict(values or {})
    validate_connection(supplied, model).raise_for_issues()
    return apply_defaults(supplied, model, environ)


def mask_sensitive(values: Mapping[str, Any], model: EffectiveModel) -> dict[str, Any]:
    """Copy of values with every set sensitive field replaced by ``MASK``."""
    sensitive = {f.name for f in model.fields if f.sensitive}
    return {
        name: MASK if name in sensitive and value is not None else value
        for name, value in values.items()
    }
