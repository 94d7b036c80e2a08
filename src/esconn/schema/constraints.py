"""Constraint graph over the connection field catalog.

Two kinds of directed edges relate catalog fields:

- ``requires`` (A, B): if A is set, B must also be set
- ``conflicts`` (A, B): A and B must not both be set; always stored in both directions

The graph is the single place where cross-field rules are declared. Both
descriptor renderers read it through the resolver, so a rule added here shows
up in both of them.
"""

import logging
from collections.abc import Iterable

from pydantic import model_validator

from esconn.errors import ConstraintGraphError
from esconn.models import EsconnBaseModel
from esconn.schema.catalog import ConnectionFieldModel, get_catalog

logger = logging.getLogger(__name__)

__all__ = [
    "Edge",
    "ConstraintGraph",
    "CONSTRAINT_GRAPH",
    "build_constraint_graph",
    "requires_edges",
    "conflicts_edges",
    "scope_gated_requires",
]

Edge = tuple[str, str]


class ConstraintGraph(EsconnBaseModel):
    """Immutable set of cross-field rules.

    Attributes:
        field_names: Names of the catalog fields the edges may reference
        requires: Every requires edge, whatever the scope
        conflicts: Every conflicts edge, closed under symmetry
        scope_gated: Requires edges suppressed where environment defaults are injected
    """

    field_names: tuple[str, ...]
    requires: frozenset[Edge]
    conflicts: frozenset[Edge]
    scope_gated: frozenset[Edge] = frozenset()

    @model_validator(mode="after")
    def check_edges(self) -> "ConstraintGraph":
        known = set(self.field_names)
        for kind, edges in (
            ("requires", self.requires),
            ("conflicts", self.conflicts),
            ("scope_gated", self.scope_gated),
        ):
            for a, b in edges:
                unknown = [n for n in (a, b) if n not in known]
                if unknown:
                    raise ConstraintGraphError(
                        f"{kind} edge ({a}, {b}) references unknown field(s): {', '.join(unknown)}"
                    )
                if a == b:
                    raise ConstraintGraphError(f"{kind} edge ({a}, {b}) is a self-loop")

        asymmetric = sorted(e for e in self.conflicts if (e[1], e[0]) not in self.conflicts)
        if asymmetric:
            raise ConstraintGraphError(f"conflicts edges are not symmetric: {asymmetric}")

        if not self.scope_gated <= self.requires:
            extra = sorted(self.scope_gated - self.requires)
            raise ConstraintGraphError(f"scope-gated edges are not requires edges: {extra}")

        both = sorted(self.requires & self.conflicts)
        if both:
            raise ConstraintGraphError(f"edges both required and conflicting: {both}")
        return self

    def requires_of(self, name: str, active: Iterable[Edge] | None = None) -> tuple[str, ...]:
        """Fields that ``name`` requires, in catalog order."""
        edges = self.requires if active is None else set(active)
        targets = {b for a, b in edges if a == name}
        return tuple(n for n in self.field_names if n in targets)

    def conflicts_of(self, name: str) -> tuple[str, ...]:
        """Fields that ``name`` conflicts with, in catalog order."""
        targets = {b for a, b in self.conflicts if a == name}
        return tuple(n for n in self.field_names if n in targets)


def _mutually_required(a: str, b: str) -> set[Edge]:
    return {(a, b), (b, a)}


def _exclusive(left: Iterable[str], right: Iterable[str]) -> set[Edge]:
    edges: set[Edge] = set()
    targets = list(right)
    for a in left:
        for b in targets:
            edges.add((a, b))
            edges.add((b, a))
    return edges


def build_constraint_graph(catalog: Iterable[ConnectionFieldModel]) -> ConstraintGraph:
    """Derive the connection constraint graph for a catalog.

    Rules:
        - username and password are mutually required; this pairing is scope-gated
        - api_key excludes basic auth (username, password)
        - ca_file and ca_data are two encodings of one authority, pick one
        - client certificates need their key in the same encoding
          (cert_file/key_file, cert_data/key_data), and file and inline
          encodings never mix

    Raises:
        ConstraintGraphError: If an edge does not match the catalog
    """
    credentials = _mutually_required("username", "password")

    requires = set(credentials)
    requires |= _mutually_required("cert_file", "key_file")
    requires |= _mutually_required("cert_data", "key_data")

    conflicts = _exclusive(["api_key"], ["username", "password"])
    conflicts |= _exclusive(["ca_file"], ["ca_data"])
    conflicts |= _exclusive(["cert_file", "key_file"], ["cert_data", "key_data"])

    graph = ConstraintGraph(
        field_names=tuple(f.name for f in catalog),
        requires=frozenset(requires),
        conflicts=frozenset(conflicts),
        scope_gated=frozenset(credentials),
    )
    logger.debug(
        "Built constraint graph: %d requires edges, %d conflicts edges",
        len(graph.requires),
        len(graph.conflicts),
    )
    return graph


CONSTRAINT_GRAPH = build_constraint_graph(get_catalog())


def requires_edges() -> frozenset[Edge]:
    """All requires edges, before any scope gating."""
    return CONSTRAINT_GRAPH.requires


def conflicts_edges() -> frozenset[Edge]:
    """All conflicts edges; these are active at every scope."""
    return CONSTRAINT_GRAPH.conflicts


def scope_gated_requires() -> frozenset[Edge]:
    """Requires edges suppressed at provider scope."""
    return CONSTRAINT_GRAPH.scope_gated
