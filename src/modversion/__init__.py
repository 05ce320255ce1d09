"""Version parsing, version predicates and interval algebra for dependency declarations."""

from .cache import PredicateCache
from .dependency import DependencyKind, ModDependency
from .errors import VersionParsingError
from .interval import (
    INFINITE,
    Bound,
    VersionInterval,
    complement,
    complement_all,
    intersect,
    intersect_all,
    union,
    union_all,
)
from .models import StringVersion, Version
from .operators import ComparisonOperator
from .overrides import VersionOverrides
from .parser import parse_semantic, parse_version
from .predicate import ANY, PredicateTerm, VersionPredicate, parse_predicate
from .semantic import WILDCARD, SemanticVersion

__all__ = [
    "ANY",
    "Bound",
    "ComparisonOperator",
    "DependencyKind",
    "INFINITE",
    "ModDependency",
    "PredicateCache",
    "PredicateTerm",
    "SemanticVersion",
    "StringVersion",
    "Version",
    "VersionInterval",
    "VersionOverrides",
    "VersionParsingError",
    "VersionPredicate",
    "WILDCARD",
    "complement",
    "complement_all",
    "intersect",
    "intersect_all",
    "parse_predicate",
    "parse_semantic",
    "parse_version",
    "union",
    "union_all",
]
