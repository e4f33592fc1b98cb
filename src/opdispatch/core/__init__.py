"""Dispatch engine: operator registry, override tables and resolution."""

from opdispatch.core.errors import (
    ArityError,
    DispatchError,
    InvalidOperator,
    MalformedOverrideResult,
    UnknownOperator,
)
from opdispatch.core.host import UNSUPPORTED, Host, PythonHost
from opdispatch.core.operators import (
    REGISTRY,
    Arity,
    OperatorKind,
    OperatorSpec,
    ResultPolicy,
    kind_for_method,
    kind_for_symbol,
    spec_for,
)
from opdispatch.core.resolver import ResolutionRequest, Resolver, Side, clamp
from opdispatch.core.table import (
    NATIVE,
    Classification,
    HasOverrides,
    Native,
    Overloadable,
    OverrideTable,
    classify,
)

__all__ = [
    # Registry
    "REGISTRY",
    "Arity",
    "OperatorKind",
    "OperatorSpec",
    "ResultPolicy",
    "kind_for_method",
    "kind_for_symbol",
    "spec_for",
    # Tables
    "Classification",
    "HasOverrides",
    "NATIVE",
    "Native",
    "Overloadable",
    "OverrideTable",
    "classify",
    # Host
    "Host",
    "PythonHost",
    "UNSUPPORTED",
    # Resolution
    "ResolutionRequest",
    "Resolver",
    "Side",
    "clamp",
    # Errors
    "ArityError",
    "DispatchError",
    "InvalidOperator",
    "MalformedOverrideResult",
    "UnknownOperator",
]
