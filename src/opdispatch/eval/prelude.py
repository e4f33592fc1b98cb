"""Built-in demo types and functions.

Each class below is defined once at import and its override table is frozen
from its ``__`` methods. Overrides receive the instance first, then the other
operand and, for arithmetic and bitwise operators, whether the instance was
the left operand.
"""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Iterator

from opdispatch.core.operators import OperatorKind
from opdispatch.core.resolver import Resolver
from opdispatch.eval.value import Builtin, ClassDef, Instance, ValueHost, show

_DEFAULT_RESOLVER = Resolver(ValueHost())
_active_resolver: ContextVar[Resolver] = ContextVar("resolver")


def current_resolver() -> Resolver:
    """Resolver of the running evaluator.

    Overrides that apply operators to their own fields dispatch through it, so
    nested dispatches share the evaluator's host and trace setting.
    """
    return _active_resolver.get(_DEFAULT_RESOLVER)


@contextmanager
def using_resolver(resolver: Resolver) -> Iterator[Resolver]:
    token = _active_resolver.set(resolver)
    try:
        yield resolver
    finally:
        _active_resolver.reset(token)


def _field(value: Any, cls: ClassDef, name: str) -> Any:
    if isinstance(value, Instance) and value.cls is cls:
        return getattr(value, name)
    return value


# =============================================================================
# Number: addition and ordering only
# =============================================================================


def _number_add(this: Instance, other: Any, left: bool) -> Instance:
    return Number(this.value + _field(other, Number, "value"))


def _number_compare(this: Instance, other: Any) -> int:
    return this.value - _field(other, Number, "value")


Number = ClassDef(
    "Number",
    ("value",),
    {"__add": _number_add, "__compareTo": _number_compare},
)


# =============================================================================
# Vector: component-wise arithmetic and equality
# =============================================================================


def _require_vector(other: Any, op: str) -> Instance:
    if not (isinstance(other, Instance) and other.cls is Vector):
        raise TypeError(f"Vector {op} expects a Vector, got {current_resolver().host.type_name(other)}")
    return other


def _vector_add(this: Instance, other: Any, left: bool) -> Instance:
    other = _require_vector(other, "+")
    return Vector(
        current_resolver().resolve_binary(OperatorKind.ADD, this.x, other.x),
        current_resolver().resolve_binary(OperatorKind.ADD, this.y, other.y),
    )


def _vector_sub(this: Instance, other: Any, left: bool) -> Instance:
    other = _require_vector(other, "-")
    a, b = (this, other) if left else (other, this)
    return Vector(
        current_resolver().resolve_binary(OperatorKind.SUB, a.x, b.x),
        current_resolver().resolve_binary(OperatorKind.SUB, a.y, b.y),
    )


def _vector_mul(this: Instance, other: Any, left: bool) -> Instance:
    if isinstance(other, Instance) and other.cls is Vector:
        raise TypeError("Vector * Vector is ambiguous; use dot() or cross()")
    return Vector(
        current_resolver().resolve_binary(OperatorKind.MUL, this.x, other),
        current_resolver().resolve_binary(OperatorKind.MUL, this.y, other),
    )


def _vector_equals(this: Instance, other: Any) -> bool:
    if not (isinstance(other, Instance) and other.cls is Vector):
        return False
    return current_resolver().equals(this.x, other.x) and current_resolver().equals(this.y, other.y)


Vector = ClassDef(
    "Vector",
    ("x", "y"),
    {
        "__add": _vector_add,
        "__sub": _vector_sub,
        "__mul": _vector_mul,
        "__equals": _vector_equals,
    },
)


# =============================================================================
# Flags: 8-bit set with every bitwise operator
# =============================================================================

FLAG_MASK = 0xFF


def _bits(value: Any) -> int:
    return _field(value, Flags, "bits")


def _flags_and(this: Instance, other: Any, left: bool) -> Instance:
    return Flags(this.bits & _bits(other))


def _flags_or(this: Instance, other: Any, left: bool) -> Instance:
    return Flags(this.bits | _bits(other))


def _flags_xor(this: Instance, other: Any, left: bool) -> Instance:
    return Flags(this.bits ^ _bits(other))


def _flags_not(this: Instance) -> Instance:
    return Flags(~this.bits & FLAG_MASK)


def _flags_shift_left(this: Instance, other: Any, left: bool) -> Any:
    if left:
        return Flags((this.bits << other) & FLAG_MASK)
    return other << this.bits


def _flags_shift_right(this: Instance, other: Any, left: bool) -> Any:
    if left:
        return Flags(this.bits >> other)
    return other >> this.bits


def _flags_equals(this: Instance, other: Any) -> bool:
    return this.bits == _bits(other)


Flags = ClassDef(
    "Flags",
    ("bits",),
    {
        "__bitwiseAnd": _flags_and,
        "__bitwiseOr": _flags_or,
        "__bitwiseXor": _flags_xor,
        "__bitwiseNot": _flags_not,
        "__shiftLeft": _flags_shift_left,
        "__shiftRight": _flags_shift_right,
        "__equals": _flags_equals,
    },
)


# =============================================================================
# Version: ordering only, equality comes from __compareTo
# =============================================================================


def _version_compare(this: Instance, other: Any) -> int:
    if not (isinstance(other, Instance) and other.cls is Version):
        raise TypeError(f"Cannot compare Version with {current_resolver().host.type_name(other)}")
    if this.major != other.major:
        return this.major - other.major
    return this.minor - other.minor


Version = ClassDef("Version", ("major", "minor"), {"__compareTo": _version_compare})


# Defines no operators at all
Opaque = ClassDef("Opaque", ())


# =============================================================================
# Builtin functions
# =============================================================================


def _to_str(value: Any) -> str:
    if isinstance(value, str):
        return value
    return show(value)


def _to_int(value: Any) -> int:
    if isinstance(value, Instance):
        raise TypeError(f"Cannot convert {value.type_name} to int")
    return int(value)


BUILTINS: dict[str, Builtin] = {
    "str": Builtin("str", _to_str),
    "int": Builtin("int", _to_int),
}

CLASSES: dict[str, ClassDef] = {cls.name: cls for cls in (Number, Vector, Flags, Version, Opaque)}


def prelude_globals() -> dict[str, Any]:
    """Fresh global bindings holding every demo class and builtin."""
    return {**CLASSES, **BUILTINS}
