"""Override tables and operand classification."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Iterator, Mapping, Protocol, runtime_checkable

from opdispatch.core.operators import OperatorKind, is_override_method, kind_for_method

# Opaque to the engine; only the host knows how to call it
CallableHandle = Callable[..., Any]


@dataclass(frozen=True, eq=False)
class OverrideTable:
    """Per-type map from operator kind to override handle.

    Published once when the owning type is defined and shared by every
    instance. The underlying mapping is a read-only proxy over a private copy,
    so later changes to the dict it was built from are not observed.
    """

    entries: Mapping[OperatorKind, CallableHandle] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def __post_init__(self) -> None:
        object.__setattr__(self, "entries", MappingProxyType(dict(self.entries)))

    @staticmethod
    def empty() -> OverrideTable:
        return OverrideTable()

    @staticmethod
    def of(entries: Mapping[OperatorKind, CallableHandle]) -> OverrideTable:
        return OverrideTable(entries)

    @staticmethod
    def from_methods(methods: Mapping[str, CallableHandle]) -> OverrideTable:
        """Build a table from a type's methods, keeping only override names.

        Methods such as ``__add`` or ``__compareTo`` become entries; every
        other method is ignored.
        """
        return OverrideTable(
            {kind_for_method(name): impl for name, impl in methods.items() if is_override_method(name)}
        )

    def lookup(self, kind: OperatorKind) -> CallableHandle | None:
        return self.entries.get(kind)

    def __contains__(self, kind: object) -> bool:
        return kind in self.entries

    def __iter__(self) -> Iterator[OperatorKind]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)


@runtime_checkable
class HasOverrides(Protocol):
    """Values whose type may override operators."""

    @property
    def override_table(self) -> OverrideTable: ...


@dataclass(frozen=True)
class Native:
    """Classification of a primitive host value."""

    def __str__(self) -> str:
        return "native"


@dataclass(frozen=True)
class Overloadable:
    """Classification of an overloadable value, with its type's table."""

    table: OverrideTable

    def has(self, kind: OperatorKind) -> bool:
        return kind in self.table

    def __str__(self) -> str:
        return f"overloadable({len(self.table)} overrides)"


Classification = Native | Overloadable

NATIVE = Native()


def classify(value: Any) -> Classification:
    """Report whether a value is native or carries an override table."""
    if isinstance(value, HasOverrides):
        return Overloadable(value.override_table)
    return NATIVE


def override_for(classification: Classification, kind: OperatorKind) -> CallableHandle | None:
    match classification:
        case Overloadable(table):
            return table.lookup(kind)
        case _:
            return None
