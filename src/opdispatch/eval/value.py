"""Runtime values for the expression language.

Natives are plain Python ``None``, ``bool``, ``int``, ``float`` and ``str``.
User types are ``ClassDef`` objects; their instances carry the override table
published when the class was defined.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Mapping

from opdispatch.core.host import PythonHost
from opdispatch.core.table import OverrideTable


@dataclass(frozen=True, eq=False)
class ClassDef:
    """User-defined type: a name, positional fields and methods.

    The override table is derived from the methods once, at definition time.
    """

    name: str
    fields: tuple[str, ...]
    methods: Mapping[str, Callable[..., Any]] = field(default_factory=dict)
    table: OverrideTable = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "table", OverrideTable.from_methods(self.methods))

    def instantiate(self, args: tuple[Any, ...]) -> Instance:
        if len(args) != len(self.fields):
            raise TypeError(f"{self.name} expects {len(self.fields)} arguments, got {len(args)}")
        return Instance(self, dict(zip(self.fields, args)))

    def __call__(self, *args: Any) -> Instance:
        return self.instantiate(args)

    def __str__(self) -> str:
        return f"<class {self.name}>"


@dataclass(eq=False)
class Instance:
    """Object of a ``ClassDef``. Equality is identity."""

    cls: ClassDef
    attrs: dict[str, Any]

    @property
    def override_table(self) -> OverrideTable:
        return self.cls.table

    @property
    def type_name(self) -> str:
        return self.cls.name

    def __getattr__(self, name: str) -> Any:
        # Field access for override implementations: this.value
        attrs = self.__dict__.get("attrs", {})
        if name in attrs:
            return attrs[name]
        raise AttributeError(name)

    def __str__(self) -> str:
        values = ", ".join(show(self.attrs[f]) for f in self.cls.fields)
        return f"{self.cls.name}({values})"

    def __repr__(self) -> str:
        return str(self)


@dataclass(frozen=True)
class Builtin:
    """Host function callable from the language: str(x), int(x)."""

    name: str
    impl: Callable[..., Any]

    def __str__(self) -> str:
        return f"<builtin {self.name}>"


def show(value: Any) -> str:
    """Render a runtime value the way the language writes it."""
    match value:
        case None:
            return "null"
        case bool():
            return "true" if value else "false"
        case str():
            return f'"{value}"'
        case _:
            return str(value)


class ValueHost(PythonHost):
    """Python host semantics with language-level type names."""

    def type_name(self, value: Any) -> str:
        match value:
            case Instance():
                return value.type_name
            case ClassDef():
                return "class"
            case Builtin():
                return "builtin"
            case _:
                return super().type_name(value)
