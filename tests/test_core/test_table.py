"""Tests for override tables and operand classification."""

import pytest

from opdispatch.core.operators import OperatorKind
from opdispatch.core.table import NATIVE, Native, Overloadable, OverrideTable, classify, override_for
from opdispatch.eval.value import ClassDef


def _add(this, other, left):
    return "added"


class TestOverrideTable:
    def test_from_methods_keeps_only_override_names(self):
        table = OverrideTable.from_methods({"__add": _add, "describe": lambda this: "x"})
        assert list(table) == [OperatorKind.ADD]
        assert table.lookup(OperatorKind.ADD) is _add
        assert table.lookup(OperatorKind.SUB) is None

    def test_source_dict_changes_are_not_observed(self):
        source = {OperatorKind.ADD: _add}
        table = OverrideTable.of(source)
        source[OperatorKind.SUB] = _add
        assert OperatorKind.SUB not in table
        assert len(table) == 1

    def test_entries_are_read_only(self):
        table = OverrideTable.of({OperatorKind.ADD: _add})
        with pytest.raises(TypeError):
            table.entries[OperatorKind.SUB] = _add  # type: ignore[index]

    def test_table_cannot_be_rebound(self):
        table = OverrideTable.empty()
        with pytest.raises(AttributeError):
            table.entries = {}  # type: ignore[misc]


class TestClassify:
    @pytest.mark.parametrize("value", [None, True, 1, 2.5, "text"])
    def test_natives(self, value):
        assert classify(value) is NATIVE
        assert isinstance(classify(value), Native)

    def test_instance_gets_its_class_table(self):
        cls = ClassDef("Point", ("x",), {"__add": _add})
        first, second = cls(1), cls(2)
        classification = classify(first)
        assert isinstance(classification, Overloadable)
        assert classification.table is cls.table
        assert classify(second).table is classify(first).table

    def test_empty_table_is_still_overloadable(self):
        cls = ClassDef("Empty", ())
        classification = classify(cls())
        assert isinstance(classification, Overloadable)
        assert len(classification.table) == 0

    def test_class_object_itself_is_native(self):
        cls = ClassDef("Point", ("x",), {"__add": _add})
        assert classify(cls) is NATIVE

    def test_override_for(self):
        cls = ClassDef("Point", ("x",), {"__add": _add})
        assert override_for(classify(cls(1)), OperatorKind.ADD) is _add
        assert override_for(classify(cls(1)), OperatorKind.MUL) is None
        assert override_for(NATIVE, OperatorKind.ADD) is None
