"""Tests for the sweep pass, output naming and the full transform."""

import ast
import re
import textwrap

import pytest

from gensmith.engine import compute_output_name, mark, name_fragment, sweep, transform
from gensmith.placeholders import (
    REMOVE_MARKER,
    PlaceholderMatcher,
    ReplacementRecord,
    UnknownPlaceholderError,
    build_mapping,
)


def normalize(source: str) -> str:
    return ast.unparse(ast.parse(textwrap.dedent(source)))


def parse(source: str) -> ast.Module:
    return ast.parse(textwrap.dedent(source))


MAP_TEMPLATE = """
    from dataclasses import dataclass, field

    class _typeKey_:
        pass

    class _typeValue_:
        pass

    @dataclass
    class Map_typeKey__typeValue_:
        items: dict[_typeKey_, _typeValue_] = field(default_factory=dict)

        def get(self, key: _typeKey_) -> _typeValue_:
            return self.items[key]

    def New_TypeKey__TypeValue_Map() -> Map_typeKey__typeValue_:
        return Map_typeKey__typeValue_()
"""


class TestSweep:
    """Test removal of marked declarations."""

    def test_removes_marked_declarations(self, map_table):
        tree = parse(MAP_TEMPLATE)
        before = len(tree.body)

        marks = mark(tree, map_table)
        removed = sweep(tree, marks)

        assert removed == ["_typeKey_", "_typeValue_"]
        assert len(tree.body) == before - 2
        assert [type(stmt).__name__ for stmt in tree.body] == ["ImportFrom", "ClassDef", "FunctionDef"]

    def test_unmarked_statements_keep_order(self, type_table):
        tree = parse(
            """
            a = 1
            _type_ = int
            b = 2
            c: _type_ = 3
            """
        )

        sweep(tree, mark(tree, type_table))

        assert ast.unparse(tree) == normalize(
            """
            a = 1
            b = 2
            c: int = 3
            """
        )

    def test_group_filtered(self, map_table):
        tree = parse(
            """
            if TYPE_CHECKING:
                _typeKey_ = str
                Other = int
            x: _typeKey_
            """
        )

        sweep(tree, mark(tree, map_table))

        assert ast.unparse(tree) == normalize(
            """
            if TYPE_CHECKING:
                Other = int
            x: str
            """
        )

    def test_emptied_group_dropped(self, map_table):
        tree = parse(
            """
            from typing import TYPE_CHECKING

            if TYPE_CHECKING:
                class _typeKey_: ...
                class _typeValue_: ...

            pairs: list[tuple[_typeKey_, _typeValue_]] = []
            """
        )

        removed = sweep(tree, mark(tree, map_table))

        assert removed == ["_typeKey_", "_typeValue_"]
        assert ast.unparse(tree) == normalize(
            """
            from typing import TYPE_CHECKING
            pairs: list[tuple[str, int]] = []
            """
        )

    def test_if_with_else_is_not_a_group(self, type_table):
        """Test that conditional blocks with an else branch are left alone."""
        source = """
            if flag:
                _type_ = int
            else:
                _type_ = float
        """
        tree = parse(source)

        removed = sweep(tree, mark(tree, type_table))

        assert removed == []
        assert ast.unparse(tree) == normalize(
            """
            if flag:
                int = int
            else:
                int = float
            """
        )

    def test_nothing_marked(self, type_table):
        source = normalize(
            """
            import os

            def f():
                return os.sep
            """
        )
        tree = ast.parse(source)

        assert sweep(tree, mark(tree, type_table)) == []
        assert ast.unparse(tree) == source

    def test_marker_never_escapes(self, map_table):
        tree = parse(MAP_TEMPLATE)

        sweep(tree, mark(tree, map_table))

        source = ast.unparse(tree)
        assert REMOVE_MARKER not in source
        assert "class _typeKey_" not in source
        assert "class _typeValue_" not in source


class TestNameFragment:
    """Test conversion of replacement values to file name fragments."""

    def test_plain_names(self):
        assert name_fragment("int") == "int"
        assert name_fragment("MyType") == "mytype"

    def test_unsafe_characters(self):
        assert name_fragment("dict[str, int]") == "dict_str_int"
        assert name_fragment("pkg.Type") == "pkg_type"

    def test_symbol_only_values(self):
        """Test that values without word characters still get distinct fragments."""
        first = name_fragment("[]")
        second = name_fragment("()")

        assert re.fullmatch(r"[0-9a-f]{8}", first)
        assert first != second
        assert name_fragment("[]") == first

    def test_symbol_only_value_in_output_name(self):
        record = ReplacementRecord(replacements={"_type_": "..."})

        name = compute_output_name("set.py", record, ["_type_"])

        assert name != "set_.py"
        assert name == f"set_{name_fragment('...')}.py"


class TestComputeOutputName:
    """Test output file naming."""

    def test_single_replacement(self):
        record = ReplacementRecord(replacements={"_type_": "int"})
        assert compute_output_name("templates/set.py", record, ["_type_"]) == "set_int.py"

    def test_keys_in_caller_order(self):
        record = ReplacementRecord(replacements={"_typeValue_": "int", "_typeKey_": "str"})
        keys = ["_typeKey_", "_typeValue_"]

        assert compute_output_name("map.py", record, keys) == "map_str_int.py"
        assert compute_output_name("map.py", record, list(reversed(keys))) == "map_int_str.py"

    def test_unused_keys_skipped(self):
        record = ReplacementRecord(replacements={"_typeValue_": "float"})
        keys = ["_typeKey_", "_typeValue_"]

        assert compute_output_name("map.py", record, keys) == "map_float.py"

    def test_lowercased(self):
        record = ReplacementRecord(replacements={"_type_": "Decimal"})
        assert compute_output_name("set.py", record, ["_type_"]) == "set_decimal.py"

    def test_test_suffix_kept_last(self):
        record = ReplacementRecord(replacements={"_typeKey_": "str", "_typeValue_": "int"})
        keys = ["_typeKey_", "_typeValue_"]

        assert compute_output_name("pkg/map_test.py", record, keys) == "map_str_int_test.py"

    def test_test_suffix_disabled(self):
        record = ReplacementRecord(replacements={"_type_": "int"})
        assert compute_output_name("set_test.py", record, ["_type_"], test_suffix="") == "set_test_int.py"

    def test_test_prefix_survives(self):
        record = ReplacementRecord(replacements={"_type_": "int"})
        assert compute_output_name("test_set.py", record, ["_type_"]) == "test_set_int.py"

    def test_capitalized_alias_counts(self):
        """Test that a key used only in capitalized form still names the output."""
        record = ReplacementRecord(replacements={"_Type_": "Int"})

        name = compute_output_name("box.py", record, ["_type_"], aliases={"_type_": "_Type_"})

        assert name == "box_int.py"

    def test_no_replacements(self):
        assert compute_output_name("set.py", ReplacementRecord(), ["_type_"]) == "set.py"

    def test_deterministic(self):
        record = ReplacementRecord(replacements={"_type_": "int"})
        names = {compute_output_name("set.py", record, ["_type_"]) for _ in range(5)}
        assert names == {"set_int.py"}

    def test_distinct_instantiations_do_not_collide(self):
        keys = ["_type_"]
        first = compute_output_name("set.py", ReplacementRecord(replacements={"_type_": "int"}), keys)
        second = compute_output_name("set.py", ReplacementRecord(replacements={"_type_": "str"}), keys)
        assert first != second


class TestTransform:
    """Test mark and sweep together."""

    def test_end_to_end_example(self, type_table):
        """Test the declared type removed and its field type concretized."""
        tree = parse(
            """
            class _Type_:
                value: _type_

            def wrap(value: _type_) -> list[_type_]:
                return [value]
            """
        )

        result = transform(tree, type_table)

        assert ast.unparse(result.tree) == normalize(
            """
            def wrap(value: int) -> list[int]:
                return [value]
            """
        )
        assert result.removed == ["_Type_"]
        assert compute_output_name("box.py", result.record, type_table.keys) == "box_int.py"

    def test_total_substitution(self, map_table):
        tree = parse(MAP_TEMPLATE)

        result = transform(tree, map_table)

        source = ast.unparse(result.tree)
        matcher = PlaceholderMatcher()
        assert not any(matcher.matches(node.id) for node in ast.walk(result.tree) if isinstance(node, ast.Name))
        for token in map_table.entries:
            assert token not in source
        assert "class Mapstrint:" in source
        assert "def NewStrIntMap() -> Mapstrint:" in source
        assert result.record.replacements == {
            "_typeKey_": "str",
            "_typeValue_": "int",
            "_TypeKey_": "Str",
            "_TypeValue_": "Int",
        }

    def test_declaration_count_law(self, map_table):
        tree = parse(MAP_TEMPLATE)
        before = len(tree.body)
        exact = sum(
            1
            for stmt in tree.body
            if isinstance(stmt, ast.ClassDef) and stmt.name in map_table
        )

        result = transform(tree, map_table)

        assert len(result.tree.body) == before - exact

    def test_capitalized_exported_name(self):
        table = build_mapping([("key", "value")])
        tree = parse("def Get_Key_(): pass")

        transform(tree, table, PlaceholderMatcher(r"(?i)_key_"))

        assert tree.body[0].name == "GetValue"

    def test_unknown_placeholder_fails(self):
        table = build_mapping([("key", "int")])
        tree = parse("x: _typeValue_")

        with pytest.raises(UnknownPlaceholderError) as exc_info:
            transform(tree, table)

        assert exc_info.value.token == "_typeValue_"

    def test_template_without_placeholders(self, type_table):
        source = normalize("print('hello')")
        tree = ast.parse(source)

        result = transform(tree, type_table)

        assert ast.unparse(result.tree) == source
        assert len(result.record) == 0
        assert result.removed == []

    def test_dropped_statements_keep_positions(self, map_table):
        """Test that swept statements are reported with their source positions."""
        tree = parse(
            """
            if TYPE_CHECKING:
                class _typeKey_: ...
                Other = int
            _typeValue_ = int
            x: _typeKey_
            """
        )
        member = tree.body[0].body[0]
        declaration = tree.body[1]

        result = transform(tree, map_table)

        assert result.dropped == [member, declaration]
        assert (member.lineno, member.end_lineno) == (3, 3)
        assert result.removed == ["_typeKey_", "_typeValue_"]

    def test_emptied_group_dropped_whole(self, map_table):
        tree = parse(
            """
            if TYPE_CHECKING:
                class _typeKey_: ...
            x: _typeKey_
            """
        )
        group = tree.body[0]

        result = transform(tree, map_table)

        assert result.dropped == [group]
        assert result.removed == ["_typeKey_"]
