#!/usr/bin/env python3

import json

import pytest
from compilation_builders import constructor, document, enum_type, single_type_document, syntax_tree

from smart_enum_codegen.compilation import (
    Accessibility,
    CompilationLoadError,
    FieldSymbol,
    LookupScope,
    NamedTypeSymbol,
    SpecialType,
    SyntaxKind,
    TypeKind,
    load_compilation,
    load_compilation_file,
)


class TestCompilationLoader:
    def test_core_library_is_seeded(self):
        compilation = load_compilation(document())
        assert compilation.get_special_type(SpecialType.SYSTEM_STRING).to_display_string() == "System.String"
        assert compilation.get_special_type(SpecialType.SYSTEM_INT32) is compilation.get_type_by_metadata_name("System.Int32")
        assert compilation.get_type_by_metadata_name("System.Guid") is not None

    def test_core_library_can_be_left_out(self):
        compilation = load_compilation(document(references=(), include_core_library=False))
        assert compilation.get_special_type(SpecialType.SYSTEM_OBJECT) is None

    def test_bundled_smart_enum_reference(self):
        compilation = load_compilation(document())
        smart_enum = compilation.get_type_by_metadata_name("Ardalis.SmartEnum.SmartEnum`2")
        assert smart_enum is not None
        assert smart_enum.arity == 2
        assert compilation.get_type_by_metadata_name("Ardalis.SmartEnum.SmartFlagEnum`1") is not None
        assert compilation.get_type_by_metadata_name("Ardalis.SmartEnum.SmartEnumAttribute") is not None

    def test_syntax_tree_declarations(self):
        compilation = load_compilation(single_type_document(enum_type(), namespace="Some.Name.Space"))
        (tree,) = compilation.syntax_trees
        (node,) = tree.declarations
        assert node.kind == SyntaxKind.CLASS_DECLARATION
        assert node.identifier == "TestEnum"
        assert node.namespace == "Some.Name.Space"
        assert node.has_modifier("partial")
        assert [attribute.name for attribute in node.attributes] == ["SmartEnum"]
        assert node.full_metadata_name == "Some.Name.Space.TestEnum"

    def test_nested_types(self):
        outer = {"name": "A", "modifiers": ["public", "partial"], "types": [{"name": "B", "types": [enum_type()]}]}
        compilation = load_compilation(single_type_document(outer, namespace="Ns"))

        symbol = compilation.get_type_by_metadata_name("Ns.A+B+TestEnum")
        assert symbol is not None
        assert symbol.containing_type.name == "B"
        assert symbol.containing_type.declared_accessibility == Accessibility.PRIVATE
        assert symbol.to_display_string() == "Ns.A.B.TestEnum"

        declarations = compilation.syntax_trees[0].declarations
        assert [node.identifier for node in declarations] == ["A", "B", "TestEnum"]
        assert declarations[2].containing_types == ("A", "B")

    def test_members_are_bound(self):
        compilation = load_compilation(single_type_document(enum_type(members=("One",))))
        symbol = compilation.get_type_by_metadata_name("TestEnum")
        (member,) = symbol.get_members()
        assert isinstance(member, FieldSymbol)
        assert member.is_static and member.is_readonly and not member.is_const
        assert member.type is symbol
        assert member.attributes[0].attribute_class.to_display_string() == "Ardalis.SmartEnum.EnumMemberAttribute"

    def test_attribute_suffix_is_optional(self):
        type_data = enum_type(attributes=("SmartEnumAttribute",))
        compilation = load_compilation(single_type_document(type_data))
        symbol = compilation.get_type_by_metadata_name("TestEnum")
        assert symbol.attributes[0].attribute_class.name == "SmartEnumAttribute"

    def test_unknown_attribute_binds_to_nothing(self):
        compilation = load_compilation(single_type_document(enum_type(attributes=("Serializable",))))
        symbol = compilation.get_type_by_metadata_name("TestEnum")
        assert symbol.attributes[0].attribute_class is None

    def test_default_base_types(self):
        struct = {"name": "Point", "kind": "struct"}
        compilation = load_compilation(single_type_document(struct))
        point = compilation.get_type_by_metadata_name("Point")
        assert point.type_kind == TypeKind.STRUCT
        assert point.base_type.to_display_string() == "System.ValueType"

        compilation = load_compilation(single_type_document(enum_type()))
        assert compilation.get_type_by_metadata_name("TestEnum").base_type.special_type == SpecialType.SYSTEM_OBJECT

    def test_generic_base_is_substituted(self):
        mid = {"name": "Mid", "modifiers": ["public", "abstract"], "type_parameters": ["T", "V"], "base": "SmartEnum<T, V>"}
        leaf = enum_type(base="Mid<TestEnum, long>")
        compilation = load_compilation(document(syntax_tree(mid, leaf)))

        symbol = compilation.get_type_by_metadata_name("TestEnum")
        assert symbol.base_type.to_display_string() == "Mid<TestEnum, System.Int64>"
        assert symbol.base_type.base_type.to_display_string() == "Ardalis.SmartEnum.SmartEnum<TestEnum, System.Int64>"

    def test_single_argument_base_binds_int(self):
        compilation = load_compilation(single_type_document(enum_type(base="SmartEnum<TestEnum>")))
        symbol = compilation.get_type_by_metadata_name("TestEnum")
        assert symbol.base_type.base_type.to_display_string() == "Ardalis.SmartEnum.SmartEnum<TestEnum, System.Int32>"

    def test_optional_parameters(self):
        ctor = constructor(
            {"name": "name", "type": "string"},
            {"name": "value", "type": "int"},
            {"name": "flag", "type": "bool", "default": "false"},
            {"name": "other", "type": "bool", "optional": True},
            {"name": "required", "type": "bool"},
        )
        compilation = load_compilation(single_type_document(enum_type(extra_members=(ctor,))))
        (method,) = compilation.get_type_by_metadata_name("TestEnum").instance_constructors
        assert [p.is_optional for p in method.parameters] == [False, False, True, True, False]

    def test_resolve_type_follows_usings(self):
        compilation = load_compilation(single_type_document(enum_type()))
        scope = LookupScope(usings=("Ardalis.SmartEnum",))
        resolved = compilation.resolve_type("SmartFlagEnum<TestEnum, byte>", scope)
        assert isinstance(resolved, NamedTypeSymbol)
        assert resolved.to_display_string() == "Ardalis.SmartEnum.SmartFlagEnum<TestEnum, System.Byte>"
        assert compilation.resolve_type("SmartFlagEnum<TestEnum, byte>", LookupScope()) is None
        assert compilation.resolve_type("Ardalis.SmartEnum.SmartFlagEnum<TestEnum, byte>", LookupScope()) == resolved

    def test_namespace_is_not_a_type(self):
        compilation = load_compilation(document())
        assert compilation.resolve_type("Ardalis.SmartEnum", LookupScope()) is None
        assert compilation.resolve_type("List<", LookupScope()) is None


@pytest.mark.parametrize(
    "type_data, message",
    [
        (enum_type(base="Missing"), "Cannot resolve type 'Missing'"),
        ({"name": "Bad", "kind": "delegate"}, "Unknown type kind"),
        ({"modifiers": ["public"]}, "missing 'name'"),
        (enum_type(extra_members=({"kind": "event", "name": "Changed"},)), "Unknown member kind"),
        (enum_type(modifiers=("public", "private", "partial")), "Invalid accessibility"),
    ],
)
def test_invalid_documents(type_data, message):
    with pytest.raises(CompilationLoadError, match=message):
        load_compilation(single_type_document(type_data))


def test_duplicate_type():
    with pytest.raises(CompilationLoadError, match="declared more than once"):
        load_compilation(document(syntax_tree(enum_type(), enum_type())))


def test_unknown_bundled_reference():
    with pytest.raises(CompilationLoadError, match="Unknown bundled reference"):
        load_compilation(document(references=("Not.A.Package",)))


def test_load_file(tmp_path):
    path = tmp_path / "compilation.json"
    path.write_text(json.dumps(single_type_document(enum_type())))
    compilation = load_compilation_file(path)
    assert compilation.get_type_by_metadata_name("TestEnum") is not None

    bad = tmp_path / "bad.json"
    bad.write_text("{not json")
    with pytest.raises(CompilationLoadError, match="Invalid JSON"):
        load_compilation_file(bad)


if __name__ == "__main__":
    pytest.main([__file__])
