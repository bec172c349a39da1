"""
Compilation loader.

Builds a Compilation (symbols plus syntax trees) from a JSON document
describing referenced libraries and source files. Loading happens in two
passes: every type is declared first so that base types, members and
attributes can refer to types declared anywhere in the document.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .compilation import Compilation, LookupScope, attribute_constructor
from .symbols import (
    Accessibility,
    AttributeData,
    FieldSymbol,
    MethodKind,
    MethodSymbol,
    NamedTypeSymbol,
    ParameterSymbol,
    PropertySymbol,
    SpecialType,
    Symbol,
    TypeKind,
    TypeParameterSymbol,
)
from .syntax import AttributeListSyntax, AttributeSyntax, SyntaxKind, SyntaxTree, TypeDeclarationSyntax


class CompilationLoadError(Exception):
    """Raised when a compilation document cannot be loaded.

    This can happen when:
    - A required key is missing or has the wrong shape
    - A type kind or member kind is unknown
    - A base type or member type cannot be resolved
    - The same type is declared twice
    """

    pass


# Types every compilation gets unless "include_core_library" is false
CORE_LIBRARY: dict[str, Any] = {
    "namespace": "System",
    "types": [
        {"name": "Object", "modifiers": ["public"], "special": SpecialType.SYSTEM_OBJECT.value},
        {"name": "ValueType", "modifiers": ["public", "abstract"]},
        {"name": "Attribute", "modifiers": ["public", "abstract"]},
        {"name": "String", "modifiers": ["public", "sealed"], "special": SpecialType.SYSTEM_STRING.value},
        {"name": "Boolean", "kind": "struct", "modifiers": ["public"], "special": SpecialType.SYSTEM_BOOLEAN.value},
        {"name": "Char", "kind": "struct", "modifiers": ["public"], "special": SpecialType.SYSTEM_CHAR.value},
        {"name": "SByte", "kind": "struct", "modifiers": ["public"], "special": SpecialType.SYSTEM_SBYTE.value},
        {"name": "Byte", "kind": "struct", "modifiers": ["public"], "special": SpecialType.SYSTEM_BYTE.value},
        {"name": "Int16", "kind": "struct", "modifiers": ["public"], "special": SpecialType.SYSTEM_INT16.value},
        {"name": "UInt16", "kind": "struct", "modifiers": ["public"], "special": SpecialType.SYSTEM_UINT16.value},
        {"name": "Int32", "kind": "struct", "modifiers": ["public"], "special": SpecialType.SYSTEM_INT32.value},
        {"name": "UInt32", "kind": "struct", "modifiers": ["public"], "special": SpecialType.SYSTEM_UINT32.value},
        {"name": "Int64", "kind": "struct", "modifiers": ["public"], "special": SpecialType.SYSTEM_INT64.value},
        {"name": "UInt64", "kind": "struct", "modifiers": ["public"], "special": SpecialType.SYSTEM_UINT64.value},
        {"name": "Single", "kind": "struct", "modifiers": ["public"], "special": SpecialType.SYSTEM_SINGLE.value},
        {"name": "Double", "kind": "struct", "modifiers": ["public"], "special": SpecialType.SYSTEM_DOUBLE.value},
        {"name": "Decimal", "kind": "struct", "modifiers": ["public"], "special": SpecialType.SYSTEM_DECIMAL.value},
        {"name": "Guid", "kind": "struct", "modifiers": ["public"]},
        {"name": "DateTime", "kind": "struct", "modifiers": ["public"]},
    ],
}

# Public surface of the Ardalis.SmartEnum package that the generator binds to
SMART_ENUM_LIBRARY: dict[str, Any] = {
    "namespace": "Ardalis.SmartEnum",
    "types": [
        {"name": "SmartEnumAttribute", "modifiers": ["public", "sealed"], "base": "System.Attribute"},
        {"name": "EnumMemberAttribute", "modifiers": ["public", "sealed"], "base": "System.Attribute"},
        {
            "name": "SmartEnum",
            "modifiers": ["public", "abstract"],
            "type_parameters": ["TEnum", "TValue"],
            "members": [
                {
                    "kind": "constructor",
                    "modifiers": ["protected"],
                    "parameters": [{"name": "name", "type": "string"}, {"name": "value", "type": "TValue"}],
                },
            ],
        },
        {
            "name": "SmartEnum",
            "modifiers": ["public", "abstract"],
            "type_parameters": ["TEnum"],
            "base": "SmartEnum<TEnum, int>",
            "members": [
                {
                    "kind": "constructor",
                    "modifiers": ["protected"],
                    "parameters": [{"name": "name", "type": "string"}, {"name": "value", "type": "int"}],
                },
            ],
        },
        {
            "name": "SmartFlagEnum",
            "modifiers": ["public", "abstract"],
            "type_parameters": ["TEnum", "TValue"],
            "members": [
                {
                    "kind": "constructor",
                    "modifiers": ["protected"],
                    "parameters": [{"name": "name", "type": "string"}, {"name": "value", "type": "TValue"}],
                },
            ],
        },
        {
            "name": "SmartFlagEnum",
            "modifiers": ["public", "abstract"],
            "type_parameters": ["TEnum"],
            "base": "SmartFlagEnum<TEnum, int>",
            "members": [
                {
                    "kind": "constructor",
                    "modifiers": ["protected"],
                    "parameters": [{"name": "name", "type": "string"}, {"name": "value", "type": "int"}],
                },
            ],
        },
    ],
}

BUNDLED_REFERENCES: dict[str, dict[str, Any]] = {
    "Ardalis.SmartEnum": SMART_ENUM_LIBRARY,
}

_TYPE_KINDS: dict[str, tuple[TypeKind, bool, SyntaxKind]] = {
    "class": (TypeKind.CLASS, False, SyntaxKind.CLASS_DECLARATION),
    "struct": (TypeKind.STRUCT, False, SyntaxKind.STRUCT_DECLARATION),
    "interface": (TypeKind.INTERFACE, False, SyntaxKind.INTERFACE_DECLARATION),
    "record": (TypeKind.CLASS, True, SyntaxKind.RECORD_DECLARATION),
    "record class": (TypeKind.CLASS, True, SyntaxKind.RECORD_DECLARATION),
    "record struct": (TypeKind.STRUCT, True, SyntaxKind.RECORD_STRUCT_DECLARATION),
}

_ACCESSIBILITY_MODIFIERS: dict[frozenset[str], Accessibility] = {
    frozenset({"public"}): Accessibility.PUBLIC,
    frozenset({"private"}): Accessibility.PRIVATE,
    frozenset({"protected"}): Accessibility.PROTECTED,
    frozenset({"internal"}): Accessibility.INTERNAL,
    frozenset({"protected", "internal"}): Accessibility.PROTECTED_OR_INTERNAL,
    frozenset({"private", "protected"}): Accessibility.PROTECTED_AND_INTERNAL,
}


@dataclass
class _PendingType:
    """A declared type waiting for its base list, members and attributes to be bound."""

    symbol: NamedTypeSymbol
    data: dict[str, Any]
    usings: tuple[str, ...] = ()
    source_path: str | None = None
    syntax: TypeDeclarationSyntax | None = None
    nested: list[_PendingType] = field(default_factory=list)


def _modifiers(data: dict[str, Any]) -> tuple[str, ...]:
    modifiers: list[str] = []
    for modifier in data.get("modifiers", []):
        modifiers.extend(str(modifier).split())
    return tuple(modifiers)


def _accessibility(modifiers: tuple[str, ...], default: Accessibility) -> Accessibility:
    access = frozenset(m for m in modifiers if m in ("public", "private", "protected", "internal"))
    if not access:
        return default
    if access not in _ACCESSIBILITY_MODIFIERS:
        raise CompilationLoadError(f"Invalid accessibility modifiers: {' '.join(sorted(access))}")
    return _ACCESSIBILITY_MODIFIERS[access]


def _attribute_syntax(raw: Any) -> AttributeSyntax:
    if isinstance(raw, str):
        return AttributeSyntax(name=raw)
    if isinstance(raw, dict) and "name" in raw:
        return AttributeSyntax(name=raw["name"], arguments=tuple(str(a) for a in raw.get("arguments", [])))
    raise CompilationLoadError(f"Invalid attribute: {raw!r}")


class CompilationLoader:
    """Loads a Compilation from its JSON document form."""

    def load(self, document: dict[str, Any]) -> Compilation:
        """
        Build a compilation from a document.

        Args:
            document: Parsed JSON document with optional "assembly_name",
                "include_core_library", "references" (bundled names or
                namespace blocks) and "syntax_trees" (path, usings,
                namespace, types)

        Returns:
            A fully bound Compilation

        Raises:
            CompilationLoadError: If the document is malformed or references unknown types
        """
        if not isinstance(document, dict):
            raise CompilationLoadError("Compilation document must be a JSON object")

        self._compilation = Compilation(assembly_name=document.get("assembly_name", "Compilation"))
        pending: list[_PendingType] = []

        blocks: list[dict[str, Any]] = []
        if document.get("include_core_library", True):
            blocks.append(CORE_LIBRARY)
        for reference in document.get("references", []):
            if isinstance(reference, str):
                if reference not in BUNDLED_REFERENCES:
                    raise CompilationLoadError(f"Unknown bundled reference: {reference}")
                blocks.append(BUNDLED_REFERENCES[reference])
            elif isinstance(reference, dict):
                blocks.append(reference)
            else:
                raise CompilationLoadError(f"Invalid reference entry: {reference!r}")

        # First pass: declare every type
        for block in blocks:
            for type_data in block.get("types", []):
                pending.append(self._declare_type(type_data, block.get("namespace"), None, (), None))

        trees: list[tuple[dict[str, Any], list[_PendingType]]] = []
        for tree_data in document.get("syntax_trees", []):
            if "path" not in tree_data:
                raise CompilationLoadError("Syntax tree is missing 'path'")
            usings = tuple(tree_data.get("usings", []))
            declared = [
                self._declare_type(type_data, tree_data.get("namespace"), None, usings, tree_data["path"])
                for type_data in tree_data.get("types", [])
            ]
            pending.extend(declared)
            trees.append((tree_data, declared))

        # Second pass: bind base lists, members and attributes
        for item in self._flatten(pending):
            self._bind_type(item)

        self._compilation.syntax_trees = tuple(
            SyntaxTree(
                path=tree_data["path"],
                usings=tuple(tree_data.get("usings", [])),
                declarations=tuple(item.syntax for item in self._flatten(declared) if item.syntax is not None),
            )
            for tree_data, declared in trees
        )
        return self._compilation

    def load_file(self, path: str | Path) -> Compilation:
        """Load a compilation document from a JSON file."""
        with open(path, encoding="utf-8") as f:
            try:
                document = json.load(f)
            except json.JSONDecodeError as e:
                raise CompilationLoadError(f"Invalid JSON in {path}: {e}") from e
        return self.load(document)

    def _flatten(self, items: list[_PendingType]) -> list[_PendingType]:
        result: list[_PendingType] = []
        for item in items:
            result.append(item)
            result.extend(self._flatten(item.nested))
        return result

    def _declare_type(
        self,
        data: dict[str, Any],
        namespace: str | None,
        containing: NamedTypeSymbol | None,
        usings: tuple[str, ...],
        source_path: str | None,
    ) -> _PendingType:
        if not isinstance(data, dict) or not data.get("name"):
            raise CompilationLoadError(f"Type declaration is missing 'name': {data!r}")

        kind_name = data.get("kind", "class")
        if kind_name not in _TYPE_KINDS:
            raise CompilationLoadError(f"Unknown type kind '{kind_name}' for {data['name']}")
        type_kind, is_record, syntax_kind = _TYPE_KINDS[kind_name]

        modifiers = _modifiers(data)
        default_access = Accessibility.PRIVATE if containing is not None else Accessibility.INTERNAL
        symbol = NamedTypeSymbol(
            name=data["name"],
            declared_accessibility=_accessibility(modifiers, default_access),
            is_static="static" in modifiers,
            containing_type=containing,
            containing_namespace=self._compilation.get_or_add_namespace(namespace),
            type_kind=type_kind,
            special_type=SpecialType(data.get("special", SpecialType.NONE.value)),
            is_record=is_record,
            is_sealed="sealed" in modifiers,
            is_abstract="abstract" in modifiers,
            is_readonly="readonly" in modifiers,
        )
        symbol.type_parameters = [
            TypeParameterSymbol(name=name, ordinal=ordinal, containing_type=symbol)
            for ordinal, name in enumerate(data.get("type_parameters", []))
        ]
        try:
            self._compilation.add_type(symbol)
        except ValueError as e:
            raise CompilationLoadError(str(e)) from e
        if containing is not None:
            containing.type_members.append(symbol)

        item = _PendingType(symbol=symbol, data=data, usings=usings, source_path=source_path)
        if source_path is not None:
            containing_names: list[str] = []
            outer = containing
            while outer is not None:
                containing_names.insert(0, outer.metadata_name)
                outer = outer.containing_type
            item.syntax = TypeDeclarationSyntax(
                kind=syntax_kind,
                identifier=symbol.name,
                modifiers=modifiers,
                attribute_lists=tuple(
                    AttributeListSyntax(attributes=(_attribute_syntax(raw),)) for raw in data.get("attributes", [])
                ),
                type_parameters=tuple(data.get("type_parameters", [])),
                base_list=tuple(filter(None, [data.get("base"), *data.get("interfaces", [])])),
                namespace=namespace or None,
                containing_types=tuple(containing_names),
                file_path=source_path,
            )

        for nested in data.get("types", []):
            item.nested.append(self._declare_type(nested, namespace, symbol, usings, source_path))
        return item

    def _scope(self, item: _PendingType, include_self: bool) -> LookupScope:
        containing: list[NamedTypeSymbol] = []
        current = item.symbol if include_self else item.symbol.containing_type
        while current is not None:
            containing.append(current)
            current = current.containing_type
        namespace = item.symbol.containing_namespace
        return LookupScope(
            namespace=None if namespace.is_global_namespace else namespace.to_display_string(),
            containing_types=containing,
            usings=item.usings,
            extra_type_parameters=[] if include_self else list(item.symbol.type_parameters),
        )

    def _resolve(self, text: str, scope: LookupScope, context: str):
        resolved = self._compilation.resolve_type(text, scope)
        if resolved is None:
            raise CompilationLoadError(f"Cannot resolve type '{text}' in {context}")
        return resolved

    def _bind_type(self, item: _PendingType) -> None:
        symbol, data = item.symbol, item.data
        display = symbol.to_display_string()

        base_scope = self._scope(item, include_self=False)
        if data.get("base"):
            base = self._resolve(data["base"], base_scope, f"base list of {display}")
            if not isinstance(base, NamedTypeSymbol):
                raise CompilationLoadError(f"Base type of {display} must be a named type")
            symbol.declared_base_type = base
        elif symbol.type_kind == TypeKind.CLASS and symbol.special_type != SpecialType.SYSTEM_OBJECT:
            symbol.declared_base_type = self._compilation.get_special_type(SpecialType.SYSTEM_OBJECT)
        elif symbol.type_kind == TypeKind.STRUCT:
            symbol.declared_base_type = self._compilation.get_type_by_metadata_name("System.ValueType")

        for iface in data.get("interfaces", []):
            resolved = self._resolve(iface, base_scope, f"interface list of {display}")
            if isinstance(resolved, NamedTypeSymbol):
                symbol.declared_interfaces.append(resolved)

        symbol.attributes = self._bind_attributes(data.get("attributes", []), base_scope)

        member_scope = self._scope(item, include_self=True)
        default_access = Accessibility.PUBLIC if symbol.type_kind == TypeKind.INTERFACE else Accessibility.PRIVATE
        for member_data in data.get("members", []):
            member = self._bind_member(member_data, symbol, member_scope, default_access)
            symbol.members.append(member)

    def _bind_attributes(self, raw_attributes: list[Any], scope: LookupScope) -> list[AttributeData]:
        bound: list[AttributeData] = []
        for raw in raw_attributes:
            syntax = _attribute_syntax(raw)
            names = [syntax.name] if syntax.name.endswith("Attribute") else [syntax.name, f"{syntax.name}Attribute"]
            attribute_class = None
            for name in names:
                resolved = self._compilation.resolve_type(name, scope)
                if isinstance(resolved, NamedTypeSymbol):
                    attribute_class = resolved
                    break
            bound.append(
                AttributeData(
                    attribute_class=attribute_class,
                    attribute_constructor=attribute_constructor(attribute_class) if attribute_class else None,
                    arguments=syntax.arguments,
                )
            )
        return bound

    def _bind_member(
        self,
        data: dict[str, Any],
        containing: NamedTypeSymbol,
        scope: LookupScope,
        default_access: Accessibility,
    ) -> Symbol:
        kind = data.get("kind")
        modifiers = _modifiers(data)
        common = {
            "declared_accessibility": _accessibility(modifiers, default_access),
            "is_static": "static" in modifiers or "const" in modifiers,
            "attributes": self._bind_attributes(data.get("attributes", []), scope),
            "containing_type": containing,
        }
        context = f"{containing.to_display_string()}.{data.get('name', kind)}"

        if kind == "field":
            return FieldSymbol(
                name=self._member_name(data, containing),
                type=self._resolve(data.get("type", ""), scope, context),
                is_const="const" in modifiers,
                is_readonly="readonly" in modifiers,
                **common,
            )
        if kind == "property":
            return PropertySymbol(
                name=self._member_name(data, containing),
                type=self._resolve(data.get("type", ""), scope, context),
                has_getter=data.get("get", True),
                has_setter=data.get("set", False),
                **common,
            )
        if kind in ("constructor", "method"):
            if kind == "constructor":
                method_kind = MethodKind.STATIC_CONSTRUCTOR if common["is_static"] else MethodKind.CONSTRUCTOR
                name = ".cctor" if common["is_static"] else ".ctor"
            else:
                method_kind = MethodKind.ORDINARY
                name = self._member_name(data, containing)
            method = MethodSymbol(name=name, method_kind=method_kind, **common)
            for ordinal, parameter in enumerate(data.get("parameters", [])):
                method.parameters.append(
                    ParameterSymbol(
                        name=parameter.get("name", f"arg{ordinal}"),
                        type=self._resolve(parameter.get("type", ""), scope, f"{context} parameter {ordinal}"),
                        ordinal=ordinal,
                        is_optional=bool(parameter.get("optional", "default" in parameter)),
                        containing_type=containing,
                    )
                )
            return method
        raise CompilationLoadError(f"Unknown member kind '{kind}' in {containing.to_display_string()}")

    def _member_name(self, data: dict[str, Any], containing: NamedTypeSymbol) -> str:
        if not data.get("name"):
            raise CompilationLoadError(f"Member of {containing.to_display_string()} is missing 'name'")
        return data["name"]


def load_compilation(document: dict[str, Any]) -> Compilation:
    """Convenience function to build a compilation from a parsed document."""
    return CompilationLoader().load(document)


def load_compilation_file(path: str | Path) -> Compilation:
    """Convenience function to build a compilation from a JSON file."""
    return CompilationLoader().load_file(path)
