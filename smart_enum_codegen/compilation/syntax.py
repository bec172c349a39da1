"""
Syntax node definitions.

A minimal, immutable view of the C# declarations the generator looks at
before any semantic binding happens. Nodes are frozen dataclasses so they
compare and hash structurally, which is what the incremental pipeline keys
its caches on.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class SyntaxKind(str, Enum):
    """Kind of a type declaration node."""

    CLASS_DECLARATION = "class"
    STRUCT_DECLARATION = "struct"
    INTERFACE_DECLARATION = "interface"
    RECORD_DECLARATION = "record"
    RECORD_STRUCT_DECLARATION = "record struct"


@dataclass(frozen=True)
class AttributeSyntax:
    """An attribute as written, e.g. ``[SmartEnum]`` or ``[Foo.Bar("x")]``."""

    name: str = ""
    arguments: tuple[str, ...] = ()


@dataclass(frozen=True)
class AttributeListSyntax:
    """One bracketed attribute list."""

    attributes: tuple[AttributeSyntax, ...] = ()
    target: str | None = None


@dataclass(frozen=True)
class TypeDeclarationSyntax:
    """A type declaration together with the names of its syntactic parents."""

    kind: SyntaxKind = SyntaxKind.CLASS_DECLARATION
    identifier: str = ""
    modifiers: tuple[str, ...] = ()
    attribute_lists: tuple[AttributeListSyntax, ...] = ()
    type_parameters: tuple[str, ...] = ()
    base_list: tuple[str, ...] = ()

    # Enclosing namespace (None for the global namespace)
    namespace: str | None = None

    # Metadata names of the enclosing type declarations, outermost first
    containing_types: tuple[str, ...] = ()

    file_path: str = ""

    def has_modifier(self, modifier: str) -> bool:
        return modifier in self.modifiers

    @property
    def attributes(self) -> tuple[AttributeSyntax, ...]:
        return tuple(attribute for attribute_list in self.attribute_lists for attribute in attribute_list.attributes)

    @property
    def metadata_name(self) -> str:
        if self.type_parameters:
            return f"{self.identifier}`{len(self.type_parameters)}"
        return self.identifier

    @property
    def full_metadata_name(self) -> str:
        name = "+".join((*self.containing_types, self.metadata_name))
        if self.namespace:
            return f"{self.namespace}.{name}"
        return name


@dataclass(frozen=True)
class SyntaxTree:
    """A source file: its using directives and every type declaration in document order."""

    path: str = ""
    usings: tuple[str, ...] = ()
    declarations: tuple[TypeDeclarationSyntax, ...] = ()
