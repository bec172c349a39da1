"""
C# AST node definitions.

These nodes represent the structure of the synthesized C# fragments. They
are built by the smart enum backend and then serialized to source code.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class AccessModifier(str, Enum):
    """C# access modifiers."""

    PUBLIC = "public"
    PRIVATE = "private"
    PROTECTED = "protected"
    INTERNAL = "internal"
    PROTECTED_INTERNAL = "protected internal"
    PRIVATE_PROTECTED = "private protected"


class MemberModifier(str, Enum):
    """C# member and type modifiers."""

    STATIC = "static"
    READONLY = "readonly"
    SEALED = "sealed"
    PARTIAL = "partial"


class TypeDeclarationKind(str, Enum):
    """Keyword(s) introducing a type declaration."""

    CLASS = "class"
    STRUCT = "struct"
    RECORD = "record"
    RECORD_STRUCT = "record struct"
    INTERFACE = "interface"


@dataclass
class CSharpNode:
    """Base class for all C# AST nodes."""

    pass


@dataclass
class CSharpParameter(CSharpNode):
    """Represents a method/constructor parameter."""

    name: str = ""
    type_name: str = ""


@dataclass
class CSharpField(CSharpNode):
    """Represents a field declaration."""

    name: str = ""
    type_name: str = ""
    access: AccessModifier = AccessModifier.PRIVATE
    modifiers: list[MemberModifier] = field(default_factory=list)


@dataclass
class CSharpConstructor(CSharpNode):
    """Represents an instance or static constructor."""

    class_name: str = ""
    access: AccessModifier | None = AccessModifier.PRIVATE  # None for static constructors
    is_static: bool = False
    parameters: list[CSharpParameter] = field(default_factory=list)
    base_call_args: list[str] = field(default_factory=list)
    body: list[str] = field(default_factory=list)  # Statements


@dataclass
class CSharpMethod(CSharpNode):
    """Represents a method with an expression body."""

    name: str = ""
    return_type: str = "void"
    access: AccessModifier = AccessModifier.PUBLIC
    modifiers: list[MemberModifier] = field(default_factory=list)
    parameters: list[CSharpParameter] = field(default_factory=list)
    expression_body: str = ""


CSharpMember = CSharpField | CSharpConstructor | CSharpMethod


@dataclass
class CSharpTypeDeclaration(CSharpNode):
    """Represents a class, struct or record declaration.

    ``members`` keeps emission order; a nested type appears there as a
    CSharpTypeDeclaration.
    """

    name: str = ""
    kind: TypeDeclarationKind = TypeDeclarationKind.CLASS
    access: AccessModifier | None = None
    modifiers: list[MemberModifier] = field(default_factory=list)
    type_parameters: list[str] = field(default_factory=list)
    base_types: list[str] = field(default_factory=list)
    members: list[CSharpMember | CSharpTypeDeclaration] = field(default_factory=list)


@dataclass
class UsingDirective(CSharpNode):
    """Represents a using directive."""

    namespace: str = ""


@dataclass
class CSharpFile(CSharpNode):
    """Represents a complete C# source file."""

    using_directives: list[UsingDirective] = field(default_factory=list)
    generation_comment: str = ""
    namespace: str | None = None  # Optional namespace to wrap all types
    types: list[CSharpTypeDeclaration] = field(default_factory=list)
