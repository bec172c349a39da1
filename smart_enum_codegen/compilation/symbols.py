"""
Symbol model of a compilation.

These classes mirror the read-only semantic view a C# front-end hands to the
generator: named types with their inheritance, members, constructors and
attributes. Symbols are borrowed for the duration of one generation pass and
are never stored in derived models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class SpecialType(str, Enum):
    """Built-in types the generator needs to recognize."""

    NONE = "None"
    SYSTEM_OBJECT = "System.Object"
    SYSTEM_BOOLEAN = "System.Boolean"
    SYSTEM_CHAR = "System.Char"
    SYSTEM_SBYTE = "System.SByte"
    SYSTEM_BYTE = "System.Byte"
    SYSTEM_INT16 = "System.Int16"
    SYSTEM_UINT16 = "System.UInt16"
    SYSTEM_INT32 = "System.Int32"
    SYSTEM_UINT32 = "System.UInt32"
    SYSTEM_INT64 = "System.Int64"
    SYSTEM_UINT64 = "System.UInt64"
    SYSTEM_DECIMAL = "System.Decimal"
    SYSTEM_SINGLE = "System.Single"
    SYSTEM_DOUBLE = "System.Double"
    SYSTEM_STRING = "System.String"


class TypeKind(str, Enum):
    """Kind of a named type."""

    CLASS = "class"
    STRUCT = "struct"
    INTERFACE = "interface"
    ENUM = "enum"
    TYPE_PARAMETER = "type_parameter"


class Accessibility(str, Enum):
    """Declared accessibility of a symbol."""

    NOT_APPLICABLE = "not_applicable"
    PRIVATE = "private"
    PROTECTED_AND_INTERNAL = "private protected"
    PROTECTED = "protected"
    INTERNAL = "internal"
    PROTECTED_OR_INTERNAL = "protected internal"
    PUBLIC = "public"


class MethodKind(str, Enum):
    """Kind of a method symbol."""

    CONSTRUCTOR = "constructor"
    STATIC_CONSTRUCTOR = "static_constructor"
    ORDINARY = "ordinary"


@dataclass(eq=False)
class Symbol:
    """Base class for all symbols."""

    name: str = ""
    declared_accessibility: Accessibility = Accessibility.PRIVATE
    is_static: bool = False
    attributes: list[AttributeData] = field(default_factory=list)
    containing_type: NamedTypeSymbol | None = None

    def get_attributes(self) -> list[AttributeData]:
        return list(self.attributes)


@dataclass(eq=False)
class NamespaceSymbol:
    """A namespace; the global namespace has an empty name."""

    name: str = ""
    containing_namespace: NamespaceSymbol | None = None

    @property
    def is_global_namespace(self) -> bool:
        return self.containing_namespace is None

    def to_display_string(self) -> str:
        if self.is_global_namespace:
            return "<global namespace>"
        parts: list[str] = []
        current: NamespaceSymbol | None = self
        while current is not None and not current.is_global_namespace:
            parts.append(current.name)
            current = current.containing_namespace
        return ".".join(reversed(parts))


@dataclass(eq=False)
class TypeParameterSymbol(Symbol):
    """A generic type parameter, identified by its declaring type and ordinal."""

    ordinal: int = 0

    @property
    def type_kind(self) -> TypeKind:
        return TypeKind.TYPE_PARAMETER

    @property
    def special_type(self) -> SpecialType:
        return SpecialType.NONE

    def to_display_string(self) -> str:
        return self.name


@dataclass(eq=False)
class NamedTypeSymbol(Symbol):
    """A class, struct or interface, either a definition or a constructed generic."""

    containing_namespace: NamespaceSymbol = field(default_factory=NamespaceSymbol)
    type_kind: TypeKind = TypeKind.CLASS
    special_type: SpecialType = SpecialType.NONE

    is_record: bool = False
    is_sealed: bool = False
    is_abstract: bool = False
    is_readonly: bool = False

    type_parameters: list[TypeParameterSymbol] = field(default_factory=list)

    # Set only on constructed generics
    type_arguments: list[TypeSymbol] = field(default_factory=list)
    definition: NamedTypeSymbol | None = None

    declared_base_type: NamedTypeSymbol | None = None
    declared_interfaces: list[NamedTypeSymbol] = field(default_factory=list)

    # Fields, properties and methods in declaration order
    members: list[Symbol] = field(default_factory=list)
    type_members: list[NamedTypeSymbol] = field(default_factory=list)

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, NamedTypeSymbol):
            return NotImplemented
        if self.definition is None or other.definition is None:
            return False
        return self.definition is other.definition and self.type_arguments == other.type_arguments

    def __hash__(self) -> int:
        if self.definition is None:
            return id(self)
        return hash((id(self.definition), tuple(self.type_arguments)))

    def __repr__(self) -> str:
        return f"NamedTypeSymbol({self.to_display_string()})"

    @property
    def original_definition(self) -> NamedTypeSymbol:
        return self.definition if self.definition is not None else self

    @property
    def arity(self) -> int:
        return len(self.original_definition.type_parameters)

    @property
    def metadata_name(self) -> str:
        if self.arity:
            return f"{self.name}`{self.arity}"
        return self.name

    @property
    def full_metadata_name(self) -> str:
        """Name accepted by ``Compilation.get_type_by_metadata_name`` (nested types joined by '+')."""
        if self.containing_type is not None:
            return f"{self.containing_type.original_definition.full_metadata_name}+{self.metadata_name}"
        if self.containing_namespace.is_global_namespace:
            return self.metadata_name
        return f"{self.containing_namespace.to_display_string()}.{self.metadata_name}"

    def construct(self, *type_arguments: TypeSymbol) -> NamedTypeSymbol:
        """Construct a generic instantiation of this definition."""
        definition = self.original_definition
        if len(type_arguments) != len(definition.type_parameters):
            raise ValueError(f"{definition.to_display_string()} expects {len(definition.type_parameters)} type arguments, got {len(type_arguments)}")
        return NamedTypeSymbol(
            name=definition.name,
            declared_accessibility=definition.declared_accessibility,
            is_static=definition.is_static,
            attributes=definition.attributes,
            containing_type=definition.containing_type,
            containing_namespace=definition.containing_namespace,
            type_kind=definition.type_kind,
            special_type=definition.special_type,
            is_record=definition.is_record,
            is_sealed=definition.is_sealed,
            is_abstract=definition.is_abstract,
            is_readonly=definition.is_readonly,
            type_parameters=definition.type_parameters,
            type_arguments=list(type_arguments),
            definition=definition,
            members=definition.members,
            type_members=definition.type_members,
        )

    def _substitution(self) -> dict[TypeParameterSymbol, TypeSymbol]:
        if self.definition is None:
            return {}
        return dict(zip(self.definition.type_parameters, self.type_arguments))

    @property
    def base_type(self) -> NamedTypeSymbol | None:
        declared = self.original_definition.declared_base_type
        if declared is None:
            return None
        return substitute(declared, self._substitution())

    @property
    def interfaces(self) -> list[NamedTypeSymbol]:
        mapping = self._substitution()
        return [substitute(iface, mapping) for iface in self.original_definition.declared_interfaces]

    @property
    def all_interfaces(self) -> list[NamedTypeSymbol]:
        """Every interface implemented by this type, its bases and inherited interfaces."""
        result: list[NamedTypeSymbol] = []

        def visit(iface: NamedTypeSymbol) -> None:
            if iface in result:
                return
            result.append(iface)
            for inherited in iface.interfaces:
                visit(inherited)

        current: NamedTypeSymbol | None = self
        while current is not None:
            for iface in current.interfaces:
                visit(iface)
            current = current.base_type
        return result

    @property
    def constructors(self) -> list[MethodSymbol]:
        return [
            member
            for member in self.members
            if isinstance(member, MethodSymbol) and member.method_kind in (MethodKind.CONSTRUCTOR, MethodKind.STATIC_CONSTRUCTOR)
        ]

    @property
    def instance_constructors(self) -> list[MethodSymbol]:
        return [ctor for ctor in self.constructors if ctor.method_kind == MethodKind.CONSTRUCTOR]

    def get_members(self, name: str | None = None) -> list[Symbol]:
        if name is None:
            return list(self.members)
        return [member for member in self.members if member.name == name]

    def get_type_member(self, metadata_name: str) -> NamedTypeSymbol | None:
        for nested in self.original_definition.type_members:
            if nested.metadata_name == metadata_name:
                return nested
        return None

    def to_display_string(self) -> str:
        if self.containing_type is not None:
            prefix = self.containing_type.to_display_string() + "."
        elif self.containing_namespace.is_global_namespace:
            prefix = ""
        else:
            prefix = self.containing_namespace.to_display_string() + "."

        if self.type_arguments:
            args = ", ".join(arg.to_display_string() for arg in self.type_arguments)
            return f"{prefix}{self.name}<{args}>"
        if self.type_parameters:
            args = ", ".join(param.name for param in self.type_parameters)
            return f"{prefix}{self.name}<{args}>"
        return f"{prefix}{self.name}"


TypeSymbol = NamedTypeSymbol | TypeParameterSymbol


def substitute(type_symbol: TypeSymbol, mapping: dict[TypeParameterSymbol, TypeSymbol]) -> TypeSymbol:
    """Replace type parameters in ``type_symbol`` according to ``mapping``."""
    if not mapping:
        return type_symbol
    if isinstance(type_symbol, TypeParameterSymbol):
        return mapping.get(type_symbol, type_symbol)
    if type_symbol.type_arguments:
        return type_symbol.original_definition.construct(*(substitute(arg, mapping) for arg in type_symbol.type_arguments))
    return type_symbol


@dataclass(eq=False)
class FieldSymbol(Symbol):
    type: TypeSymbol | None = None
    is_const: bool = False
    is_readonly: bool = False


@dataclass(eq=False)
class PropertySymbol(Symbol):
    type: TypeSymbol | None = None
    has_getter: bool = True
    has_setter: bool = False


@dataclass(eq=False)
class ParameterSymbol(Symbol):
    type: TypeSymbol | None = None
    ordinal: int = 0
    is_optional: bool = False


@dataclass(eq=False)
class MethodSymbol(Symbol):
    method_kind: MethodKind = MethodKind.ORDINARY
    parameters: list[ParameterSymbol] = field(default_factory=list)


@dataclass(eq=False)
class AttributeData:
    """An attribute application bound to its attribute class (``None`` if binding failed)."""

    attribute_class: NamedTypeSymbol | None = None
    attribute_constructor: MethodSymbol | None = None
    arguments: tuple[str, ...] = ()
