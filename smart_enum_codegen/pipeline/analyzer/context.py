"""
Generation context builder.

Derives, for one confirmed declaration, everything the source synthesizer
needs: value type, numbering scheme, constructor necessity, qualifying
members and the enclosing scopes. The result holds plain values only, so
it can be compared structurally across passes and cached.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ...compilation.symbols import (
    Accessibility,
    FieldSymbol,
    MethodSymbol,
    NamedTypeSymbol,
    PropertySymbol,
    SpecialType,
    Symbol,
    TypeKind,
    TypeSymbol,
)
from ..well_known import WellKnownTypes
from .base_resolution import find_implemented_smart_enum_type

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TypeShell:
    """What is needed to re-declare a type as an empty partial shell."""

    name: str
    kind: TypeKind = TypeKind.CLASS
    is_record: bool = False
    accessibility: Accessibility = Accessibility.INTERNAL
    is_sealed: bool = False
    is_readonly: bool = False
    type_parameters: tuple[str, ...] = ()

    @staticmethod
    def from_symbol(symbol: NamedTypeSymbol) -> TypeShell:
        return TypeShell(
            name=symbol.name,
            kind=symbol.type_kind,
            is_record=symbol.is_record,
            accessibility=symbol.declared_accessibility,
            is_sealed=symbol.is_sealed,
            is_readonly=symbol.is_readonly,
            type_parameters=tuple(param.name for param in symbol.type_parameters),
        )


@dataclass(frozen=True)
class SmartEnumGenerationContext:
    """Everything the source synthesizer needs for one declaration.

    Attributes:
        name: Simple name of the declaring type
        namespace: Containing namespace, or None for the global namespace
        declaration: Shell of the declaring type itself
        containing_types: Enclosing type shells, innermost first
        enum_members: Qualifying member names in declaration order
        inherits_from_smart_enum: Whether a smart enum base was found
        is_flag_enum: Whether the matched base is the flag variant
        value_type: Special type of the value type argument (NONE if not a built-in)
        value_type_name: Display name of the value type, for diagnostics
        has_constructor: Whether a compatible instance constructor already exists
    """

    name: str
    namespace: str | None
    declaration: TypeShell
    containing_types: tuple[TypeShell, ...] = ()
    enum_members: tuple[str, ...] = ()
    inherits_from_smart_enum: bool = False
    is_flag_enum: bool = False
    value_type: SpecialType = SpecialType.SYSTEM_INT32
    value_type_name: str = "System.Int32"
    has_constructor: bool = False

    @property
    def is_in_global_namespace(self) -> bool:
        return self.namespace is None

    @property
    def is_string_valued(self) -> bool:
        return self.value_type == SpecialType.SYSTEM_STRING


def is_constructor_available(
    symbol: NamedTypeSymbol,
    value_type: TypeSymbol,
    well_known: WellKnownTypes,
) -> bool:
    """
    Check whether the type already declares a constructor the generated code can call.

    A compatible constructor is a non-static instance constructor taking
    ``(string name, <value_type> value)`` followed only by optional
    parameters. The first compatible one is enough; several compatible
    constructors are accepted.
    """
    for constructor in symbol.instance_constructors:
        if constructor.is_static:
            continue
        parameters = constructor.parameters
        if len(parameters) < 2:
            continue
        if parameters[0].type != well_known.string_type or parameters[1].type != value_type:
            continue
        if all(parameter.is_optional for parameter in parameters[2:]):
            return True
    return False


def _is_enum_member(member: Symbol, symbol: NamedTypeSymbol, well_known: WellKnownTypes) -> bool:
    if not any(attribute.attribute_class == well_known.enum_member_attribute for attribute in member.get_attributes()):
        return False
    if isinstance(member, FieldSymbol):
        return member.is_static and not member.is_const and member.type == symbol
    if isinstance(member, PropertySymbol):
        return member.is_static and member.type == symbol
    return False


def get_all_enum_members(symbol: NamedTypeSymbol, well_known: WellKnownTypes) -> tuple[str, ...]:
    """Names of the qualifying static members, in declaration order."""
    return tuple(
        member.name
        for member in symbol.get_members()
        if not isinstance(member, MethodSymbol) and _is_enum_member(member, symbol, well_known)
    )


def get_containing_types(symbol: NamedTypeSymbol) -> tuple[TypeShell, ...]:
    """Shells of the enclosing types, innermost first."""
    shells: list[TypeShell] = []
    current = symbol.containing_type
    while current is not None:
        shells.append(TypeShell.from_symbol(current))
        current = current.containing_type
    return tuple(shells)


def build_generation_context(symbol: NamedTypeSymbol, well_known: WellKnownTypes) -> SmartEnumGenerationContext:
    """
    Build the generation context of a confirmed declaration.

    Args:
        symbol: Symbol declared by the confirmed declaration
        well_known: Resolved well-known types of the compilation

    Returns:
        An immutable SmartEnumGenerationContext

    Raises:
        ValueError: If symbol is None
    """
    if symbol is None:
        raise ValueError("symbol is required")

    match = find_implemented_smart_enum_type(symbol, well_known)
    value_type: TypeSymbol = match.value_type if match.value_type is not None else well_known.int32_type

    namespace = symbol.containing_namespace
    context = SmartEnumGenerationContext(
        name=symbol.name,
        namespace=None if namespace.is_global_namespace else namespace.to_display_string(),
        declaration=TypeShell.from_symbol(symbol),
        containing_types=get_containing_types(symbol),
        enum_members=get_all_enum_members(symbol, well_known),
        inherits_from_smart_enum=match.found,
        is_flag_enum=match.is_flag,
        value_type=value_type.special_type,
        value_type_name=value_type.to_display_string(),
        has_constructor=is_constructor_available(symbol, value_type, well_known),
    )
    logger.debug(
        "Built context for %s: %d members, base=%s, value type %s",
        symbol.to_display_string(),
        len(context.enum_members),
        match.kind.value,
        context.value_type_name,
    )
    return context
