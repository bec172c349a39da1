"""
Enumeration base resolution.

Finds which smart enum base, if any, a type inherits from and which value
type that base is bound with.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ...compilation.symbols import NamedTypeSymbol, TypeSymbol
from ..well_known import WellKnownTypes


class BaseEnumKind(str, Enum):
    """Which enumeration base a declaration inherits from."""

    NONE = "none"
    PLAIN = "plain"
    FLAG = "flag"


@dataclass(frozen=True)
class BaseEnumMatch:
    """Result of base resolution.

    Attributes:
        kind: Matched base variant
        value_type: Second type argument of the matched base (None when kind is NONE)
    """

    kind: BaseEnumKind = BaseEnumKind.NONE
    value_type: TypeSymbol | None = None

    @property
    def found(self) -> bool:
        return self.kind != BaseEnumKind.NONE

    @property
    def is_flag(self) -> bool:
        return self.kind == BaseEnumKind.FLAG


NO_BASE = BaseEnumMatch()


def get_all_inherited_types(symbol: NamedTypeSymbol, well_known: WellKnownTypes) -> list[NamedTypeSymbol]:
    """
    Flatten everything a type inherits from.

    All implemented interfaces come first, then the base class chain from
    the direct base outward, stopping before ``System.Object``.
    """
    inherited = list(symbol.all_interfaces)
    current = symbol.base_type
    while current is not None and current != well_known.object_type:
        inherited.append(current)
        current = current.base_type
    return inherited


def find_implemented_smart_enum_type(symbol: NamedTypeSymbol, well_known: WellKnownTypes) -> BaseEnumMatch:
    """
    Scan the inherited types for the flag or plain enumeration base.

    The first inherited type whose original definition is one of the two
    bases wins; the flag base is tested before the plain one for each entry.

    Args:
        symbol: Declared type being analyzed
        well_known: Resolved well-known types of the compilation

    Returns:
        The matched base and its value type argument, or ``NO_BASE``
    """
    for inherited in get_all_inherited_types(symbol, well_known):
        definition = inherited.original_definition
        if definition is well_known.smart_flag_enum:
            kind = BaseEnumKind.FLAG
        elif definition is well_known.smart_enum:
            kind = BaseEnumKind.PLAIN
        else:
            continue

        value_type = inherited.type_arguments[1] if len(inherited.type_arguments) > 1 else None
        return BaseEnumMatch(kind=kind, value_type=value_type)
    return NO_BASE
