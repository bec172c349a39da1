"""
Well-known type identities.

Resolved once per compilation before any declaration is analyzed and
passed explicitly to every stage that needs them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..compilation.compilation import Compilation
from ..compilation.symbols import NamedTypeSymbol, SpecialType
from .config import WellKnownTypeNames

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WellKnownTypes:
    """Symbols every pass compares against; immutable once resolved."""

    object_type: NamedTypeSymbol
    int32_type: NamedTypeSymbol
    string_type: NamedTypeSymbol
    smart_enum_attribute: NamedTypeSymbol
    enum_member_attribute: NamedTypeSymbol
    smart_enum: NamedTypeSymbol
    smart_flag_enum: NamedTypeSymbol


def resolve_well_known_types(compilation: Compilation, type_names: WellKnownTypeNames) -> WellKnownTypes | None:
    """
    Resolve the built-in and marker types of a compilation.

    Args:
        compilation: The compilation being generated for
        type_names: Metadata names of the marker and base types

    Returns:
        WellKnownTypes, or None if any of them is missing (the project does
        not reference the enumeration package, or built-in types are unavailable)
    """
    resolved = {
        "object_type": compilation.get_special_type(SpecialType.SYSTEM_OBJECT),
        "int32_type": compilation.get_special_type(SpecialType.SYSTEM_INT32),
        "string_type": compilation.get_special_type(SpecialType.SYSTEM_STRING),
        "smart_enum_attribute": compilation.get_type_by_metadata_name(type_names.smart_enum_attribute),
        "enum_member_attribute": compilation.get_type_by_metadata_name(type_names.enum_member_attribute),
        "smart_enum": compilation.get_type_by_metadata_name(type_names.smart_enum),
        "smart_flag_enum": compilation.get_type_by_metadata_name(type_names.smart_flag_enum),
    }
    missing = [name for name, symbol in resolved.items() if symbol is None]
    if missing:
        logger.debug("Skipping generation for %s: unresolved %s", compilation.assembly_name, ", ".join(missing))
        return None
    return WellKnownTypes(**resolved)
