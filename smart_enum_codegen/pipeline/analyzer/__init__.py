"""
Semantic analysis of confirmed smart enum declarations.
"""

from __future__ import annotations

from .base_resolution import BaseEnumKind, BaseEnumMatch, find_implemented_smart_enum_type, get_all_inherited_types
from .context import (
    SmartEnumGenerationContext,
    TypeShell,
    build_generation_context,
    get_all_enum_members,
    is_constructor_available,
)

__all__ = [
    "BaseEnumKind",
    "BaseEnumMatch",
    "find_implemented_smart_enum_type",
    "get_all_inherited_types",
    "SmartEnumGenerationContext",
    "TypeShell",
    "build_generation_context",
    "get_all_enum_members",
    "is_constructor_available",
]
