"""
AST-based source synthesis backends.

These backends build C# fragments as AST nodes and serialize them,
instead of assembling source text by string templates.
"""

from __future__ import annotations

from .base import AstBackend, GeneratedSource
from .csharp_serializer import CSharpSerializer
from .smart_enum_backend import SmartEnumAstBackend, derive_member_values

__all__ = [
    "AstBackend",
    "GeneratedSource",
    "CSharpSerializer",
    "SmartEnumAstBackend",
    "derive_member_values",
]
