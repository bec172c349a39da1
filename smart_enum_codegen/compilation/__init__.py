"""
Compilation model.

Read-only symbols and syntax produced by a C# front-end, plus a loader that
builds them from a JSON document.
"""

from __future__ import annotations

from .compilation import Compilation, LookupScope, SemanticModel, SymbolInfo
from .loader import CompilationLoader, CompilationLoadError, load_compilation, load_compilation_file
from .symbols import (
    Accessibility,
    AttributeData,
    FieldSymbol,
    MethodKind,
    MethodSymbol,
    NamedTypeSymbol,
    NamespaceSymbol,
    ParameterSymbol,
    PropertySymbol,
    SpecialType,
    Symbol,
    TypeKind,
    TypeParameterSymbol,
)
from .syntax import AttributeListSyntax, AttributeSyntax, SyntaxKind, SyntaxTree, TypeDeclarationSyntax

__all__ = [
    "Compilation",
    "LookupScope",
    "SemanticModel",
    "SymbolInfo",
    "CompilationLoader",
    "CompilationLoadError",
    "load_compilation",
    "load_compilation_file",
    "Accessibility",
    "AttributeData",
    "FieldSymbol",
    "MethodKind",
    "MethodSymbol",
    "NamedTypeSymbol",
    "NamespaceSymbol",
    "ParameterSymbol",
    "PropertySymbol",
    "SpecialType",
    "Symbol",
    "TypeKind",
    "TypeParameterSymbol",
    "AttributeListSyntax",
    "AttributeSyntax",
    "SyntaxKind",
    "SyntaxTree",
    "TypeDeclarationSyntax",
]
