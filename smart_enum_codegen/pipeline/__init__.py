"""
Pipeline - incremental smart enum source generator.

Each pass over a compilation runs these stages:

1. Filter: syntax-only selection of candidate declarations
2. Marker: semantic confirmation of the marker attribute
3. Well-known types: resolved once per compilation
4. Analyzer: build an immutable generation context per declaration
5. AST Backend: build a C# AST from the context and serialize it
6. Writer: optional validation and atomic write of the fragments
"""

from __future__ import annotations

from .analyzer import SmartEnumGenerationContext, build_generation_context
from .ast_backends import GeneratedSource, SmartEnumAstBackend, derive_member_values
from .config import GeneratorConfig, OutputConfig, OutputMode, WellKnownTypeNames
from .generator import GeneratorRunResult, SmartEnumGenerator
from .incremental import CancellationToken, StepRunReason
from .well_known import WellKnownTypes, resolve_well_known_types
from .writer import AtomicWriter, FragmentValidationError, write_sources

__all__ = [
    "SmartEnumGenerator",
    "GeneratorRunResult",
    "GeneratorConfig",
    "OutputConfig",
    "OutputMode",
    "WellKnownTypeNames",
    "SmartEnumGenerationContext",
    "build_generation_context",
    "GeneratedSource",
    "SmartEnumAstBackend",
    "derive_member_values",
    "CancellationToken",
    "StepRunReason",
    "WellKnownTypes",
    "resolve_well_known_types",
    "AtomicWriter",
    "FragmentValidationError",
    "write_sources",
]
