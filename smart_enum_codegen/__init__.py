"""Smart Enum Code Generator

An incremental source generator that turns partial C# classes marked with
``[SmartEnum]`` into fully-populated smart enumerations: statically
constructed members, an "all members" accessor and, when missing, a
forwarding constructor.
"""

__version__ = "1.0.0"

from .compilation import Compilation, CompilationLoadError, load_compilation, load_compilation_file
from .pipeline import (
    AtomicWriter,
    CancellationToken,
    FragmentValidationError,
    GeneratedSource,
    GeneratorConfig,
    GeneratorRunResult,
    OutputConfig,
    OutputMode,
    SmartEnumGenerator,
    write_sources,
)

__all__ = [
    "SmartEnumGenerator",
    "GeneratorRunResult",
    "GeneratorConfig",
    "OutputConfig",
    "OutputMode",
    "GeneratedSource",
    "CancellationToken",
    "Compilation",
    "CompilationLoadError",
    "load_compilation",
    "load_compilation_file",
    "AtomicWriter",
    "FragmentValidationError",
    "write_sources",
]
