"""
Writing generated fragments to disk.

Fragments are parse-checked with tree-sitter and written atomically.
"""

from __future__ import annotations

from .atomic_writer import AtomicWriter, WrittenFile, write_sources
from .validation import FragmentValidationError, FragmentValidator

__all__ = [
    "AtomicWriter",
    "WrittenFile",
    "write_sources",
    "FragmentValidationError",
    "FragmentValidator",
]
