"""
Base class for AST-based source synthesis backends.

Defines the interface that a language-specific backend must implement to
turn a generation context into a named source fragment.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from ...compilation.symbols import SpecialType
from ..analyzer.context import SmartEnumGenerationContext
from ..config import GeneratorConfig


@dataclass(frozen=True)
class GeneratedSource:
    """A synthesized fragment: unique hint name plus full source text."""

    hint_name: str
    source_text: str


class AstBackend(ABC):
    """Abstract base class for AST-based source synthesis backends."""

    # Type mapping from built-in types to language keywords
    TYPE_MAP: dict[SpecialType, str] = {}

    def __init__(self, config: GeneratorConfig):
        """
        Initialize the backend.

        Args:
            config: Generator configuration
        """
        self.config = config

    @abstractmethod
    def emit(self, context: SmartEnumGenerationContext) -> GeneratedSource | None:
        """
        Synthesize the fragment of one declaration.

        Args:
            context: Generation context of the declaration

        Returns:
            The generated source, or None if nothing should be generated
        """

    @abstractmethod
    def hint_name(self, context: SmartEnumGenerationContext) -> str:
        """
        Compute the unique output name of a declaration's fragment.

        Args:
            context: Generation context of the declaration

        Returns:
            Hint name, unique across declarations of a compilation
        """

    def translate_type(self, special_type: SpecialType) -> str | None:
        """Translate a built-in type to its language keyword, or None if unsupported."""
        return self.TYPE_MAP.get(special_type)
