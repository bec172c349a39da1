"""
Pipeline coordinator.

Wires the stages into one incremental pass over a compilation:

1. Filter: syntax-only candidate selection (cached by declaration node)
2. Marker: semantic confirmation of the marker attribute (cached by node, file usings
   and the set of type names the compilation declares)
3. Well-known types: resolved once per pass, a missing one abandons the pass
4. Context: generation context rebuilt for every confirmed declaration, tracked as
   reused when equal to the previous pass context
5. Emission: source synthesis (cached by generation context)

The coordinator makes no analytical decision of its own.
"""

from __future__ import annotations

import logging
from collections.abc import Hashable
from dataclasses import dataclass, field

from ..compilation.compilation import Compilation, SemanticModel
from ..compilation.syntax import TypeDeclarationSyntax
from .analyzer.context import SmartEnumGenerationContext, build_generation_context
from .ast_backends.base import AstBackend, GeneratedSource
from .ast_backends.smart_enum_backend import SmartEnumAstBackend
from .config import GeneratorConfig
from .filter import is_syntax_target_for_generation
from .incremental import CancellationToken, StageCache, StepRunReason
from .marker_resolver import get_semantic_target_for_generation
from .well_known import resolve_well_known_types

logger = logging.getLogger(__name__)

FILTER_STEP = "filter"
MARKER_STEP = "marker"
CONTEXT_STEP = "context"
EMIT_STEP = "emit"


@dataclass
class GeneratorRunResult:
    """Outcome of one generator pass.

    Attributes:
        sources: Generated fragments, in syntax tree and declaration order
        cancelled: Whether the pass stopped early on cancellation
        tracked_steps: Per stage, the inputs it saw and whether each was computed or reused
    """

    sources: list[GeneratedSource] = field(default_factory=list)
    cancelled: bool = False
    tracked_steps: dict[str, list[tuple[Hashable, StepRunReason]]] = field(default_factory=dict)

    @property
    def hint_names(self) -> list[str]:
        return [source.hint_name for source in self.sources]

    def step_reasons(self, stage: str) -> list[StepRunReason]:
        return [reason for _, reason in self.tracked_steps.get(stage, [])]

    def get_source(self, hint_name: str) -> GeneratedSource | None:
        for source in self.sources:
            if source.hint_name == hint_name:
                return source
        return None


class SmartEnumGenerator:
    """Incremental smart enum generator.

    Stage caches live on the instance: running the same generator again on
    an edited compilation reuses every stage result whose input is unchanged.
    """

    def __init__(self, config: GeneratorConfig | None = None, backend: AstBackend | None = None):
        self.config = config or GeneratorConfig()
        self.backend = backend or SmartEnumAstBackend(self.config)
        self._filter_cache: StageCache[TypeDeclarationSyntax, bool] = StageCache(FILTER_STEP)
        self._marker_cache: StageCache[Hashable, bool] = StageCache(MARKER_STEP)
        self._context_cache: StageCache[TypeDeclarationSyntax, SmartEnumGenerationContext] = StageCache(CONTEXT_STEP)
        self._emit_cache: StageCache[Hashable, GeneratedSource | None] = StageCache(EMIT_STEP)

    @property
    def _caches(self) -> list[StageCache]:
        return [self._filter_cache, self._marker_cache, self._context_cache, self._emit_cache]

    def run(self, compilation: Compilation, cancellation_token: CancellationToken | None = None) -> GeneratorRunResult:
        """
        Run one generation pass.

        Args:
            compilation: Compilation to generate sources for
            cancellation_token: Optional token checked per declaration and per attribute

        Returns:
            GeneratorRunResult with the fragments produced by this pass

        Raises:
            ValueError: If compilation is None
        """
        if compilation is None:
            raise ValueError("compilation is required")

        token = cancellation_token or CancellationToken()
        result = GeneratorRunResult()

        for cache in self._caches:
            cache.begin_pass()
        try:
            self._run_pass(compilation, token, result)
        finally:
            for cache in self._caches:
                cache.end_pass(cancelled=result.cancelled)
            result.tracked_steps = {cache.name: list(cache.steps) for cache in self._caches}

        logger.debug(
            "Pass over %s produced %d source(s)%s",
            compilation.assembly_name,
            len(result.sources),
            " (cancelled)" if result.cancelled else "",
        )
        return result

    def _run_pass(self, compilation: Compilation, token: CancellationToken, result: GeneratorRunResult) -> None:
        candidates = self._collect_candidates(compilation, token, result)
        if result.cancelled:
            return

        well_known = resolve_well_known_types(compilation, self.config.type_names)
        if well_known is None:
            return

        seen_hint_names: set[str] = set()
        for semantic_model, node in candidates:
            if token.is_cancellation_requested:
                result.cancelled = True
                return

            symbol = semantic_model.get_declared_symbol(node)
            if symbol is None:
                logger.debug("No symbol declared for %s", node.full_metadata_name)
                continue

            context = self._context_cache.record(node, build_generation_context(symbol, well_known))
            source = self._emit_cache.get_or_compute(context, lambda: self.backend.emit(context))
            if source is None:
                continue

            if source.hint_name in seen_hint_names:
                # Partial declarations of one type carrying the marker more than once
                logger.debug("Skipping duplicate source %s", source.hint_name)
                continue
            seen_hint_names.add(source.hint_name)
            result.sources.append(source)

    def _collect_candidates(
        self,
        compilation: Compilation,
        token: CancellationToken,
        result: GeneratorRunResult,
    ) -> list[tuple[SemanticModel, TypeDeclarationSyntax]]:
        """Run the filter and marker stages over every declaration of every syntax tree."""
        marker_name = self.config.type_names.smart_enum_attribute
        candidates: list[tuple[SemanticModel, TypeDeclarationSyntax]] = []

        for tree in compilation.syntax_trees:
            semantic_model = compilation.get_semantic_model(tree)
            for node in tree.declarations:
                if token.is_cancellation_requested:
                    result.cancelled = True
                    return candidates

                if not self._filter_cache.get_or_compute(node, lambda: is_syntax_target_for_generation(node)):
                    continue

                key = (node, tree.usings, compilation.type_names)
                confirmed = self._marker_cache.get_or_compute(
                    key,
                    lambda: get_semantic_target_for_generation(node, semantic_model, marker_name, token) is not None,
                )
                if token.is_cancellation_requested:
                    # The attribute scan may have stopped early
                    self._marker_cache.discard(key)
                    result.cancelled = True
                    return candidates

                if confirmed:
                    candidates.append((semantic_model, node))

        return candidates
