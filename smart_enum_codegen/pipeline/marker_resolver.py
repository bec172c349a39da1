"""
Marker resolver.

Stage 2 of the pipeline: confirms that a filtered declaration really
carries the smart enum marker attribute by binding each attribute and
comparing its declaring type against the configured marker name.
"""

from __future__ import annotations

import logging

from ..compilation.compilation import SemanticModel
from ..compilation.symbols import MethodSymbol
from ..compilation.syntax import TypeDeclarationSyntax
from .incremental import CancellationToken

logger = logging.getLogger(__name__)


def has_smart_enum_attribute(
    node: TypeDeclarationSyntax,
    semantic_model: SemanticModel,
    marker_name: str,
    cancellation_token: CancellationToken | None = None,
) -> bool:
    """
    Check whether a declaration carries the marker attribute.

    Attributes whose symbol cannot be bound are skipped. Scanning stops
    with False as soon as cancellation is requested.

    Args:
        node: Filtered type declaration
        semantic_model: Semantic model of the node's syntax tree
        marker_name: Fully-qualified name of the marker attribute class
        cancellation_token: Optional cancellation token

    Returns:
        True if one of the attributes binds to the marker attribute

    Raises:
        ValueError: If node is None
    """
    if node is None:
        raise ValueError("node is required")

    for attribute in node.attributes:
        if cancellation_token is not None and cancellation_token.is_cancellation_requested:
            return False

        symbol_info = semantic_model.get_symbol_info(attribute, node)
        if not isinstance(symbol_info.symbol, MethodSymbol) or symbol_info.symbol.containing_type is None:
            logger.debug("Could not bind attribute [%s] on %s", attribute.name, node.identifier)
            continue

        if symbol_info.symbol.containing_type.to_display_string() == marker_name:
            return True

    return False


def get_semantic_target_for_generation(
    node: TypeDeclarationSyntax,
    semantic_model: SemanticModel,
    marker_name: str,
    cancellation_token: CancellationToken | None = None,
) -> TypeDeclarationSyntax | None:
    """Return the node if it carries the marker attribute, else None."""
    if has_smart_enum_attribute(node, semantic_model, marker_name, cancellation_token):
        return node
    return None
