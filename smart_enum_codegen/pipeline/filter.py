"""
Declaration filter.

Stage 1 of the pipeline: a purely syntactic predicate run on every type
declaration. It never binds anything; its result only changes when the
declaration itself changes.
"""

from __future__ import annotations

from typing import Any

from ..compilation.syntax import SyntaxKind, TypeDeclarationSyntax


def is_syntax_target_for_generation(node: Any) -> bool:
    """
    Check whether a node may declare a smart enum.

    A candidate is a ``partial``, non-``abstract``, non-generic class
    declaration carrying at least one attribute list.

    Args:
        node: Any syntax node

    Returns:
        True if later stages should look at the node
    """
    return (
        isinstance(node, TypeDeclarationSyntax)
        and node.kind == SyntaxKind.CLASS_DECLARATION
        and len(node.attribute_lists) > 0
        and node.has_modifier("partial")
        and not node.has_modifier("abstract")
        and not node.type_parameters
    )
