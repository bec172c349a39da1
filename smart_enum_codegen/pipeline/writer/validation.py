"""
Syntactic validation of synthesized C# fragments.

Uses tree-sitter and tree-sitter-c-sharp to parse each fragment before
it is written, so a malformed fragment never reaches the output directory.
"""

from __future__ import annotations

from typing import Any

import tree_sitter_c_sharp as ts_csharp
from tree_sitter import Language, Parser

TYPE_DECLARATION_NODES = {
    "class_declaration",
    "struct_declaration",
    "record_declaration",
    "record_struct_declaration",
    "interface_declaration",
}


class FragmentValidationError(Exception):
    """Raised when a synthesized fragment is not valid C#.

    This can happen when:
    - The fragment has a syntax error
    - The fragment declares no type
    - The expected type declaration is missing from the fragment
    """

    pass


class FragmentValidator:
    """Parses C# fragments with tree-sitter and checks their structure."""

    def __init__(self):
        self._parser = Parser(Language(ts_csharp.language()))

    def parse(self, code: str) -> Any:
        """Parse C# source code into a tree-sitter tree.

        Args:
            code: C# source code string

        Returns:
            tree-sitter Tree object

        Raises:
            FragmentValidationError: If the code cannot be parsed
        """
        tree = self._parser.parse(bytes(code, "utf8"))

        if tree.root_node.has_error:
            errors = self._find_errors(tree.root_node)
            if errors:
                first_error = errors[0]
                near = first_error.text.decode("utf8")[:50] if first_error.text else first_error.type
                raise FragmentValidationError(f"Failed to parse C# code at line {first_error.start_point[0] + 1}: syntax error near '{near}'")
            raise FragmentValidationError("Failed to parse C# code")

        return tree

    def validate(self, code: str, type_name: str | None = None) -> None:
        """Validate that a fragment is syntactically correct C#.

        Args:
            code: The fragment to validate
            type_name: Name of a type the fragment must declare

        Raises:
            FragmentValidationError: If validation fails
        """
        tree = self.parse(code)

        declared = self.declared_type_names(tree.root_node, code)
        if not declared:
            raise FragmentValidationError("Generated C# code has no type definitions")
        if type_name is not None and type_name not in declared:
            raise FragmentValidationError(f"Generated C# code does not declare {type_name}")

    def declared_type_names(self, root: Any, code: str) -> list[str]:
        """Names of every type declared in the tree, in document order."""
        names: list[str] = []
        for node in self._find_nodes(root, TYPE_DECLARATION_NODES):
            name_node = node.child_by_field_name("name")
            if name_node is not None:
                names.append(self._get_node_text(name_node, code))
        return names

    def _find_errors(self, node: Any) -> list[Any]:
        """Find all ERROR and missing nodes in the tree."""
        errors = []
        if node.type == "ERROR" or node.is_missing:
            errors.append(node)
        for child in node.children:
            errors.extend(self._find_errors(child))
        return errors

    def _find_nodes(self, node: Any, node_types: set[str]) -> list[Any]:
        """Find all nodes of the given types in the tree."""
        results = []
        if node.type in node_types:
            results.append(node)
        for child in node.children:
            results.extend(self._find_nodes(child, node_types))
        return results

    def _get_node_text(self, node: Any, code: str) -> str:
        """Get the source text for a node."""
        return code.encode("utf8")[node.start_byte : node.end_byte].decode("utf8")
