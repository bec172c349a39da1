"""
C# AST Serializer.

Converts C# AST nodes to deterministic C# source code.
Follows C# style guidelines:
- Braces on new lines (Allman style)
- 4-space indentation
- Blank line between members
- Expression-bodied members on a single line
"""

from __future__ import annotations

from .csharp_ast_nodes import (
    CSharpConstructor,
    CSharpField,
    CSharpFile,
    CSharpMethod,
    CSharpNode,
    CSharpParameter,
    CSharpTypeDeclaration,
    UsingDirective,
)


class CSharpSerializer:
    """Serializes C# AST nodes to source code."""

    INDENT = "    "  # 4 spaces

    def serialize(self, file: CSharpFile) -> str:
        """Serialize a complete C# file to source code."""
        lines: list[str] = []

        # Generation comment
        if file.generation_comment:
            lines.extend(file.generation_comment.splitlines())

        # Using directives
        for using in file.using_directives:
            lines.append(self._serialize_using(using))

        if file.using_directives:
            lines.append("")

        # Namespace wrapping
        if file.namespace:
            lines.append(f"namespace {file.namespace}")
            lines.append("{")
            indent_level = 1
        else:
            indent_level = 0

        for i, type_declaration in enumerate(file.types):
            if i > 0:
                lines.append("")
            lines.extend(self._indent_lines(self._serialize_type(type_declaration), indent_level))

        # Close namespace
        if file.namespace:
            lines.append("}")

        return "\n".join(lines) + "\n"

    def _indent_lines(self, lines: list[str], level: int) -> list[str]:
        """Add indentation to a list of lines."""
        if level == 0:
            return lines
        prefix = self.INDENT * level
        return [prefix + line if line.strip() else line for line in lines]

    def _serialize_using(self, using: UsingDirective) -> str:
        """Serialize a using directive."""
        return f"using {using.namespace};"

    def _serialize_parameters(self, parameters: list[CSharpParameter]) -> str:
        return ", ".join(f"{p.type_name} {p.name}" for p in parameters)

    def _serialize_type(self, declaration: CSharpTypeDeclaration) -> list[str]:
        """Serialize a type declaration and its members."""
        lines: list[str] = []

        keywords = []
        if declaration.access is not None:
            keywords.append(declaration.access.value)
        keywords.extend(m.value for m in declaration.modifiers)
        keywords.append(declaration.kind.value)

        header = f"{' '.join(keywords)} {declaration.name}"
        if declaration.type_parameters:
            header += f"<{', '.join(declaration.type_parameters)}>"
        if declaration.base_types:
            header += f" : {', '.join(declaration.base_types)}"

        lines.append(header)
        lines.append("{")

        for i, member in enumerate(declaration.members):
            if i > 0:
                lines.append("")
            lines.extend(self._indent_lines(self._serialize_member(member), 1))

        lines.append("}")
        return lines

    def _serialize_member(self, member: CSharpNode) -> list[str]:
        if isinstance(member, CSharpField):
            return self._serialize_field(member)
        if isinstance(member, CSharpConstructor):
            return self._serialize_constructor(member)
        if isinstance(member, CSharpMethod):
            return self._serialize_method(member)
        if isinstance(member, CSharpTypeDeclaration):
            return self._serialize_type(member)
        raise TypeError(f"Cannot serialize member node {type(member).__name__}")

    def _serialize_field(self, field: CSharpField) -> list[str]:
        """Serialize a field declaration."""
        modifiers = " ".join(m.value for m in field.modifiers)
        if modifiers:
            modifiers = f" {modifiers}"
        return [f"{field.access.value}{modifiers} {field.type_name} {field.name};"]

    def _serialize_constructor(self, constructor: CSharpConstructor) -> list[str]:
        """Serialize an instance or static constructor."""
        lines: list[str] = []

        keywords = []
        if constructor.access is not None and not constructor.is_static:
            keywords.append(constructor.access.value)
        if constructor.is_static:
            keywords.append("static")

        declaration = f"{' '.join(keywords)} {constructor.class_name}({self._serialize_parameters(constructor.parameters)})"

        # Base call
        if constructor.base_call_args:
            declaration += f" : base({', '.join(constructor.base_call_args)})"

        lines.append(declaration)
        lines.append("{")
        for stmt in constructor.body:
            lines.append(f"{self.INDENT}{stmt}")
        lines.append("}")

        return lines

    def _serialize_method(self, method: CSharpMethod) -> list[str]:
        """Serialize an expression-bodied method."""
        modifiers = " ".join(m.value for m in method.modifiers)
        if modifiers:
            modifiers = f" {modifiers}"

        params = self._serialize_parameters(method.parameters)
        return [f"{method.access.value}{modifiers} {method.return_type} {method.name}({params}) => {method.expression_body};"]
