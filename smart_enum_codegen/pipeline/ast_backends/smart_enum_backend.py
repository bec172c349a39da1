"""
Smart enum source synthesis backend.

Turns a SmartEnumGenerationContext into a C# fragment: a backing
collection, a static constructor creating every member, an optional
forwarding constructor and an accessor, re-wrapped in the declaring
type's enclosing types and namespace.
"""

from __future__ import annotations

import logging
from pathlib import Path

import jinja2

from ... import __version__
from ...compilation.symbols import Accessibility, SpecialType, TypeKind
from ..analyzer.context import SmartEnumGenerationContext, TypeShell
from ..config import GeneratorConfig
from .base import AstBackend, GeneratedSource
from .csharp_ast_nodes import (
    AccessModifier,
    CSharpConstructor,
    CSharpField,
    CSharpFile,
    CSharpMember,
    CSharpMethod,
    CSharpParameter,
    CSharpTypeDeclaration,
    MemberModifier,
    TypeDeclarationKind,
    UsingDirective,
)
from .csharp_serializer import CSharpSerializer

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent.parent.parent.resolve().absolute() / "templates"

COLLECTIONS_NAMESPACE = "System.Collections.Generic"

_ACCESS_MODIFIERS: dict[Accessibility, AccessModifier] = {
    Accessibility.PUBLIC: AccessModifier.PUBLIC,
    Accessibility.PRIVATE: AccessModifier.PRIVATE,
    Accessibility.PROTECTED: AccessModifier.PROTECTED,
    Accessibility.INTERNAL: AccessModifier.INTERNAL,
    Accessibility.PROTECTED_OR_INTERNAL: AccessModifier.PROTECTED_INTERNAL,
    Accessibility.PROTECTED_AND_INTERNAL: AccessModifier.PRIVATE_PROTECTED,
}

# Largest literal each integral value type holds
_VALUE_LIMITS: dict[SpecialType, int] = {
    SpecialType.SYSTEM_BYTE: 2**8 - 1,
    SpecialType.SYSTEM_SBYTE: 2**7 - 1,
    SpecialType.SYSTEM_INT16: 2**15 - 1,
    SpecialType.SYSTEM_UINT16: 2**16 - 1,
    SpecialType.SYSTEM_INT32: 2**31 - 1,
    SpecialType.SYSTEM_UINT32: 2**32 - 1,
    SpecialType.SYSTEM_INT64: 2**63 - 1,
    SpecialType.SYSTEM_UINT64: 2**64 - 1,
}


def derive_member_values(context: SmartEnumGenerationContext) -> tuple[int | str, ...]:
    """
    Derive the value of every member, in declaration order.

    Text-valued enumerations use the member's own name. Flag enumerations
    use 0 for the first member and ``1 << (i - 1)`` after it. Every other
    enumeration numbers its members ``0..N-1``.

    Args:
        context: Generation context of the declaration

    Returns:
        One value per member: the member name for text values, an int otherwise
    """
    if context.is_string_valued:
        return tuple(context.enum_members)
    if context.is_flag_enum:
        return tuple(0 if i == 0 else 1 << (i - 1) for i in range(len(context.enum_members)))
    return tuple(range(len(context.enum_members)))


class SmartEnumAstBackend(AstBackend):
    """C# smart enum synthesis backend using custom AST."""

    TYPE_MAP = {
        SpecialType.SYSTEM_STRING: "string",
        SpecialType.SYSTEM_BYTE: "byte",
        SpecialType.SYSTEM_SBYTE: "sbyte",
        SpecialType.SYSTEM_INT16: "short",
        SpecialType.SYSTEM_UINT16: "ushort",
        SpecialType.SYSTEM_INT32: "int",
        SpecialType.SYSTEM_UINT32: "uint",
        SpecialType.SYSTEM_INT64: "long",
        SpecialType.SYSTEM_UINT64: "ulong",
        SpecialType.SYSTEM_DECIMAL: "decimal",
        SpecialType.SYSTEM_DOUBLE: "double",
        SpecialType.SYSTEM_SINGLE: "float",
    }

    def __init__(self, config: GeneratorConfig | None = None):
        super().__init__(config or GeneratorConfig())
        self.serializer = CSharpSerializer()
        self.jinja_env = jinja2.Environment(lstrip_blocks=True, trim_blocks=True)
        with open(TEMPLATES_DIR / "cs/header.cs.jinja2", encoding="utf-8") as f:
            self.header = self.jinja_env.from_string(f.read())

    def emit(self, context: SmartEnumGenerationContext) -> GeneratedSource | None:
        """Synthesize the fragment of one declaration, or None if it is skipped."""
        if not context.enum_members:
            logger.debug("Skipping %s: no enum members", context.name)
            return None

        if self.translate_type(context.value_type) is None:
            logger.debug("Skipping %s: unsupported value type %s", context.name, context.value_type_name)
            return None

        limit = _VALUE_LIMITS.get(context.value_type)
        values = derive_member_values(context)
        if limit is not None and values[-1] > limit:
            # Emitted as is; the host compiler reports the overflow
            logger.debug(
                "%s: value %d of member %s is out of range for %s",
                context.name,
                values[-1],
                context.enum_members[-1],
                context.value_type_name,
            )

        source_text = self.serializer.serialize(self.build_file(context))
        return GeneratedSource(hint_name=self.hint_name(context), source_text=source_text)

    def build_file(self, context: SmartEnumGenerationContext) -> CSharpFile:
        """Build the C# AST of a declaration's fragment."""
        type_names = self.config.type_names
        file = CSharpFile()

        if self.config.add_generation_comment:
            file.generation_comment = self.header.render(version=__version__, command_line=self.config.generation_command)

        file.using_directives.append(UsingDirective(namespace=COLLECTIONS_NAMESPACE))

        declaration = self._type_declaration(context.declaration, self._generate_members(context))
        if not context.inherits_from_smart_enum:
            if type_names.smart_enum_namespace:
                file.using_directives.append(UsingDirective(namespace=type_names.smart_enum_namespace))
            declaration.base_types.append(f"{type_names.smart_enum_simple_name}<{context.name}>")

        # Innermost first, so each shell wraps the previous one
        for shell in context.containing_types:
            declaration = self._type_declaration(shell, [declaration])

        file.namespace = context.namespace
        file.types.append(declaration)
        return file

    def hint_name(self, context: SmartEnumGenerationContext) -> str:
        """``<Namespace>.<Outer>_<Inner>_<Name><suffix>``, namespace and outer types omitted when absent."""
        parts: list[str] = []
        if context.namespace:
            parts.append(f"{context.namespace}.")
        for shell in reversed(context.containing_types):
            parts.append(f"{shell.name}_")
        parts.append(context.name)
        parts.append(self.config.hint_name_suffix)
        return "".join(parts)

    def _type_declaration(self, shell: TypeShell, members: list[CSharpMember | CSharpTypeDeclaration]) -> CSharpTypeDeclaration:
        """Re-declare a type as a partial shell holding ``members``."""
        if shell.is_record:
            kind = TypeDeclarationKind.RECORD_STRUCT if shell.kind == TypeKind.STRUCT else TypeDeclarationKind.RECORD
        elif shell.kind == TypeKind.STRUCT:
            kind = TypeDeclarationKind.STRUCT
        elif shell.kind == TypeKind.INTERFACE:
            kind = TypeDeclarationKind.INTERFACE
        else:
            kind = TypeDeclarationKind.CLASS

        modifiers: list[MemberModifier] = []
        if shell.is_sealed and shell.kind == TypeKind.CLASS:
            modifiers.append(MemberModifier.SEALED)
        elif shell.is_readonly and shell.kind == TypeKind.STRUCT:
            modifiers.append(MemberModifier.READONLY)
        modifiers.append(MemberModifier.PARTIAL)

        return CSharpTypeDeclaration(
            name=shell.name,
            kind=kind,
            access=_ACCESS_MODIFIERS.get(shell.accessibility),
            modifiers=modifiers,
            type_parameters=list(shell.type_parameters),
            members=members,
        )

    def _generate_members(self, context: SmartEnumGenerationContext) -> list[CSharpMember]:
        """Backing field, static constructor, optional constructor and accessor, in that order."""
        collection_type = f"IReadOnlyCollection<{context.name}>"
        field_name = self.config.all_members_field_name

        members: list[CSharpMember] = [
            CSharpField(
                name=field_name,
                type_name=collection_type,
                access=AccessModifier.PRIVATE,
                modifiers=[MemberModifier.STATIC, MemberModifier.READONLY],
            ),
            self._generate_static_constructor(context),
        ]

        if not context.has_constructor:
            members.append(
                CSharpConstructor(
                    class_name=context.name,
                    access=AccessModifier.PRIVATE,
                    parameters=[
                        CSharpParameter(name="name", type_name=self.TYPE_MAP[SpecialType.SYSTEM_STRING]),
                        CSharpParameter(name="value", type_name=self.TYPE_MAP[context.value_type]),
                    ],
                    base_call_args=["name", "value"],
                )
            )

        members.append(
            CSharpMethod(
                name=self.config.all_members_method_name,
                return_type=collection_type,
                access=AccessModifier.PUBLIC,
                modifiers=[MemberModifier.STATIC],
                expression_body=field_name,
            )
        )
        return members

    def _generate_static_constructor(self, context: SmartEnumGenerationContext) -> CSharpConstructor:
        body: list[str] = []
        for member, value in zip(context.enum_members, derive_member_values(context)):
            literal = f"nameof({value})" if context.is_string_valued else str(value)
            body.append(f"{member} = new {context.name}(nameof({member}), {literal});")

        body.append(f"{self.config.all_members_field_name} = new[] {{ {', '.join(context.enum_members)} }};")
        return CSharpConstructor(class_name=context.name, access=None, is_static=True, body=body)
