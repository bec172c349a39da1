"""
Parser for C# type references written as text.

Handles the subset the front-end model needs: predefined keywords
(``int``, ``string``...), dotted names and generic argument lists,
e.g. ``Ardalis.SmartEnum.SmartEnum<TestEnum, long>``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from .symbols import SpecialType

# C# keywords that alias a predefined type
KEYWORD_TYPES: dict[str, SpecialType] = {
    "object": SpecialType.SYSTEM_OBJECT,
    "bool": SpecialType.SYSTEM_BOOLEAN,
    "char": SpecialType.SYSTEM_CHAR,
    "sbyte": SpecialType.SYSTEM_SBYTE,
    "byte": SpecialType.SYSTEM_BYTE,
    "short": SpecialType.SYSTEM_INT16,
    "ushort": SpecialType.SYSTEM_UINT16,
    "int": SpecialType.SYSTEM_INT32,
    "uint": SpecialType.SYSTEM_UINT32,
    "long": SpecialType.SYSTEM_INT64,
    "ulong": SpecialType.SYSTEM_UINT64,
    "decimal": SpecialType.SYSTEM_DECIMAL,
    "float": SpecialType.SYSTEM_SINGLE,
    "double": SpecialType.SYSTEM_DOUBLE,
    "string": SpecialType.SYSTEM_STRING,
}

_TOKEN_PATTERN = re.compile(r"\s*(?:(?P<ident>@?[A-Za-z_][A-Za-z0-9_]*)|(?P<punct>[<>,.]))")


class TypeNameError(ValueError):
    """Raised when a type reference cannot be parsed."""


@dataclass(frozen=True)
class NamePart:
    """One dotted segment of a type name, with its generic arguments."""

    identifier: str = ""
    type_arguments: tuple[TypeName, ...] = ()

    @property
    def metadata_name(self) -> str:
        if self.type_arguments:
            return f"{self.identifier}`{len(self.type_arguments)}"
        return self.identifier


@dataclass(frozen=True)
class TypeName:
    """A parsed type reference: either a predefined keyword or a dotted name."""

    parts: tuple[NamePart, ...] = ()
    keyword: str | None = None

    def __str__(self) -> str:
        if self.keyword:
            return self.keyword
        rendered = []
        for part in self.parts:
            if part.type_arguments:
                args = ", ".join(str(arg) for arg in part.type_arguments)
                rendered.append(f"{part.identifier}<{args}>")
            else:
                rendered.append(part.identifier)
        return ".".join(rendered)


def _tokenize(text: str) -> list[str]:
    tokens: list[str] = []
    position = 0
    stripped = text.rstrip()
    while position < len(stripped):
        match = _TOKEN_PATTERN.match(stripped, position)
        if not match:
            raise TypeNameError(f"Unexpected character in type name {text!r} at position {position}")
        tokens.append(match.group("ident") or match.group("punct"))
        position = match.end()
    return tokens


class _Parser:
    def __init__(self, text: str):
        self.text = text
        self.tokens = _tokenize(text)
        self.position = 0

    def _peek(self) -> str | None:
        return self.tokens[self.position] if self.position < len(self.tokens) else None

    def _next(self) -> str:
        token = self._peek()
        if token is None:
            raise TypeNameError(f"Unexpected end of type name {self.text!r}")
        self.position += 1
        return token

    def _expect_identifier(self) -> str:
        token = self._next()
        if token in "<>,.":
            raise TypeNameError(f"Expected identifier in {self.text!r}, got {token!r}")
        return token.lstrip("@")

    def parse(self) -> TypeName:
        result = self._parse_type()
        if self._peek() is not None:
            raise TypeNameError(f"Unexpected {self._peek()!r} in type name {self.text!r}")
        return result

    def _parse_type(self) -> TypeName:
        first = self._expect_identifier()
        if first in KEYWORD_TYPES and self._peek() not in ("<", "."):
            return TypeName(keyword=first)

        parts = [self._parse_part(first)]
        while self._peek() == ".":
            self._next()
            parts.append(self._parse_part(self._expect_identifier()))
        return TypeName(parts=tuple(parts))

    def _parse_part(self, identifier: str) -> NamePart:
        if self._peek() != "<":
            return NamePart(identifier=identifier)
        self._next()
        arguments = [self._parse_type()]
        while self._peek() == ",":
            self._next()
            arguments.append(self._parse_type())
        if self._next() != ">":
            raise TypeNameError(f"Unclosed generic argument list in {self.text!r}")
        return NamePart(identifier=identifier, type_arguments=tuple(arguments))


def parse_type_name(text: str) -> TypeName:
    """
    Parse a C# type reference.

    Args:
        text: Type reference such as ``"int"`` or ``"Foo.Bar<Baz, long>"``

    Returns:
        Parsed TypeName

    Raises:
        TypeNameError: If the text is not a supported type reference
    """
    if not text or not text.strip():
        raise TypeNameError("Empty type name")
    return _Parser(text).parse()
