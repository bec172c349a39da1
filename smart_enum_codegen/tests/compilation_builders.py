"""
Builders for compilation documents used across the tests.
"""

from __future__ import annotations

from typing import Any


def enum_field(name: str, type_name: str = "TestEnum", modifiers=("public", "static", "readonly"), attributes=("EnumMember",)) -> dict[str, Any]:
    return {"kind": "field", "name": name, "type": type_name, "modifiers": list(modifiers), "attributes": list(attributes)}


def enum_property(name: str, type_name: str = "TestEnum", modifiers=("public", "static"), attributes=("EnumMember",)) -> dict[str, Any]:
    return {"kind": "property", "name": name, "type": type_name, "modifiers": list(modifiers), "attributes": list(attributes)}


def constructor(*parameters: dict[str, Any], modifiers=("private",)) -> dict[str, Any]:
    return {"kind": "constructor", "modifiers": list(modifiers), "parameters": list(parameters)}


def enum_type(
    name: str = "TestEnum",
    members=("One", "Two", "Three"),
    base: str | None = None,
    modifiers=("public", "partial"),
    attributes=("SmartEnum",),
    extra_members=(),
    **extra: Any,
) -> dict[str, Any]:
    data: dict[str, Any] = {
        "name": name,
        "modifiers": list(modifiers),
        "attributes": list(attributes),
        "members": [enum_field(member, name) for member in members] + list(extra_members),
    }
    if base is not None:
        data["base"] = base
    data.update(extra)
    return data


def syntax_tree(*types: dict[str, Any], path: str = "TestEnum.cs", namespace: str | None = None, usings=("Ardalis.SmartEnum",)) -> dict[str, Any]:
    tree: dict[str, Any] = {"path": path, "usings": list(usings), "types": list(types)}
    if namespace is not None:
        tree["namespace"] = namespace
    return tree


def document(*trees: dict[str, Any], references=("Ardalis.SmartEnum",), **extra: Any) -> dict[str, Any]:
    data: dict[str, Any] = {"assembly_name": "Tests", "references": list(references), "syntax_trees": list(trees)}
    data.update(extra)
    return data


def single_type_document(type_data: dict[str, Any], namespace: str | None = None) -> dict[str, Any]:
    return document(syntax_tree(type_data, namespace=namespace))
