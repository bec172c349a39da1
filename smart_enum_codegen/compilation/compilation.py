"""
Compilation and semantic model.

The compilation owns every named type (from references and from source),
resolves types by metadata name and binds type references written in
source to symbols, following C# name lookup: type parameters, enclosing
types, enclosing namespaces outward, then using directives.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from .symbols import (
    MethodKind,
    MethodSymbol,
    NamedTypeSymbol,
    NamespaceSymbol,
    SpecialType,
    Symbol,
    TypeKind,
    TypeParameterSymbol,
    TypeSymbol,
)
from .syntax import AttributeSyntax, SyntaxTree, TypeDeclarationSyntax
from .type_names import KEYWORD_TYPES, NamePart, TypeName, TypeNameError, parse_type_name


@dataclass(frozen=True)
class SymbolInfo:
    """Result of binding a piece of syntax; ``symbol`` is None when binding failed."""

    symbol: Symbol | None = None
    candidate_symbols: tuple[Symbol, ...] = ()


@dataclass
class LookupScope:
    """Where a type reference appears: namespace, enclosing types and usings."""

    namespace: str | None = None

    # Enclosing types, innermost first
    containing_types: list[NamedTypeSymbol] = field(default_factory=list)

    usings: Sequence[str] = ()

    # Type parameters visible outside containing_types (a base list sees its own type's)
    extra_type_parameters: list[TypeParameterSymbol] = field(default_factory=list)


class Compilation:
    """A set of named types plus the syntax trees declaring the source ones."""

    def __init__(self, assembly_name: str = "Compilation", syntax_trees: Iterable[SyntaxTree] = ()):
        self.assembly_name = assembly_name
        self.syntax_trees: tuple[SyntaxTree, ...] = tuple(syntax_trees)
        self.global_namespace = NamespaceSymbol()
        self._namespaces: dict[str, NamespaceSymbol] = {"": self.global_namespace}
        self._types: dict[str, NamedTypeSymbol] = {}
        self._special_types: dict[SpecialType, NamedTypeSymbol] = {}
        self._type_names: frozenset[str] | None = None

    # Registration (used by the loader while building the compilation)

    def get_or_add_namespace(self, name: str | None) -> NamespaceSymbol:
        if not name:
            return self.global_namespace
        existing = self._namespaces.get(name)
        if existing is not None:
            return existing
        parent_name, _, simple_name = name.rpartition(".")
        namespace = NamespaceSymbol(name=simple_name, containing_namespace=self.get_or_add_namespace(parent_name))
        self._namespaces[name] = namespace
        return namespace

    def add_type(self, symbol: NamedTypeSymbol) -> None:
        full_name = symbol.full_metadata_name
        if full_name in self._types:
            raise ValueError(f"Type {full_name} is declared more than once")
        self._types[full_name] = symbol
        self._type_names = None
        if symbol.special_type != SpecialType.NONE:
            self._special_types[symbol.special_type] = symbol

    # Queries

    @property
    def type_names(self) -> frozenset[str]:
        """Metadata names of every declared type. Two compilations with equal sets bind names the same way."""
        if self._type_names is None:
            self._type_names = frozenset(self._types)
        return self._type_names

    def get_type_by_metadata_name(self, full_metadata_name: str) -> NamedTypeSymbol | None:
        return self._types.get(full_metadata_name)

    def get_special_type(self, special_type: SpecialType) -> NamedTypeSymbol | None:
        return self._special_types.get(special_type)

    def get_semantic_model(self, syntax_tree: SyntaxTree) -> SemanticModel:
        return SemanticModel(self, syntax_tree)

    # Binding

    def resolve_type(self, text: str, scope: LookupScope) -> TypeSymbol | None:
        """
        Bind a type reference written in source.

        Args:
            text: Type reference, e.g. ``"SmartEnum<TestEnum, int>"``
            scope: Lookup scope of the reference

        Returns:
            The bound type symbol, or None if it cannot be resolved
        """
        try:
            type_name = parse_type_name(text)
        except TypeNameError:
            return None
        return self.bind_type_name(type_name, scope)

    def bind_type_name(self, type_name: TypeName, scope: LookupScope) -> TypeSymbol | None:
        if type_name.keyword is not None:
            return self.get_special_type(KEYWORD_TYPES[type_name.keyword])

        first, rest = type_name.parts[0], type_name.parts[1:]
        current = self._bind_first_part(first, scope)
        for part in rest:
            if current is None:
                return None
            current = self._bind_qualified_part(current, part, scope)

        if isinstance(current, str):
            # The name designates a namespace, not a type
            return None
        return current

    def _construct(self, definition: NamedTypeSymbol, part: NamePart, scope: LookupScope) -> NamedTypeSymbol | None:
        if not part.type_arguments:
            return definition
        arguments = [self.bind_type_name(argument, scope) for argument in part.type_arguments]
        if any(argument is None for argument in arguments):
            return None
        return definition.construct(*arguments)

    def _bind_first_part(self, part: NamePart, scope: LookupScope) -> TypeSymbol | str | None:
        if not part.type_arguments:
            for containing in scope.containing_types:
                for parameter in containing.original_definition.type_parameters:
                    if parameter.name == part.identifier:
                        return parameter
            for parameter in scope.extra_type_parameters:
                if parameter.name == part.identifier:
                    return parameter

        for containing in scope.containing_types:
            definition = containing.original_definition
            if definition.metadata_name == part.metadata_name:
                return self._construct(definition, part, scope)
            nested = definition.get_type_member(part.metadata_name)
            if nested is not None:
                return self._construct(nested, part, scope)

        namespace = scope.namespace or ""
        while True:
            qualified = f"{namespace}.{part.metadata_name}" if namespace else part.metadata_name
            found = self._types.get(qualified)
            if found is not None:
                return self._construct(found, part, scope)
            if not part.type_arguments:
                namespace_name = f"{namespace}.{part.identifier}" if namespace else part.identifier
                if namespace_name in self._namespaces:
                    return namespace_name
            if not namespace:
                break
            namespace = namespace.rpartition(".")[0]

        for using in scope.usings:
            found = self._types.get(f"{using}.{part.metadata_name}")
            if found is not None:
                return self._construct(found, part, scope)
        return None

    def _bind_qualified_part(self, current: TypeSymbol | str, part: NamePart, scope: LookupScope) -> TypeSymbol | str | None:
        if isinstance(current, str):
            found = self._types.get(f"{current}.{part.metadata_name}")
            if found is not None:
                return self._construct(found, part, scope)
            namespace_name = f"{current}.{part.identifier}"
            if not part.type_arguments and namespace_name in self._namespaces:
                return namespace_name
            return None
        if isinstance(current, NamedTypeSymbol):
            nested = current.get_type_member(part.metadata_name)
            if nested is not None:
                return self._construct(nested, part, scope)
        return None


class SemanticModel:
    """Binds syntax from one syntax tree against its compilation."""

    def __init__(self, compilation: Compilation, syntax_tree: SyntaxTree):
        self.compilation = compilation
        self.syntax_tree = syntax_tree

    def get_declared_symbol(self, node: TypeDeclarationSyntax) -> NamedTypeSymbol | None:
        """Return the symbol declared by a type declaration node."""
        return self.compilation.get_type_by_metadata_name(node.full_metadata_name)

    def scope_for(self, node: TypeDeclarationSyntax) -> LookupScope:
        """Lookup scope for syntax attached to ``node`` (its attributes, base list...)."""
        containing: list[NamedTypeSymbol] = []
        outer_name = node.namespace or ""
        names: list[str] = []
        for type_name in node.containing_types:
            names.append(type_name)
            qualified = "+".join(names)
            symbol = self.compilation.get_type_by_metadata_name(f"{outer_name}.{qualified}" if outer_name else qualified)
            if symbol is None:
                break
            containing.insert(0, symbol)
        return LookupScope(namespace=node.namespace, containing_types=containing, usings=self.syntax_tree.usings)

    def get_symbol_info(self, attribute: AttributeSyntax, node: TypeDeclarationSyntax) -> SymbolInfo:
        """
        Bind an attribute applied to ``node`` to its attribute constructor.

        The attribute name is looked up with and without the ``Attribute``
        suffix, as C# does. Binding fails when neither form resolves to a
        class or when both forms resolve to different classes.
        """
        scope = self.scope_for(node)
        candidates: list[NamedTypeSymbol] = []
        names = [attribute.name]
        if not attribute.name.endswith("Attribute"):
            names.append(f"{attribute.name}Attribute")
        for name in names:
            resolved = self.compilation.resolve_type(name, scope)
            if isinstance(resolved, NamedTypeSymbol) and resolved.type_kind == TypeKind.CLASS and resolved not in candidates:
                candidates.append(resolved)

        if len(candidates) != 1:
            return SymbolInfo(candidate_symbols=tuple(candidates))
        return SymbolInfo(symbol=attribute_constructor(candidates[0]))


def attribute_constructor(attribute_class: NamedTypeSymbol) -> MethodSymbol:
    """The constructor an attribute application binds to (implicit if none is declared)."""
    constructors = attribute_class.instance_constructors
    if constructors:
        return constructors[0]
    return MethodSymbol(
        name=".ctor",
        containing_type=attribute_class,
        method_kind=MethodKind.CONSTRUCTOR,
        declared_accessibility=attribute_class.declared_accessibility,
    )
