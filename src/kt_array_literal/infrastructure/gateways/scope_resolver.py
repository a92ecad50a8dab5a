"""File-local name resolution for call expressions."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from weakref import WeakKeyDictionary

from kt_array_literal.domain.constants import BUILTIN_FUNCTIONS, BUILTINS_PACKAGE
from kt_array_literal.domain.entities import ResolvedTarget
from kt_array_literal.domain.protocols import SemanticResolverProtocol
from kt_array_literal.domain.syntax import NodeKind, SyntaxNode, SyntaxTree

logger = logging.getLogger(__name__)

ROOT_PACKAGE = "<root>"


@dataclass(frozen=True)
class FileScope:
    """Names visible at file level: own functions, explicit imports, star imports, builtins."""

    package: str
    functions: frozenset[str] = frozenset()
    imports: dict[str, ResolvedTarget] = field(default_factory=dict)
    star_packages: frozenset[str] = frozenset()

    def lookup(self, name: str, builtin_functions: frozenset[str]) -> ResolvedTarget | None:
        if name in self.functions:
            return ResolvedTarget(declaring_scope=self.package, name=name)
        if name in self.imports:
            return self.imports[name]
        if name not in builtin_functions:
            return None
        if self.star_packages - {BUILTINS_PACKAGE}:
            # A star-imported package may declare the same name and wins over the default import.
            return None
        return ResolvedTarget(declaring_scope=BUILTINS_PACKAGE, name=name)


class FileScopeResolver(SemanticResolverProtocol):
    """
    Resolves simple-name calls against the file they appear in.

    Any function declared in the file shadows a builtin of the same name, as does
    an explicit import from another package. Star imports are not expanded, so a
    builtin name in a file with a star import from another package stays
    unresolved. Names found nowhere are unresolved.
    """

    def __init__(self, builtin_functions: frozenset[str] = BUILTIN_FUNCTIONS) -> None:
        self._builtin_functions = builtin_functions
        self._scopes: WeakKeyDictionary[SyntaxTree, tuple[int, FileScope]] = WeakKeyDictionary()

    def resolve(self, tree: SyntaxTree, call: SyntaxNode) -> ResolvedTarget | None:
        if call.kind is not NodeKind.CALL_EXPRESSION or call.callee is None:
            return None
        callee = tree.get(call.callee)
        if callee is None or callee.kind is not NodeKind.NAME_REFERENCE:
            return None
        return self.scope_for(tree).lookup(callee.name, self._builtin_functions)

    def scope_for(self, tree: SyntaxTree) -> FileScope:
        """Scope of the tree, rebuilt when the tree has been edited since the last lookup."""
        cached = self._scopes.get(tree)
        if cached is not None and cached[0] == tree.revision:
            return cached[1]
        scope = self._build_scope(tree)
        self._scopes[tree] = (tree.revision, scope)
        return scope

    def _build_scope(self, tree: SyntaxTree) -> FileScope:
        package = ROOT_PACKAGE
        functions: set[str] = set()
        imports: dict[str, ResolvedTarget] = {}
        star_packages: set[str] = set()
        for node in tree.walk():
            if node.kind is NodeKind.PACKAGE_HEADER and node.name:
                package = node.name
            elif node.kind is NodeKind.FUNCTION_DECLARATION and node.name:
                functions.add(node.name)
            elif node.kind is NodeKind.IMPORT_DIRECTIVE and node.name:
                if node.attributes.get("star") == "true":
                    star_packages.add(node.name)
                    continue
                scope, _, imported_name = node.name.rpartition(".")
                visible_name = node.attributes.get("alias") or imported_name
                imports[visible_name] = ResolvedTarget(
                    declaring_scope=scope or ROOT_PACKAGE, name=imported_name
                )
        logger.debug(
            "%s: package %s, %d function(s), %d import(s)", tree.path, package, len(functions), len(imports)
        )
        return FileScope(
            package=package,
            functions=frozenset(functions),
            imports=imports,
            star_packages=frozenset(star_packages),
        )
