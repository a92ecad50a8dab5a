"""Replace builtin array constructor calls in annotations with array literals [...]."""

from __future__ import annotations

import logging

from kt_array_literal.domain.constants import (
    ACCEPTABLE_ARRAY_FUNCTIONS,
    BUILTINS_PACKAGE,
    FIX_FAMILY_NAME,
    INSPECTION_DESCRIPTION,
    INSPECTION_ID,
    PROBLEM_MESSAGE_TEMPLATE,
)
from kt_array_literal.domain.entities import CallContext, Diagnostic, LanguageFeature, Severity
from kt_array_literal.domain.errors import FixAlreadyAppliedError, RewriteContractError
from kt_array_literal.domain.problems import ProblemsHolder
from kt_array_literal.domain.protocols import (
    LanguageSettingsProtocol,
    SemanticResolverProtocol,
    TreeFactoryProtocol,
)
from kt_array_literal.domain.syntax import NodeId, NodeKind, SyntaxNode, SyntaxTree

logger = logging.getLogger(__name__)


def classify_context(tree: SyntaxTree, call: SyntaxNode) -> CallContext:
    """Where `call` sits: an annotation argument, an annotation class default value, or elsewhere."""
    parent = tree.parent_of(call)
    if parent is None:
        return CallContext.OTHER
    if parent.kind is NodeKind.VALUE_ARGUMENT:
        argument_list = tree.parent_of(parent)
        entry = tree.parent_of(argument_list) if argument_list is not None else None
        if entry is not None and entry.kind is NodeKind.ANNOTATION_ENTRY:
            return CallContext.ANNOTATION_ARGUMENT
        return CallContext.OTHER
    if parent.kind is NodeKind.PARAMETER:
        if parent.value != call.node_id:
            return CallContext.OTHER
        parameter_list = tree.parent_of(parent)
        constructor = tree.parent_of(parameter_list) if parameter_list is not None else None
        if constructor is None or constructor.kind is not NodeKind.PRIMARY_CONSTRUCTOR:
            return CallContext.OTHER
        containing_class = tree.parent_of(constructor)
        if (
            containing_class is not None
            and containing_class.kind is NodeKind.CLASS_DECLARATION
            and containing_class.is_annotation
        ):
            return CallContext.ANNOTATION_CONSTRUCTOR_DEFAULT_PARAMETER
    return CallContext.OTHER


def argument_expressions(tree: SyntaxTree, call: SyntaxNode) -> list[SyntaxNode]:
    """The call's argument expressions in source order, without names or spread markers."""
    expressions: list[SyntaxNode] = []
    for argument_list in tree.children_of(call):
        if argument_list.kind is not NodeKind.VALUE_ARGUMENT_LIST:
            continue
        for argument in tree.children_of(argument_list):
            if argument.kind is NodeKind.VALUE_ARGUMENT and argument.value is not None:
                expressions.append(tree.require(argument.value))
    return expressions


class ReplaceWithArrayLiteralFix:
    """
    Deferred rewrite `f(a, b)` -> `[a, b]`.

    Holds only the id of the callee it was reported on. The id is resolved
    against the tree when the fix runs; the fix runs at most once.
    """

    family_name: str = FIX_FAMILY_NAME

    def __init__(self, anchor: NodeId) -> None:
        self._anchor = anchor
        self._applied = False

    @property
    def name(self) -> str:
        return self.family_name

    @property
    def anchor(self) -> NodeId:
        return self._anchor

    @property
    def applied(self) -> bool:
        return self._applied

    def apply_fix(self, tree: SyntaxTree, factory: TreeFactoryProtocol) -> SyntaxNode:
        """Replace the call with a collection literal in place and return the literal."""
        if self._applied:
            raise FixAlreadyAppliedError(f"fix for node {self._anchor} was already applied")
        callee = tree.require(self._anchor)
        call = tree.parent_of(callee)
        if call is None or call.kind is not NodeKind.CALL_EXPRESSION or call.callee != callee.node_id:
            raise RewriteContractError(
                f"node {self._anchor} at {tree.location_of(callee)} is no longer the callee of a call"
            )
        if not tree.is_attached(call):
            raise RewriteContractError(f"call at {tree.location_of(call)} is detached from the tree")

        elements = argument_expressions(tree, call)
        literal = factory.create_collection_literal(tree, elements)
        tree.replace(call.node_id, literal.node_id)
        self._applied = True
        logger.debug("Rewrote call at %s to %s", tree.location_of(literal), tree.render(literal))
        return literal


class ReplaceArrayOfWithLiteralRule:
    """
    Report `arrayOf(...)`, `intArrayOf(...)`, `emptyArray()` and friends used where
    an array literal is legal: annotation arguments and default values of
    annotation class constructor parameters.
    """

    code: str = INSPECTION_ID
    description: str = INSPECTION_DESCRIPTION
    fix_type: str = "code"

    def __init__(
        self,
        resolver: SemanticResolverProtocol,
        language_settings: LanguageSettingsProtocol,
        force: bool = False,
        severity: Severity = Severity.GENERIC_ERROR_OR_WARNING,
    ) -> None:
        self._resolver = resolver
        self._language_settings = language_settings
        self._force = force
        self._severity = severity

    def is_enabled(self) -> bool:
        """False when the rewrite would produce code the language version cannot parse."""
        return self._force or self._language_settings.supports_feature(
            LanguageFeature.ARRAY_LITERALS_IN_ANNOTATIONS
        )

    def visit_call_expression(
        self, tree: SyntaxTree, expression: SyntaxNode, holder: ProblemsHolder
    ) -> None:
        if not self.is_enabled():
            return

        callee = tree.get(expression.callee) if expression.callee is not None else None
        if callee is None or callee.kind is not NodeKind.NAME_REFERENCE:
            return

        target = self._resolver.resolve(tree, expression)
        if target is None:
            logger.debug("Unresolved call '%s' at %s", callee.name, tree.location_of(callee))
            return
        if target.declaring_scope != BUILTINS_PACKAGE:
            logger.debug(
                "'%s' at %s resolves to %s, not builtins",
                callee.name,
                tree.location_of(callee),
                target.declaring_scope,
            )
            return
        if target.name not in ACCEPTABLE_ARRAY_FUNCTIONS:
            return

        context = classify_context(tree, expression)
        if context is CallContext.OTHER:
            return

        holder.with_context(context).register_problem(
            callee,
            PROBLEM_MESSAGE_TEMPLATE.format(name=callee.name),
            self._severity,
            ReplaceWithArrayLiteralFix(callee.node_id),
        )

    def check(self, tree: SyntaxTree, node: SyntaxNode) -> list[Diagnostic]:
        """Run the visitor on a single call expression and return what it reported."""
        if node.kind is not NodeKind.CALL_EXPRESSION:
            return []
        holder = ProblemsHolder(tree, self.code)
        self.visit_call_expression(tree, node, holder)
        return holder.results

