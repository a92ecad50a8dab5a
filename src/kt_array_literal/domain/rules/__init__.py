"""Rule protocol: Checkable (visit call expressions, report problems)."""

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from kt_array_literal.domain.entities import Diagnostic
    from kt_array_literal.domain.problems import ProblemsHolder
    from kt_array_literal.domain.syntax import SyntaxNode, SyntaxTree

__all__ = ["Checkable"]


class Checkable(Protocol):
    """Visits call expressions and reports problems."""

    code: str
    description: str

    def visit_call_expression(
        self, tree: "SyntaxTree", expression: "SyntaxNode", holder: "ProblemsHolder"
    ) -> None:
        """Register at most one problem for this call expression."""
        ...

    def check(self, tree: "SyntaxTree", node: "SyntaxNode") -> list["Diagnostic"]:
        """Convenience: run the visitor on one node and return what it reported."""
        ...

