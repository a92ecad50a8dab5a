"""Collecting diagnostic sink, one per inspected tree."""

from kt_array_literal.domain.entities import CallContext, Diagnostic, Severity
from kt_array_literal.domain.protocols import RewriteActionProtocol
from kt_array_literal.domain.syntax import SyntaxNode, SyntaxTree


class ProblemsHolder:
    """Accumulates diagnostics registered by inspections for a single tree."""

    def __init__(self, tree: SyntaxTree, code: str, context: CallContext = CallContext.OTHER) -> None:
        self._tree = tree
        self._code = code
        self._context = context
        self._results: list[Diagnostic] = []

    @property
    def results(self) -> list[Diagnostic]:
        return list(self._results)

    def with_context(self, context: CallContext) -> "ProblemsHolder":
        """A view of this holder that stamps `context` on registered problems."""
        view = ProblemsHolder(self._tree, self._code, context)
        view._results = self._results
        return view

    def register_problem(
        self,
        anchor: SyntaxNode,
        message: str,
        severity: Severity,
        fix: RewriteActionProtocol,
    ) -> Diagnostic:
        diagnostic = Diagnostic(
            code=self._code,
            message=message,
            anchor=anchor.node_id,
            location=self._tree.location_of(anchor),
            severity=severity,
            context=self._context,
            fix=fix,
        )
        self._results.append(diagnostic)
        return diagnostic
