"""Use Case: Apply Fixes - run each diagnostic's rewrite once and persist the result."""

import logging

from kt_array_literal.domain.entities import Diagnostic, FixResult
from kt_array_literal.domain.errors import RewriteContractError
from kt_array_literal.domain.protocols import (
    FixerGatewayProtocol,
    TelemetryPort,
    TreeFactoryProtocol,
)
from kt_array_literal.domain.syntax import SyntaxTree
from kt_array_literal.use_cases.inspect_source import InspectProjectUseCase

logger = logging.getLogger(__name__)


class ApplyFixesUseCase:
    """Apply the fixes attached to diagnostics, strictly after the analysis pass that produced them."""

    def __init__(
        self,
        inspect_project: InspectProjectUseCase,
        factory: TreeFactoryProtocol,
        fixer_gateway: FixerGatewayProtocol,
        telemetry: TelemetryPort,
    ) -> None:
        self.inspect_project = inspect_project
        self.factory = factory
        self.fixer_gateway = fixer_gateway
        self.telemetry = telemetry

    def apply_to_tree(self, tree: SyntaxTree, diagnostics: list[Diagnostic]) -> tuple[int, int]:
        """
        Run every fix against `tree`. Returns (applied, failed).

        A contract violation fails that one fix; the remaining fixes still run.
        """
        applied = 0
        failed = 0
        for diagnostic in diagnostics:
            try:
                diagnostic.fix.apply_fix(tree, self.factory)
            except RewriteContractError as exc:
                failed += 1
                logger.error("Fix '%s' failed at %s: %s", diagnostic.fix.name, diagnostic.location, exc)
                self.telemetry.error(f"{diagnostic.location}: {exc}")
                continue
            applied += 1
        return (applied, failed)

    def execute(self, target_path: str, dry_run: bool = False) -> list[FixResult]:
        self.telemetry.step(f"Applying fixes in: {target_path}")
        results: list[FixResult] = []
        for file_path in self.inspect_project.collect_files(target_path):
            tree = self.inspect_project.parse_file(file_path)
            if tree is None:
                continue
            diagnostics = self.inspect_project.inspect_source.execute(tree)
            if not diagnostics:
                continue
            applied, failed = self.apply_to_tree(tree, diagnostics)
            text = tree.render()
            changed = False
            if applied and not dry_run:
                changed = self.fixer_gateway.apply_fixes(file_path, text)
            results.append(
                FixResult(path=file_path, applied=applied, failed=failed, text=text, changed=changed)
            )
        logger.info("Applied %d fix(es) in %d file(s)", sum(r.applied for r in results), len(results))
        return results
