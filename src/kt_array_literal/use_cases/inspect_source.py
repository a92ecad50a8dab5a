"""Use Case: Inspect Source - run the inspection over trees and files."""

import logging
from typing import TYPE_CHECKING

from kt_array_literal.domain.entities import Diagnostic, InspectionReport
from kt_array_literal.domain.problems import ProblemsHolder
from kt_array_literal.domain.protocols import (
    FileSystemProtocol,
    SourceParserProtocol,
    TelemetryPort,
)
from kt_array_literal.domain.rules import Checkable
from kt_array_literal.domain.syntax import NodeKind, SyntaxTree

if TYPE_CHECKING:
    from kt_array_literal.domain.config import ConfigurationLoader

logger = logging.getLogger(__name__)


class InspectSourceUseCase:
    """One analysis pass: feed every call expression of a tree to the rule, in document order."""

    def __init__(self, rule: Checkable) -> None:
        self.rule = rule

    def execute(self, tree: SyntaxTree) -> list[Diagnostic]:
        holder = ProblemsHolder(tree, self.rule.code)
        for node in tree.walk(NodeKind.CALL_EXPRESSION):
            self.rule.visit_call_expression(tree, node, holder)
        diagnostics = holder.results
        logger.debug("%s: %d diagnostic(s)", tree.path, len(diagnostics))
        return diagnostics


class InspectProjectUseCase:
    """Collect Kotlin files under a path, parse and inspect each one."""

    def __init__(
        self,
        inspect_source: InspectSourceUseCase,
        parser: SourceParserProtocol,
        filesystem: FileSystemProtocol,
        telemetry: TelemetryPort,
        config_loader: "ConfigurationLoader",
    ) -> None:
        self.inspect_source = inspect_source
        self.parser = parser
        self.filesystem = filesystem
        self.telemetry = telemetry
        self.config_loader = config_loader

    def collect_files(self, target_path: str) -> list[str]:
        """Kotlin files under target_path, minus configured exclusions, sorted."""
        files = self.filesystem.glob_kotlin_files(target_path)
        excluded = self.config_loader.exclude
        return sorted(f for f in files if not any(fragment in f for fragment in excluded))

    def parse_file(self, file_path: str) -> SyntaxTree | None:
        """Parse one file; unreadable files are reported and skipped."""
        try:
            source = self.filesystem.read_text(file_path)
        except (OSError, UnicodeDecodeError) as exc:
            self.telemetry.warning(f"Skipping {file_path}: {exc}")
            return None
        return self.parser.parse(source, file_path)

    def execute(self, target_path: str) -> list[InspectionReport]:
        self.telemetry.step(f"Inspecting Kotlin sources in: {target_path}")
        reports: list[InspectionReport] = []
        files = self.collect_files(target_path)
        for file_path in files:
            tree = self.parse_file(file_path)
            if tree is None:
                continue
            reports.append(InspectionReport(path=file_path, diagnostics=self.inspect_source.execute(tree)))
        total = sum(len(r.diagnostics) for r in reports)
        logger.info("Inspected %d file(s), %d diagnostic(s)", len(files), total)
        return reports
