from typing import TYPE_CHECKING, Optional, Protocol, Sequence

if TYPE_CHECKING:
    from kt_array_literal.domain.entities import (
        Diagnostic,
        LanguageFeature,
        ResolvedTarget,
        Severity,
    )
    from kt_array_literal.domain.syntax import SyntaxNode, SyntaxTree


class SemanticResolverProtocol(Protocol):
    """Resolves a call expression to its declaration. None when unresolved."""

    def resolve(self, tree: "SyntaxTree", call: "SyntaxNode") -> Optional["ResolvedTarget"]:
        ...


class LanguageSettingsProtocol(Protocol):
    """Language version settings of the analysed module."""

    def supports_feature(self, feature: "LanguageFeature") -> bool:
        ...


class TreeFactoryProtocol(Protocol):
    """Builds detached nodes for rewrites."""

    def create_collection_literal(
        self, tree: "SyntaxTree", elements: Sequence["SyntaxNode"]
    ) -> "SyntaxNode":
        """Build `[...]` from existing expression nodes, moving them under the literal."""
        ...


class RewriteActionProtocol(Protocol):
    """Deferred tree transformation attached to a diagnostic."""

    family_name: str

    @property
    def name(self) -> str:
        ...

    def apply_fix(self, tree: "SyntaxTree", factory: TreeFactoryProtocol) -> "SyntaxNode":
        """Rewrite the tree in place. Raises RewriteContractError when the tree changed."""
        ...


class DiagnosticSinkProtocol(Protocol):
    """Receives problems reported by inspections."""

    def register_problem(
        self,
        anchor: "SyntaxNode",
        message: str,
        severity: "Severity",
        fix: RewriteActionProtocol,
    ) -> "Diagnostic":
        ...


class SourceParserProtocol(Protocol):
    """Turns Kotlin source into a SyntaxTree."""

    def parse(self, source: str, path: str = "<memory>") -> "SyntaxTree":
        ...


class FixerGatewayProtocol(Protocol):
    """Persists rewritten source. Returns True if the file was modified."""

    def apply_fixes(self, file_path: str, new_text: str) -> bool:
        ...


class FileSystemProtocol(Protocol):
    """Protocol for filesystem operations - abstracts Path usage."""

    def glob_kotlin_files(self, path: str) -> list[str]:
        """Get all Kotlin files in path (recursive if directory)."""
        ...

    def read_text(self, path: str, encoding: str = "utf-8") -> str:
        ...

    def write_text(self, path: str, content: str, encoding: str = "utf-8") -> None:
        ...


class TelemetryPort(Protocol):
    """Protocol for telemetry/UI updates."""

    def step(self, message: str) -> None: ...
    def error(self, message: str) -> None: ...
    def warning(self, message: str) -> None: ...


class InspectionReporterProtocol(Protocol):
    """Renders inspection and fix results."""

    def report_diagnostics(self, diagnostics: list["Diagnostic"], output_format: str = "text") -> None:
        ...

    def report_fixes(self, results: list, output_format: str = "text") -> None:
        ...


__all__ = [
    "DiagnosticSinkProtocol",
    "FileSystemProtocol",
    "FixerGatewayProtocol",
    "InspectionReporterProtocol",
    "LanguageSettingsProtocol",
    "RewriteActionProtocol",
    "SemanticResolverProtocol",
    "SourceParserProtocol",
    "TelemetryPort",
    "TreeFactoryProtocol",
]
