"""Terminal and JSON reporters for inspection and fix results."""

import json

import typer

from kt_array_literal.domain.entities import Diagnostic, FixResult
from kt_array_literal.domain.protocols import InspectionReporterProtocol

OUTPUT_FORMATS = ("text", "json")


class TerminalInspectionReporter(InspectionReporterProtocol):
    """Prints one line per diagnostic (`path:line:col: [code] message`) or a JSON document."""

    def report_diagnostics(self, diagnostics: list[Diagnostic], output_format: str = "text") -> None:
        if output_format == "json":
            typer.echo(json.dumps([d.to_dict() for d in diagnostics], indent=2))
            return
        if not diagnostics:
            typer.secho("No array constructor calls to replace.", fg="green")
            return
        for diagnostic in diagnostics:
            location = typer.style(diagnostic.location, bold=True)
            code = typer.style(f"[{diagnostic.code}]", fg="yellow")
            typer.echo(f"{location}: {code} {diagnostic.message}")
        typer.echo(f"\nFound {len(diagnostics)} problem(s). Run 'kt-array-literal fix' to apply the quick fix.")

    def report_fixes(self, results: list[FixResult], output_format: str = "text") -> None:
        if output_format == "json":
            typer.echo(json.dumps([r.to_dict() for r in results], indent=2))
            return
        if not results:
            typer.secho("Nothing to fix.", fg="green")
            return
        for result in results:
            status = "rewritten" if result.changed else "unchanged"
            line = f"{result.path}: {result.applied} fix(es) applied, {status}"
            if result.failed:
                line += typer.style(f", {result.failed} failed", fg="red")
            typer.echo(line)
