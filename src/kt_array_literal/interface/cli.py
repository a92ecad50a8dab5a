"""CLI entry points - Thin Controller using Typer."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import typer

from kt_array_literal.domain.config import ConfigurationLoader
from kt_array_literal.domain.errors import ConfigurationError
from kt_array_literal.domain.protocols import (
    FileSystemProtocol,
    FixerGatewayProtocol,
    InspectionReporterProtocol,
    SemanticResolverProtocol,
    SourceParserProtocol,
    TelemetryPort,
    TreeFactoryProtocol,
)
from kt_array_literal.domain.rules.array_literal import ReplaceArrayOfWithLiteralRule
from kt_array_literal.infrastructure.reporters import OUTPUT_FORMATS
from kt_array_literal.interface.telemetry import configure_logging
from kt_array_literal.use_cases.apply_fixes import ApplyFixesUseCase
from kt_array_literal.use_cases.inspect_source import InspectProjectUseCase, InspectSourceUseCase


@dataclass(frozen=True)
class CLIDependencies:
    """Explicit dependencies for the CLI. All dependencies injected at composition root."""

    config_loader: ConfigurationLoader
    telemetry: TelemetryPort
    parser: SourceParserProtocol
    resolver: SemanticResolverProtocol
    factory: TreeFactoryProtocol
    filesystem: FileSystemProtocol
    fixer_gateway: FixerGatewayProtocol
    reporter: InspectionReporterProtocol


class CLIAppFactory:
    """Creates the Typer app."""

    @staticmethod
    def build_project_use_case(
        deps: CLIDependencies,
        language_version: Optional[str],
        force: Optional[bool],
    ) -> InspectProjectUseCase:
        """Merge CLI overrides into the config and wire the rule into the project inspection."""
        try:
            config = deps.config_loader.with_overrides(language_version=language_version, force=force)
        except ConfigurationError as exc:
            deps.telemetry.error(str(exc))
            raise typer.Exit(code=2) from exc
        rule = ReplaceArrayOfWithLiteralRule(
            resolver=deps.resolver,
            language_settings=config.language_settings,
            force=config.force,
            severity=config.severity,
        )
        if not rule.is_enabled():
            deps.telemetry.warning(
                f"Language version {config.language_version} does not allow array literals "
                "in annotations; nothing will be reported (use --force to override)."
            )
        return InspectProjectUseCase(
            inspect_source=InspectSourceUseCase(rule),
            parser=deps.parser,
            filesystem=deps.filesystem,
            telemetry=deps.telemetry,
            config_loader=config,
        )

    @staticmethod
    def validate_format(output_format: str) -> str:
        if output_format not in OUTPUT_FORMATS:
            raise typer.BadParameter(f"expected one of {', '.join(OUTPUT_FORMATS)}")
        return output_format

    @staticmethod
    def create_app(deps: CLIDependencies) -> typer.Typer:
        """Create the Typer app with explicitly injected dependencies."""
        app = typer.Typer(
            name="kt-array-literal",
            help="Replace arrayOf(...) calls in Kotlin annotations with array literals [...].",
            add_completion=False,
        )

        @app.callback()
        def main(
            verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
        ) -> None:
            configure_logging(verbose)

        @app.command()
        def check(
            path: Path = typer.Argument(Path("."), help="File or directory to inspect"),  # noqa: B008
            language_version: Optional[str] = typer.Option(
                None, "--language-version", help="Kotlin language version, e.g. 1.9"
            ),
            force: Optional[bool] = typer.Option(
                None, "--force/--no-force", help="Report even if the language version lacks the feature"
            ),
            output_format: str = typer.Option(
                "text", "--format", help="Output format: text or json", callback=CLIAppFactory.validate_format
            ),
        ) -> None:
            """Report array constructor calls that can be replaced with [...]."""
            use_case = CLIAppFactory.build_project_use_case(deps, language_version, force)
            reports = use_case.execute(str(path))
            diagnostics = [d for report in reports for d in report.diagnostics]
            deps.reporter.report_diagnostics(diagnostics, output_format=output_format)
            if diagnostics:
                raise typer.Exit(code=1)

        @app.command()
        def fix(
            path: Path = typer.Argument(Path("."), help="File or directory to fix"),  # noqa: B008
            language_version: Optional[str] = typer.Option(
                None, "--language-version", help="Kotlin language version, e.g. 1.9"
            ),
            force: Optional[bool] = typer.Option(
                None, "--force/--no-force", help="Rewrite even if the language version lacks the feature"
            ),
            dry_run: bool = typer.Option(False, "--dry-run", help="Print rewritten files instead of writing"),
            output_format: str = typer.Option(
                "text", "--format", help="Output format: text or json", callback=CLIAppFactory.validate_format
            ),
        ) -> None:
            """Replace array constructor calls in annotations with [...] in place."""
            inspect_project = CLIAppFactory.build_project_use_case(deps, language_version, force)
            use_case = ApplyFixesUseCase(
                inspect_project=inspect_project,
                factory=deps.factory,
                fixer_gateway=deps.fixer_gateway,
                telemetry=deps.telemetry,
            )
            results = use_case.execute(str(path), dry_run=dry_run)
            if dry_run and output_format == "text":
                for result in results:
                    typer.secho(f"--- {result.path}", bold=True)
                    typer.echo(result.text)
            deps.reporter.report_fixes(results, output_format=output_format)
            if any(result.failed for result in results):
                raise typer.Exit(code=1)

        return app
